"""
Query Descriptor.

The validated, store-independent representation of a list request. The
query translator owns one descriptor and fills it step by step; the data
store delegate reads it to build the actual SQL.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rest_api.services.query.pagination import Window
from shared.config.constants import SortDirection

# field -> {operator: value}; operators from PredicateOperators.ALL
Predicate = dict[str, dict[str, Any]]

# [(field, "asc" | "desc"), ...]
Order = list[tuple[str, str]]


@dataclass(frozen=True)
class KeywordConstraint:
    """Case-insensitive substring match of `term` against `field`."""

    field: str
    term: str


@dataclass
class QueryDescriptor:
    """
    Accumulated list query for one entity.

    Attributes:
        entity: Field registry name of the target entity.
        predicate: Conjunction of field constraints.
        order: Ordered (field, direction) pairs; empty means store default.
        projection: Field names to return, or None for all fields.
        keyword_constraint: Keyword search, also present in predicate.
        window: Skip/take slice.
        include: Relations to eager-load with each row.
    """

    entity: str
    predicate: Predicate = field(default_factory=dict)
    order: Order = field(default_factory=list)
    projection: frozenset[str] | None = None
    keyword_constraint: KeywordConstraint | None = None
    window: Window = field(default_factory=Window)
    include: tuple[str, ...] = ()

    def referenced_fields(self) -> set[str]:
        """Every field name the descriptor references."""
        names = set(self.predicate)
        names.update(name for name, _ in self.order)
        if self.projection is not None:
            names.update(self.projection)
        if self.keyword_constraint is not None:
            names.add(self.keyword_constraint.field)
        return names

    def order_as_dicts(self) -> list[dict[str, str]]:
        """Order in the `[{field: direction}]` form used by logs and tests."""
        return [{name: direction} for name, direction in self.order]

    @staticmethod
    def is_descending(direction: str) -> bool:
        return direction == SortDirection.DESC
