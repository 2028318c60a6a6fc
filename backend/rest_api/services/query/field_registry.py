"""
Field Registry.

Static allow-list of the attribute names a client may reference (filter,
sort, select, search) per entity. Built once at import from the ORM column
metadata and never mutated afterwards, so it needs no locking.

Usage:
    from rest_api.services.query.field_registry import field_registry

    field_registry.fields_for("team")
    field_registry.validate("player", ["age", "salary"])
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from sqlalchemy import inspect

from rest_api.models import Base, Player, Team
from shared.utils.exceptions import ConfigurationError, InvalidFieldError


class FieldRegistry:
    """Immutable mapping of entity name to its queryable field names."""

    def __init__(self, entries: Mapping[str, Iterable[str]]):
        self._entries: Mapping[str, frozenset[str]] = MappingProxyType(
            {name: frozenset(fields) for name, fields in entries.items()}
        )

    @classmethod
    def from_models(cls, models: Mapping[str, type[Base]]) -> FieldRegistry:
        """Build a registry from the mapped columns of each model."""
        return cls(
            {
                name: (column.key for column in inspect(model).columns)
                for name, model in models.items()
            }
        )

    @property
    def entities(self) -> frozenset[str]:
        return frozenset(self._entries)

    def fields_for(self, entity: str) -> frozenset[str]:
        """
        Return the allowed field names of an entity.

        Raises:
            ConfigurationError: If the entity is not registered.
        """
        try:
            return self._entries[entity]
        except KeyError:
            raise ConfigurationError(
                f"Entity '{entity}' is not registered in the field registry",
                entity=entity,
            ) from None

    def invalid_fields(self, entity: str, names: Iterable[str]) -> list[str]:
        """Names not allowed for the entity, in input order, without duplicates."""
        allowed = self.fields_for(entity)
        invalid: list[str] = []
        for name in names:
            if name not in allowed and name not in invalid:
                invalid.append(name)
        return invalid

    def validate(self, entity: str, names: Iterable[str]) -> None:
        """
        Check every name against the entity's allow-list.

        Raises:
            InvalidFieldError: Listing every offending name.
        """
        invalid = self.invalid_fields(entity, names)
        if invalid:
            raise InvalidFieldError(entity, invalid)


field_registry = FieldRegistry.from_models({"team": Team, "player": Player})
