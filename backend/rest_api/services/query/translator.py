"""
Query Translator.

Turns a raw query-string mapping into a validated QueryDescriptor and runs
it through a data store delegate. Parsing steps are cheap and fail fast
with client-facing errors; execution costs one count and one page query.

Usage:
    result = (
        QueryTranslator(delegate, {"age": {"gte": "20"}, "sort": "-salary", "page": "2"})
        .filter()
        .sort()
        .limit_fields()
        .keyword_search()
        .execute()
    )
    result.data        # list of records
    result.pagination  # PaginationResult

Each step may be called on its own and gives the same descriptor when
repeated with unchanged input.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from rest_api.services.query.descriptor import KeywordConstraint, Predicate, QueryDescriptor
from rest_api.services.query.field_registry import FieldRegistry, field_registry
from rest_api.services.query.pagination import PaginationResult, Window, compute_pagination
from shared.config.constants import (
    ComparisonOperators,
    Limits,
    PredicateOperators,
    QueryKeys,
    SortDirection,
)
from shared.config.logging import query_logger as logger
from shared.config.settings import settings
from shared.infrastructure.db import transaction_scope
from shared.utils.exceptions import (
    InvalidInputError,
    InvalidLimitError,
    InvalidPageError,
    QueryExecutionError,
)

if TYPE_CHECKING:
    from rest_api.services.crud.repository import ModelDelegate

T = TypeVar("T")

DEFAULT_SORT_FIELD = "created_at"
DEFAULT_KEYWORD_FIELD = "name"


@dataclass
class PageResult:
    """One page of records plus its pagination metadata."""

    data: list[dict[str, Any]]
    pagination: PaginationResult

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data, "pagination": self.pagination.to_dict()}


class QueryTranslator:
    """
    Fluent builder of a QueryDescriptor with terminal execution.

    The translator owns its descriptor; every step mutates it and returns
    the translator so steps can be chained.
    """

    def __init__(
        self,
        delegate: ModelDelegate,
        query_params: Mapping[str, Any] | None = None,
        *,
        registry: FieldRegistry = field_registry,
        default_limit: int | None = None,
        max_limit: int | None = None,
    ):
        self._delegate = delegate
        self._query: dict[str, Any] = dict(query_params or {})
        self._registry = registry
        self._default_limit = default_limit or settings.default_page_size
        self._max_limit = max_limit or settings.max_page_size
        self._descriptor = QueryDescriptor(entity=delegate.entity_name)
        self._pagination: PaginationResult | None = None

        # Unknown entities fail here rather than halfway through a chain
        self._registry.fields_for(self.entity)

    @property
    def entity(self) -> str:
        return self._descriptor.entity

    @property
    def descriptor(self) -> QueryDescriptor:
        return self._descriptor

    @property
    def pagination(self) -> PaginationResult | None:
        return self._pagination

    # =========================================================================
    # Parsing Steps
    # =========================================================================

    def filter(self) -> QueryTranslator:
        """
        Build predicate constraints from every non-reserved key.

        Scalars become equality constraints; mappings must only use
        gt/gte/lt/lte, several of which combine into a range.

        Raises:
            InvalidFieldError: Listing every unknown field.
            InvalidInputError: On an unsupported operator or value shape.
        """
        data_items = [
            (key, value)
            for key, value in self._query.items()
            if key not in QueryKeys.RESERVED
        ]
        self._registry.validate(self.entity, (key for key, _ in data_items))

        constraints: Predicate = {}
        for key, value in data_items:
            if isinstance(value, Mapping):
                unsupported = [op for op in value if op not in ComparisonOperators.ALL]
                if unsupported:
                    raise InvalidInputError(
                        f"Unsupported operator(s) for '{key}': {', '.join(map(str, unsupported))}. "
                        f"Use one of: {', '.join(sorted(ComparisonOperators.ALL))}",
                        field=key,
                    )
                if value:
                    constraints[key] = dict(value)
            elif isinstance(value, (list, tuple, set)):
                raise InvalidInputError(
                    f"Field '{key}' was given more than one value", field=key
                )
            else:
                constraints[key] = {PredicateOperators.EQ: value}

        self._descriptor.predicate.update(constraints)
        return self

    def sort(self) -> QueryTranslator:
        """
        Parse `sort` into ordered (field, direction) pairs.

        "-salary,name" orders by salary descending, then name ascending.
        Without `sort` the newest records come first.

        Raises:
            InvalidFieldError: Listing every unknown field.
        """
        raw = self._query.get(QueryKeys.SORT)
        tokens = self._split_tokens(raw)

        if not tokens:
            self._descriptor.order = self._default_order()
            return self

        order: list[tuple[str, str]] = []
        for token in tokens:
            if token.startswith(SortDirection.DESC_PREFIX):
                order.append((token[len(SortDirection.DESC_PREFIX):], SortDirection.DESC))
            else:
                order.append((token, SortDirection.ASC))

        self._registry.validate(self.entity, (name for name, _ in order))

        seen: set[str] = set()
        self._descriptor.order = [
            (name, direction)
            for name, direction in order
            if not (name in seen or seen.add(name))
        ]
        return self

    def limit_fields(self) -> QueryTranslator:
        """
        Parse `fields` into a projection. Absent means all fields.

        Raises:
            InvalidFieldError: Listing every unknown field.
        """
        tokens = self._split_tokens(self._query.get(QueryKeys.FIELDS))
        if not tokens:
            self._descriptor.projection = None
            return self

        self._registry.validate(self.entity, tokens)
        self._descriptor.projection = frozenset(tokens)
        return self

    def keyword_search(self, field: str = DEFAULT_KEYWORD_FIELD) -> QueryTranslator:
        """
        Add a case-insensitive substring match of `keyword` on `field`.

        Constraints on other fields are kept; a constraint already on
        `field` is replaced.

        Raises:
            InvalidInputError: If the keyword is blank.
            InvalidFieldError: If `field` is not queryable.
        """
        raw = self._query.get(QueryKeys.KEYWORD)
        if raw is None:
            return self

        term = str(raw).strip()
        if not term:
            raise InvalidInputError("Keyword must not be empty", field=field)

        self._registry.validate(self.entity, [field])
        self._descriptor.predicate[field] = {PredicateOperators.ICONTAINS: term}
        self._descriptor.keyword_constraint = KeywordConstraint(field=field, term=term)
        return self

    def include_relations(self, names: Iterable[str] | None) -> QueryTranslator:
        """Eager-load the given relations with every row."""
        relations = tuple(names or ())
        self._delegate.check_relations(relations)
        self._descriptor.include = relations
        return self

    # =========================================================================
    # Pagination
    # =========================================================================

    def paginate(self) -> QueryTranslator:
        """
        Resolve page/limit, count matching rows and compute the window.

        Raises:
            InvalidPageError: page is not an integer >= 1.
            InvalidLimitError: limit is not an integer in [1, max_limit].
            QueryExecutionError: If the count query fails.
        """
        raw_page = self._query.get(QueryKeys.PAGE)
        page = self._parse_int(raw_page, Limits.DEFAULT_PAGE)
        if page is None or page < 1:
            raise InvalidPageError(raw_page)

        raw_limit = self._query.get(QueryKeys.LIMIT)
        limit = self._parse_int(raw_limit, self._default_limit)
        if limit is None or not Limits.MIN_PAGE_SIZE <= limit <= self._max_limit:
            raise InvalidLimitError(raw_limit, Limits.MIN_PAGE_SIZE, self._max_limit)

        total = self._run("count", lambda: self._delegate.count(self._descriptor.predicate))

        self._pagination = compute_pagination(page, limit, total, max_limit=self._max_limit)
        self._descriptor.window = Window.for_page(page, limit)
        return self

    # =========================================================================
    # Execution
    # =========================================================================

    def execute(self) -> PageResult:
        """
        Run the page query. Paginates with defaults if paginate() was skipped.

        Raises:
            QueryExecutionError: If the data store fails.
        """
        if self._pagination is None:
            self.paginate()

        logger.debug(
            "Executing list query",
            entity=self.entity,
            predicate=self._descriptor.predicate,
            order=self._descriptor.order_as_dicts(),
            projection=sorted(self._descriptor.projection) if self._descriptor.projection else None,
            skip=self._descriptor.window.skip,
            take=self._descriptor.window.take,
        )
        rows = self._run("find_many", lambda: self._delegate.find_many(self._descriptor))
        return PageResult(data=rows, pagination=self._pagination)

    def execute_with_transaction(self) -> PageResult:
        """Same as execute(), inside one data store transaction. Joins an enclosing one."""
        with transaction_scope(self._delegate.session):
            return self.execute()

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _default_order(self) -> list[tuple[str, str]]:
        fields = self._registry.fields_for(self.entity)
        if DEFAULT_SORT_FIELD in fields:
            return [(DEFAULT_SORT_FIELD, SortDirection.DESC)]
        return [(self._delegate.identity_field, SortDirection.DESC)]

    @staticmethod
    def _split_tokens(raw: Any) -> list[str]:
        if raw is None:
            return []
        return [token.strip() for token in str(raw).split(",") if token.strip()]

    @staticmethod
    def _parse_int(raw: Any, default: int) -> int | None:
        """Integer value of raw, default when absent, None when malformed."""
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return default
        if isinstance(raw, bool):
            return None
        if isinstance(raw, int):
            return raw
        try:
            return int(str(raw).strip())
        except ValueError:
            return None

    def _run(self, operation: str, call: Callable[[], T]) -> T:
        try:
            return call()
        except SQLAlchemyError as exc:
            logger.error(
                "List query failed",
                entity=self.entity,
                operation=operation,
                error=str(exc),
                exc_info=True,
            )
            raise QueryExecutionError(self.entity, operation) from exc
