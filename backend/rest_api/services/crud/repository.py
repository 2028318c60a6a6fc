"""
Data store delegate for one model.

Runs validated query descriptors and record writes against a SQLAlchemy
session and hands back plain dicts, so nothing above this layer touches
ORM instances or lazy loading.

Usage:
    from rest_api.services.crud.repository import ModelDelegate

    teams = ModelDelegate(db, Team, entity_name="team")

    teams.find_unique(team_id, include=["players"])
    teams.count({"shirt_color": {"eq": "red"}})
    teams.create({"name": "Liverpool", "shirt_color": "red"})

    # Writes commit immediately unless autocommit is off
    in_tx = teams.bind(autocommit=False)
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, delete, func, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, load_only, selectinload
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.sql import Select

from rest_api.models import Base
from rest_api.services.query.descriptor import Order, Predicate, QueryDescriptor
from shared.config.constants import ComparisonOperators, PredicateOperators, SortDirection
from shared.config.logging import get_logger
from shared.utils.exceptions import ConfigurationError, InvalidInputError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

_COMPARATORS: dict[str, Callable[[Any, Any], ColumnElement[bool]]] = {
    PredicateOperators.EQ: operator.eq,
    ComparisonOperators.GT: operator.gt,
    ComparisonOperators.GTE: operator.ge,
    ComparisonOperators.LT: operator.lt,
    ComparisonOperators.LTE: operator.le,
}


class RecordNotFoundError(LookupError):
    """Update or delete targeted an identity that does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} does not exist")


class ModelDelegate(Generic[ModelT]):
    """
    Query and write access to one model.

    With autocommit on, every write commits on success and rolls back on
    failure. With it off, writes are only flushed and the caller owns the
    transaction.
    """

    def __init__(
        self,
        session: Session,
        model: type[ModelT],
        *,
        entity_name: str,
        identity_field: str = "id",
        autocommit: bool = True,
    ):
        self._session = session
        self._model = model
        self._entity_name = entity_name
        self._identity_field = identity_field
        self._autocommit = autocommit
        mapper = inspect(model)
        self._columns = {column.key: column for column in mapper.columns}
        self._relationships = {rel.key: rel for rel in mapper.relationships}

    @property
    def session(self) -> Session:
        return self._session

    @property
    def model(self) -> type[ModelT]:
        return self._model

    @property
    def entity_name(self) -> str:
        return self._entity_name

    @property
    def identity_field(self) -> str:
        return self._identity_field

    @property
    def autocommit(self) -> bool:
        return self._autocommit

    def bind(self, *, autocommit: bool) -> ModelDelegate[ModelT]:
        """Same model and session with a different commit mode."""
        return ModelDelegate(
            self._session,
            self._model,
            entity_name=self._entity_name,
            identity_field=self._identity_field,
            autocommit=autocommit,
        )

    def check_relations(self, names: Iterable[str]) -> None:
        """
        Raises:
            ConfigurationError: If a name is not a relationship of the model.
        """
        unknown = [name for name in names if name not in self._relationships]
        if unknown:
            raise ConfigurationError(
                f"Unknown relation(s) for {self._entity_name}: {', '.join(unknown)}",
                entity=self._entity_name,
            )

    # =========================================================================
    # Reads
    # =========================================================================

    def find_unique(
        self, entity_id: Any, include: Iterable[str] | None = None
    ) -> dict[str, Any] | None:
        """Record with the given identity, or None."""
        relations = tuple(include or ())
        query = select(self._model).where(self._identity_column == self._coerce_identity(entity_id))
        query = self._apply_include(query, relations)
        instance = self._session.scalar(query)
        if instance is None:
            return None
        return self._to_dict(instance, include=relations)

    def find_many(self, descriptor: QueryDescriptor) -> list[dict[str, Any]]:
        """Run a descriptor: filter, order, project, slice, include."""
        query = select(self._model).where(*self._where(descriptor.predicate))
        query = query.order_by(*self._order_by(descriptor.order))

        if descriptor.projection is not None:
            query = query.options(
                load_only(*(getattr(self._model, name) for name in self._projected(descriptor.projection)))
            )
        query = self._apply_include(query, descriptor.include)
        query = query.offset(descriptor.window.skip).limit(descriptor.window.take)

        instances = self._session.scalars(query).all()
        return [
            self._to_dict(instance, fields=descriptor.projection, include=descriptor.include)
            for instance in instances
        ]

    def count(self, predicate: Predicate | None = None) -> int:
        """Number of records matching the predicate."""
        query = select(func.count()).select_from(self._model).where(*self._where(predicate or {}))
        return self._session.scalar(query) or 0

    # =========================================================================
    # Writes
    # =========================================================================

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        instance = self._model(**self._prepare(data))
        self._session.add(instance)
        return self._persist("create", instance)

    def update(self, entity_id: Any, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Raises:
            RecordNotFoundError: If no record has the identity.
        """
        instance = self._get_or_raise(entity_id)
        for key, value in self._prepare(data).items():
            setattr(instance, key, value)
        return self._persist("update", instance, entity_id=entity_id)

    def delete(self, entity_id: Any) -> dict[str, Any]:
        """
        Delete a record and return its state before deletion.

        Raises:
            RecordNotFoundError: If no record has the identity.
        """
        instance = self._get_or_raise(entity_id)
        snapshot = self._to_dict(instance)
        self._session.expunge(instance)

        statement = (
            delete(self._model)
            .where(self._identity_column == self._coerce_identity(entity_id))
            .execution_options(synchronize_session=False)
        )
        result = self._write("delete", lambda: self._session.execute(statement))
        if result.rowcount == 0:
            raise RecordNotFoundError(self._entity_name, entity_id)
        return snapshot

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    @property
    def _identity_column(self):
        return getattr(self._model, self._identity_field)

    def _get_or_raise(self, entity_id: Any) -> ModelT:
        instance = self._session.get(self._model, self._coerce_identity(entity_id))
        if instance is None:
            raise RecordNotFoundError(self._entity_name, entity_id)
        return instance

    def _persist(
        self, operation: str, instance: ModelT, *, entity_id: Any = None
    ) -> dict[str, Any]:
        def flush_and_read() -> dict[str, Any]:
            self._session.flush()
            self._session.refresh(instance)
            return self._to_dict(instance)

        return self._write(operation, flush_and_read, entity_id=entity_id)

    def _write(self, operation: str, call: Callable[[], Any], *, entity_id: Any = None) -> Any:
        """
        Run a write, committing when autocommit is on.

        Raises:
            RecordNotFoundError: If the row was deleted after it was loaded.
        """
        try:
            result = call()
            if self._autocommit:
                self._session.commit()
            return result
        except StaleDataError:
            if self._autocommit:
                self._session.rollback()
            raise RecordNotFoundError(self._entity_name, entity_id) from None
        except SQLAlchemyError as exc:
            logger.warning(
                "Write failed",
                entity=self._entity_name,
                operation=operation,
                error=str(exc.orig) if getattr(exc, "orig", None) is not None else str(exc),
            )
            if self._autocommit:
                self._session.rollback()
            raise

    def _prepare(self, data: Mapping[str, Any]) -> dict[str, Any]:
        unknown = [key for key in data if key not in self._columns]
        if unknown:
            raise InvalidInputError(
                f"Unknown field(s) for {self._entity_name}: {', '.join(unknown)}",
                entity=self._entity_name,
            )
        return {key: self._coerce(key, value) for key, value in data.items()}

    def _coerce_identity(self, entity_id: Any) -> Any:
        return self._coerce(self._identity_field, entity_id)

    def _coerce(self, name: str, value: Any) -> Any:
        """Convert a raw (usually string) value to the column's Python type."""
        if value is None:
            return None
        try:
            python_type = self._columns[name].type.python_type
        except NotImplementedError:
            return value
        if isinstance(value, python_type) and not (python_type is int and isinstance(value, bool)):
            return value
        try:
            if python_type is datetime:
                return datetime.fromisoformat(str(value))
            if python_type is bool:
                lowered = str(value).strip().lower()
                if lowered not in ("true", "false", "1", "0"):
                    raise ValueError(value)
                return lowered in ("true", "1")
            if python_type is str:
                return str(value)
            return python_type(str(value).strip())
        except (TypeError, ValueError):
            raise InvalidInputError(
                f"Invalid value '{value}' for field '{name}'",
                entity=self._entity_name,
                field=name,
            ) from None

    def _where(self, predicate: Predicate) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = []
        for name, constraints in predicate.items():
            column = self._columns[name]
            for op, value in constraints.items():
                if op == PredicateOperators.ICONTAINS:
                    clauses.append(column.icontains(str(value), autoescape=True))
                elif op == PredicateOperators.EQ and value is None:
                    clauses.append(column.is_(None))
                elif op in _COMPARATORS:
                    clauses.append(_COMPARATORS[op](column, self._coerce(name, value)))
                else:
                    raise InvalidInputError(
                        f"Unsupported operator '{op}' for '{name}'",
                        entity=self._entity_name,
                        field=name,
                    )
        return clauses

    def _order_by(self, order: Order) -> list[Any]:
        clauses = [
            self._columns[name].desc()
            if direction == SortDirection.DESC
            else self._columns[name].asc()
            for name, direction in order
        ]
        # Stable pages need a total order
        if self._identity_field not in {name for name, _ in order}:
            clauses.append(self._identity_column.asc())
        return clauses

    def _projected(self, fields: Iterable[str]) -> list[str]:
        names = set(fields)
        names.add(self._identity_field)
        return [key for key in self._columns if key in names]

    def _apply_include(self, query: Select, relations: Iterable[str]) -> Select:
        relations = tuple(relations)
        if relations:
            self.check_relations(relations)
            query = query.options(
                *(selectinload(getattr(self._model, name)) for name in relations)
            )
        return query

    def _to_dict(
        self,
        instance: Base,
        *,
        fields: Iterable[str] | None = None,
        include: Iterable[str] = (),
    ) -> dict[str, Any]:
        keys = self._projected(fields) if fields is not None else list(self._columns)
        record = {key: getattr(instance, key) for key in keys}
        for name in include:
            related = getattr(instance, name)
            if self._relationships[name].uselist:
                record[name] = [_columns_of(child) for child in related]
            else:
                record[name] = _columns_of(related) if related is not None else None
        return record


def _columns_of(instance: Base) -> dict[str, Any]:
    return {column.key: getattr(instance, column.key) for column in inspect(type(instance)).columns}
