"""
Base Service Classes.

Uniform CRUD facade over one entity. Routers stay thin and every entity
gets the same not-found handling, logging and transaction support.

Architecture:
    Router (thin) → Service (business logic) → ModelDelegate (data access) → Model

Usage:
    from rest_api.services.base_service import EntityService, EntitySpec

    PLAYER = EntitySpec(name="player", model=Player, label="Player")

    class PlayerService(EntityService[Player]):
        def __init__(self, db: Session, *, delegate=None):
            super().__init__(db, PLAYER, delegate=delegate)

    service = PlayerService(db)
    page = service.get_all({"age": {"gte": "20"}, "sort": "-salary"})
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rest_api.models import Base
from rest_api.services.crud.repository import ModelDelegate, RecordNotFoundError
from rest_api.services.query import PageResult, QueryTranslator
from shared.config.logging import get_logger
from shared.infrastructure.db import transaction_scope
from shared.utils.exceptions import (
    AppException,
    ConfigurationError,
    NotFoundError,
    TransactionError,
)

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
ServiceT = TypeVar("ServiceT", bound="EntityService")
ResultT = TypeVar("ResultT")

# Assigned by the data store, never taken from callers
STORE_MANAGED_FIELDS = frozenset({"id", "created_at", "updated_at"})


@dataclass(frozen=True)
class EntitySpec:
    """
    What a service needs to know about its entity.

    Attributes:
        name: Field registry name ("team").
        model: SQLAlchemy model class.
        label: Human-readable name for messages ("Team").
        identity_field: Primary key attribute.
        relations: Relationships callers may eager-load.
    """

    name: str
    model: type[Base]
    label: str
    identity_field: str = "id"
    relations: tuple[str, ...] = ()


class EntityService(Generic[ModelT]):
    """
    CRUD operations for one entity, returning plain dict records.

    The data store delegate is a constructor dependency; transaction()
    builds a second instance around a non-committing delegate on the same
    session.
    """

    def __init__(
        self,
        db: Session,
        spec: EntitySpec,
        *,
        delegate: ModelDelegate[ModelT] | None = None,
    ):
        self._db = db
        self._spec = spec
        self._delegate = delegate or ModelDelegate(
            db,
            spec.model,
            entity_name=spec.name,
            identity_field=spec.identity_field,
        )

    @property
    def db(self) -> Session:
        return self._db

    @property
    def spec(self) -> EntitySpec:
        return self._spec

    @property
    def delegate(self) -> ModelDelegate[ModelT]:
        return self._delegate

    @property
    def entity_name(self) -> str:
        return self._spec.label

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_one(self, entity_id: Any, include: Iterable[str] | None = None) -> dict[str, Any]:
        """
        Get a record by identity.

        Raises:
            NotFoundError: If no record has the identity.
            ConfigurationError: If include names a relation the entity does not expose.
        """
        include = self._checked_include(include)
        record = self._delegate.find_unique(entity_id, include=include)
        if record is None:
            raise NotFoundError(self.entity_name, entity_id)
        return record

    def get_all(
        self,
        query_params: Mapping[str, Any] | None = None,
        *,
        keyword_field: str = "name",
        include: Iterable[str] | None = None,
    ) -> PageResult:
        """
        Filtered, sorted, projected, searched and paginated list.

        Raises:
            InvalidFieldError, InvalidInputError, InvalidPageError,
            InvalidLimitError: On a malformed query.
            QueryExecutionError: If the data store fails.
            ConfigurationError: If include names a relation the entity does not expose.
        """
        include = self._checked_include(include)
        translator = (
            QueryTranslator(self._delegate, query_params)
            .filter()
            .sort()
            .limit_fields()
            .keyword_search(keyword_field)
        )
        if include:
            translator.include_relations(include)
        result = translator.execute()

        logger.debug(
            "Listed records",
            entity=self._spec.name,
            returned=len(result.data),
            total=result.pagination.total,
        )
        return result

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create_one(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Insert a record. Identity and timestamps are assigned by the store."""
        record = self._delegate.create(self._writable(data))
        logger.info(
            f"{self.entity_name} created",
            entity=self._spec.name,
            entity_id=record.get(self._spec.identity_field),
        )
        return record

    def update_one(self, entity_id: Any, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Apply a partial update and return the updated record.

        Raises:
            NotFoundError: If no record has the identity.
        """
        try:
            record = self._delegate.update(entity_id, self._writable(data))
        except RecordNotFoundError:
            raise NotFoundError(self.entity_name, entity_id) from None

        logger.info(
            f"{self.entity_name} updated",
            entity=self._spec.name,
            entity_id=entity_id,
            fields=sorted(self._writable(data)),
        )
        return record

    def delete_one(self, entity_id: Any) -> dict[str, Any]:
        """
        Delete a record and return its state before deletion.

        Raises:
            NotFoundError: If no record has the identity.
        """
        try:
            record = self._delegate.delete(entity_id)
        except RecordNotFoundError:
            raise NotFoundError(self.entity_name, entity_id) from None

        logger.info(f"{self.entity_name} deleted", entity=self._spec.name, entity_id=entity_id)
        return record

    # =========================================================================
    # Transactions
    # =========================================================================

    def transaction(self: ServiceT, callback: Callable[[ServiceT], ResultT]) -> ResultT:
        """
        Run callback with a service whose writes share one transaction.

        Everything the callback does through the scoped service commits
        together or not at all. Application errors and constraint violations
        propagate unchanged; anything else is wrapped in TransactionError.
        """
        scoped = self._scoped(self._delegate.bind(autocommit=False))
        try:
            with transaction_scope(self._db):
                return callback(scoped)
        except (AppException, IntegrityError):
            raise
        except Exception as exc:
            logger.error(
                "Transaction rolled back",
                entity=self._spec.name,
                error=str(exc),
                exc_info=True,
            )
            raise TransactionError(self._spec.name) from exc

    def _scoped(self: ServiceT, delegate: ModelDelegate[ModelT]) -> ServiceT:
        """Copy of this service around another delegate."""
        scoped = copy.copy(self)
        scoped._delegate = delegate
        return scoped

    def _checked_include(self, include: Iterable[str] | None) -> tuple[str, ...]:
        names = tuple(include or ())
        hidden = [name for name in names if name not in self._spec.relations]
        if hidden:
            raise ConfigurationError(
                f"{self.entity_name} does not expose relation(s): {', '.join(hidden)}",
                entity=self._spec.name,
            )
        return names

    @staticmethod
    def _writable(data: Mapping[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in data.items() if key not in STORE_MANAGED_FIELDS}
