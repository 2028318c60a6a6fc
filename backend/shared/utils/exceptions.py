"""
Centralized HTTP exceptions for consistent error handling.

Every exception logs itself on construction and carries the data the
boundary handlers need to build an error envelope: HTTP status, a
machine-readable error code, optional details and whether the error is
operational (caused by the request and safe to describe to the client).

Usage:
    from shared.utils.exceptions import NotFoundError, InvalidFieldError

    raise NotFoundError("Team", team_id)
    raise InvalidFieldError("team", ["age", "salary"])
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.constants import ErrorCodes
from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str,
        *,
        is_operational: bool = True,
        details: dict[str, Any] | None = None,
        log_level: str | None = None,
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        self.error_code = error_code
        self.is_operational = is_operational
        self.details = details

        if log_level is None:
            log_level = "warning" if is_operational else "error"
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, error_code=error_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)

    @property
    def message(self) -> str:
        return self.detail


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Team", team_id)
    """

    def __init__(self, entity: str, entity_id: Any = None, **log_context: Any):
        if entity_id is not None:
            detail = f"No {entity.lower()} found with ID {entity_id}"
        else:
            detail = f"No {entity.lower()} found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=ErrorCodes.RECORD_NOT_FOUND,
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Validation failed", errors=[...])
    """

    def __init__(
        self,
        detail: str,
        *,
        error_code: str = ErrorCodes.VALIDATION_ERROR,
        details: dict[str, Any] | None = None,
        **log_context: Any,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code,
            details=details,
            **log_context,
        )


class InvalidFieldError(ValidationError):
    """One or more field names are not queryable on the entity."""

    def __init__(self, entity: str, invalid_fields: list[str], **log_context: Any):
        self.entity = entity
        self.invalid_fields = list(invalid_fields)
        fields_str = ", ".join(self.invalid_fields)
        super().__init__(
            f"Invalid field(s) for {entity}: {fields_str}",
            error_code=ErrorCodes.INVALID_FIELD,
            details={"entity": entity, "invalid_fields": self.invalid_fields},
            **log_context,
        )


class InvalidPageError(ValidationError):
    """Page number is not a positive integer."""

    def __init__(self, page: Any, **log_context: Any):
        self.page = page
        super().__init__(
            f"Page must be a positive integer, got '{page}'",
            error_code=ErrorCodes.INVALID_PAGE,
            details={"page": page},
            **log_context,
        )


class InvalidLimitError(ValidationError):
    """Page size is outside the allowed range."""

    def __init__(self, limit: Any, min_limit: int, max_limit: int, **log_context: Any):
        self.limit = limit
        super().__init__(
            f"Limit must be an integer between {min_limit} and {max_limit}, got '{limit}'",
            error_code=ErrorCodes.INVALID_LIMIT,
            details={"limit": limit, "min": min_limit, "max": max_limit},
            **log_context,
        )


class InvalidInputError(ValidationError):
    """Malformed query input (empty keyword, unknown operator, bad value)."""

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(detail, error_code=ErrorCodes.INVALID_INPUT, **log_context)


class DuplicateEntityError(ValidationError):
    """A unique constraint was violated."""

    def __init__(self, entity: str | None = None, **log_context: Any):
        if entity:
            detail = f"{entity} already exists"
        else:
            detail = "Duplicate field value"
        super().__init__(detail, error_code=ErrorCodes.DUPLICATE_ENTRY, **log_context)


class ForeignKeyError(ValidationError):
    """A foreign key constraint was violated."""

    def __init__(self, detail: str = "Referenced record does not exist or is still in use", **log_context: Any):
        super().__init__(detail, error_code=ErrorCodes.FOREIGN_KEY_ERROR, **log_context)


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500). Never operational.

    Usage:
        raise InternalError("Failed to build roster report", team_id=team_id)
    """

    def __init__(
        self,
        detail: str = "Something went wrong",
        *,
        error_code: str = ErrorCodes.INTERNAL_ERROR,
        **log_context: Any,
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code=error_code,
            is_operational=False,
            **log_context,
        )


class QueryExecutionError(InternalError):
    """A validated query failed inside the data store."""

    def __init__(self, entity: str, operation: str, **log_context: Any):
        super().__init__(
            f"Database error while running {operation} on {entity}",
            error_code=ErrorCodes.DATABASE_ERROR,
            entity=entity,
            operation=operation,
            **log_context,
        )


class TransactionError(InternalError):
    """A transactional unit of work failed and was rolled back."""

    def __init__(self, entity: str, **log_context: Any):
        super().__init__(
            f"Transaction on {entity} failed and was rolled back",
            error_code=ErrorCodes.TRANSACTION_ERROR,
            entity=entity,
            **log_context,
        )


class ConfigurationError(InternalError):
    """Wiring fault, e.g. an entity missing from the field registry."""

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            detail,
            error_code=ErrorCodes.CONFIGURATION_ERROR,
            log_level="critical",
            **log_context,
        )
