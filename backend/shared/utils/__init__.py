"""
Utilities module: Exceptions, schemas.
"""

from shared.utils.exceptions import (
    AppException,
    NotFoundError,
    ValidationError,
    InvalidFieldError,
    InvalidPageError,
    InvalidLimitError,
    InvalidInputError,
    DuplicateEntityError,
    ForeignKeyError,
    InternalError,
    QueryExecutionError,
    TransactionError,
    ConfigurationError,
)
from shared.utils.schemas import ErrorResponse, SuccessResponse

__all__ = [
    # exceptions
    "AppException",
    "NotFoundError",
    "ValidationError",
    "InvalidFieldError",
    "InvalidPageError",
    "InvalidLimitError",
    "InvalidInputError",
    "DuplicateEntityError",
    "ForeignKeyError",
    "InternalError",
    "QueryExecutionError",
    "TransactionError",
    "ConfigurationError",
    # schemas
    "ErrorResponse",
    "SuccessResponse",
]
