"""
Boundary exception handlers.

Every error leaves the API in the same envelope:

    {"status": "fail" | "error", "message": "...", "error_code": "...",
     "details": {...}, "timestamp": "..."}

"fail" is used for 4xx, "error" for 5xx. Outside development,
non-operational errors are reduced to a generic message.
"""

import traceback
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.config.constants import ErrorCodes
from shared.config.logging import rest_api_logger as logger
from shared.config.settings import settings
from shared.utils.exceptions import (
    AppException,
    DuplicateEntityError,
    ForeignKeyError,
    InternalError,
    ValidationError,
)

GENERIC_MESSAGE = "Something went wrong"

# PostgreSQL SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def _envelope(
    status_code: int,
    message: str,
    error_code: str | None,
    details: Any = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "status": "fail" if status_code < 500 else "error",
        "message": message,
        "error_code": error_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if details is not None:
        body["details"] = details
    return body


def render_app_exception(exc: AppException) -> JSONResponse:
    """Serialize an AppException, hiding internals in production."""
    if not exc.is_operational and settings.is_production:
        content = _envelope(exc.status_code, GENERIC_MESSAGE, exc.error_code)
    else:
        content = _envelope(exc.status_code, exc.message, exc.error_code, exc.details)
        if not settings.is_production and exc.__cause__ is not None:
            cause = exc.__cause__
            content["debug"] = {
                "cause": f"{type(cause).__name__}: {cause}",
                "stack": traceback.format_exception(type(cause), cause, cause.__traceback__),
            }
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


def classify_integrity_error(exc: IntegrityError) -> AppException:
    """Map a constraint violation to the matching client error."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    text = str(orig).lower()

    if sqlstate == UNIQUE_VIOLATION or "unique" in text or "duplicate" in text:
        return DuplicateEntityError()
    if sqlstate == FOREIGN_KEY_VIOLATION or "foreign key" in text:
        return ForeignKeyError()
    return ValidationError("Constraint violation")


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    return render_app_exception(exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework HTTP errors (unknown route, wrong method) in the standard envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_envelope(exc.status_code, str(exc.detail), None),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Invalid body, path or query parameters are client errors (400)."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    logger.warning("Request validation failed", path=request.url.path, errors=errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            status.HTTP_400_BAD_REQUEST,
            "Invalid input data",
            ErrorCodes.VALIDATION_ERROR,
            {"errors": errors},
        ),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    app_exc = classify_integrity_error(exc)
    app_exc.__cause__ = exc
    return render_app_exception(app_exc)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    app_exc = InternalError(
        "Database error",
        error_code=ErrorCodes.DATABASE_ERROR,
        path=request.url.path,
        error=str(exc),
    )
    app_exc.__cause__ = exc
    return render_app_exception(app_exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=exc,
    )
    message = GENERIC_MESSAGE if settings.is_production else str(exc) or GENERIC_MESSAGE
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR, message, ErrorCodes.INTERNAL_ERROR
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install all boundary handlers on the application."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
