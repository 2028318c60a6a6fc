"""
Rate limiting using slowapi.
Protects the API from request floods, keyed by client IP.

Every route gets settings.rate_limit_default through SlowAPIMiddleware;
write endpoints add a stricter limit:

    from shared.security.rate_limit import limiter, WRITE_LIMIT

    @router.post("")
    @limiter.limit(WRITE_LIMIT)
    def create_team(request: Request, ...):
        ...
"""

from datetime import datetime, timezone

from fastapi import Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from shared.config.constants import ErrorCodes
from shared.config.logging import get_logger
from shared.config.settings import settings

logger = get_logger(__name__)

WRITE_LIMIT = settings.rate_limit_writes

# In-memory storage; limits are per process
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Custom handler for rate limit exceeded errors.
    Returns the standard error envelope with retry information.
    """
    logger.warning(
        "Rate limit exceeded",
        path=request.url.path,
        client=get_remote_address(request),
        limit=str(exc.detail),
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "status": "fail",
            "message": "Too many requests. Please try again later.",
            "error_code": ErrorCodes.RATE_LIMITED,
            "details": {"limit": str(exc.detail)},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
