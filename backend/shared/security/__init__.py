"""
Security module: rate limiting.
"""

from shared.security.rate_limit import WRITE_LIMIT, limiter, rate_limit_exceeded_handler

__all__ = [
    "WRITE_LIMIT",
    "limiter",
    "rate_limit_exceeded_handler",
]
