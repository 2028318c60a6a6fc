"""
Application core: lifespan, CORS, middlewares and exception handlers.
"""

from rest_api.core.cors import configure_cors
from rest_api.core.exception_handlers import register_exception_handlers
from rest_api.core.lifespan import lifespan
from rest_api.core.middlewares import register_middlewares

__all__ = [
    "configure_cors",
    "lifespan",
    "register_exception_handlers",
    "register_middlewares",
]
