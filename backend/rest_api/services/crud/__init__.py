"""
CRUD data access.

Provides:
- ModelDelegate: Query descriptor execution and record writes for one model
- RecordNotFoundError: Raised by update/delete on a missing identity
"""

from .repository import ModelDelegate, RecordNotFoundError

__all__ = [
    "ModelDelegate",
    "RecordNotFoundError",
]
