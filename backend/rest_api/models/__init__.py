"""
SQLAlchemy ORM Models Package.

Models are organized into modules:
- base: Base class, IdentityMixin and TimestampMixin
- team: Team
- player: Player
"""

from .base import Base, IdentityMixin, TimestampMixin, new_uuid, utcnow
from .team import Team
from .player import Player

__all__ = [
    "Base",
    "IdentityMixin",
    "TimestampMixin",
    "new_uuid",
    "utcnow",
    "Team",
    "Player",
]
