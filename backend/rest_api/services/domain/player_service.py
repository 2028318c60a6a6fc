"""
Player Service.

Generic CRUD over players. Team membership is a plain foreign key; a
team_id that does not exist surfaces as a foreign key violation.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from rest_api.models import Player
from rest_api.services.base_service import EntityService, EntitySpec
from rest_api.services.crud.repository import ModelDelegate

PLAYER_SPEC = EntitySpec(name="player", model=Player, label="Player", relations=("team",))


class PlayerService(EntityService[Player]):
    """Service for player management."""

    def __init__(self, db: Session, *, delegate: ModelDelegate[Player] | None = None):
        super().__init__(db, PLAYER_SPEC, delegate=delegate)
