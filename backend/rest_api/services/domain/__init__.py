"""
Domain Services.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    ModelDelegate (data access)
        ↓
    Model (entity)

Usage:
    from rest_api.services.domain import TeamService

    # In router
    service = TeamService(db)
    team = service.get_team_with_players(team_id)
"""

from .player_service import PLAYER_SPEC, PlayerService
from .team_service import TEAM_SPEC, TeamService

__all__ = [
    "PLAYER_SPEC",
    "PlayerService",
    "TEAM_SPEC",
    "TeamService",
]
