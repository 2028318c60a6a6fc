"""
Services module for business logic.

- domain/: Entity services (TeamService, PlayerService) - USE THESE
- crud/: Data store delegate over SQLAlchemy models
- query/: Query string translation, field allow-list, pagination

Usage:
    from rest_api.services.domain import TeamService
    service = TeamService(db)
    page = service.get_all({"sort": "-created_at", "page": "2"})
"""

from .base_service import EntityService, EntitySpec
from .crud import ModelDelegate, RecordNotFoundError
from .domain import PlayerService, TeamService
from .query import PageResult, QueryTranslator, compute_pagination, field_registry

__all__ = [
    "EntityService",
    "EntitySpec",
    "ModelDelegate",
    "PageResult",
    "PlayerService",
    "QueryTranslator",
    "RecordNotFoundError",
    "TeamService",
    "compute_pagination",
    "field_registry",
]
