"""
Player endpoints.
"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from rest_api.routers._common import get_list_query, paginated, success
from rest_api.services.domain import PlayerService
from shared.infrastructure.db import get_db
from shared.security.rate_limit import WRITE_LIMIT, limiter
from shared.utils.exceptions import ValidationError
from shared.utils.schemas import PlayerCreate, PlayerUpdate


router = APIRouter(prefix="/api/players", tags=["players"])


def get_player_service(db: Session = Depends(get_db)) -> PlayerService:
    return PlayerService(db)


@router.get("")
def list_players(
    query: dict[str, Any] = Depends(get_list_query),
    service: PlayerService = Depends(get_player_service),
) -> dict[str, Any]:
    """List players, e.g. ?age[gte]=20&position=Forward&sort=-salary."""
    return paginated("players", service.get_all(query))


@router.post("", status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
def create_player(
    request: Request,
    body: PlayerCreate,
    service: PlayerService = Depends(get_player_service),
) -> dict[str, Any]:
    """Create a player on an existing team."""
    player = service.create_one(body.model_dump(mode="json"))
    return success({"player": player}, "Player created successfully")


@router.get("/{player_id}")
def get_player(
    player_id: UUID,
    service: PlayerService = Depends(get_player_service),
) -> dict[str, Any]:
    return success({"player": service.get_one(str(player_id))})


@router.patch("/{player_id}")
@limiter.limit(WRITE_LIMIT)
def update_player(
    request: Request,
    player_id: UUID,
    body: PlayerUpdate,
    service: PlayerService = Depends(get_player_service),
) -> dict[str, Any]:
    """Update a player. Moving to another team is a team_id change."""
    data = body.model_dump(mode="json", exclude_unset=True)
    if not data:
        raise ValidationError("No fields to update")
    player = service.update_one(str(player_id), data)
    return success({"player": player}, "Player updated successfully")


@router.delete("/{player_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(WRITE_LIMIT)
def delete_player(
    request: Request,
    player_id: UUID,
    service: PlayerService = Depends(get_player_service),
) -> None:
    service.delete_one(str(player_id))
