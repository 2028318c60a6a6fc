"""
Team endpoints.
"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from rest_api.routers._common import get_list_query, paginated, success
from rest_api.services.domain import TeamService
from shared.infrastructure.db import get_db
from shared.security.rate_limit import WRITE_LIMIT, limiter
from shared.utils.exceptions import ValidationError
from shared.utils.schemas import TeamCreate, TeamUpdate


router = APIRouter(prefix="/api/teams", tags=["teams"])


def get_team_service(db: Session = Depends(get_db)) -> TeamService:
    return TeamService(db)


@router.get("")
def list_teams(
    query: dict[str, Any] = Depends(get_list_query),
    service: TeamService = Depends(get_team_service),
) -> dict[str, Any]:
    """List teams with filtering, sorting, field selection, search and pagination."""
    return paginated("teams", service.get_all(query))


@router.post("", status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
def create_team(
    request: Request,
    body: TeamCreate,
    service: TeamService = Depends(get_team_service),
) -> dict[str, Any]:
    """Create a team, optionally with its initial players in the same transaction."""
    data = body.model_dump(mode="json", exclude={"players"})
    players = [player.model_dump(mode="json") for player in body.players or []]
    team = service.create_with_players(data, players)
    return success({"team": team}, "Team created successfully")


@router.get("/{team_id}")
def get_team(
    team_id: UUID,
    service: TeamService = Depends(get_team_service),
) -> dict[str, Any]:
    """Get a team with its players."""
    return success({"team": service.get_team_with_players(str(team_id))})


@router.patch("/{team_id}")
@limiter.limit(WRITE_LIMIT)
def update_team(
    request: Request,
    team_id: UUID,
    body: TeamUpdate,
    service: TeamService = Depends(get_team_service),
) -> dict[str, Any]:
    """Update a team's name or shirt color."""
    data = body.model_dump(mode="json", exclude_unset=True)
    if not data:
        raise ValidationError("No fields to update")
    team = service.update_one(str(team_id), data)
    return success({"team": team}, "Team updated successfully")


@router.delete("/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(WRITE_LIMIT)
def delete_team(
    request: Request,
    team_id: UUID,
    service: TeamService = Depends(get_team_service),
) -> None:
    """Delete a team. Fails while players still belong to it."""
    service.delete_one(str(team_id))


@router.get("/{team_id}/stats")
def get_team_stats(
    team_id: UUID,
    service: TeamService = Depends(get_team_service),
) -> dict[str, Any]:
    """Salary total, player count and average salary of a team."""
    stats = service.calculate_team_stats(str(team_id))
    return success({"stats": stats.model_dump()})


@router.get("/{team_id}/salary")
def get_team_salary(
    team_id: UUID,
    service: TeamService = Depends(get_team_service),
) -> dict[str, Any]:
    """Total salary of a team's roster."""
    return success({"total_salary": service.calculate_team_salary(str(team_id))})
