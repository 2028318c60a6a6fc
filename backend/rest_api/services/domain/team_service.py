"""
Team Service.

Generic CRUD over teams plus the roster aggregate: a team with its
players, salary statistics and creation of a team together with its
initial players.

Usage:
    from rest_api.services.domain import TeamService

    service = TeamService(db)
    team = service.get_team_with_players(team_id)
    stats = service.calculate_team_stats(team_id)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy.orm import Session

from rest_api.models import Player, Team
from rest_api.services.base_service import EntityService, EntitySpec
from rest_api.services.crud.repository import ModelDelegate
from rest_api.services.domain.player_service import PLAYER_SPEC
from shared.config.logging import get_logger
from shared.utils.schemas import TeamStats

logger = get_logger(__name__)

TEAM_SPEC = EntitySpec(name="team", model=Team, label="Team", relations=("players",))


class TeamService(EntityService[Team]):
    """
    Service for team management.

    Business rules:
    - A team with players cannot be deleted
    - Stats are computed from the roster in memory, no extra query
    """

    def __init__(
        self,
        db: Session,
        *,
        delegate: ModelDelegate[Team] | None = None,
        player_delegate: ModelDelegate[Player] | None = None,
    ):
        super().__init__(db, TEAM_SPEC, delegate=delegate)
        self._players = player_delegate or ModelDelegate(
            db, PLAYER_SPEC.model, entity_name=PLAYER_SPEC.name
        )

    def get_team_with_players(self, team_id: Any) -> dict[str, Any]:
        """
        Team record with a `players` list.

        Raises:
            NotFoundError: If the team does not exist.
        """
        return self.get_one(team_id, include=["players"])

    def calculate_team_stats(self, team_id: Any) -> TeamStats:
        """
        Salary total, head count and average of a team's roster.

        Raises:
            NotFoundError: If the team does not exist.
        """
        team = self.get_team_with_players(team_id)
        return self.stats_for(team["players"])

    def calculate_team_salary(self, team_id: Any) -> float:
        """Total salary of a team's roster."""
        return self.calculate_team_stats(team_id).total_salary

    @staticmethod
    def stats_for(players: Iterable[Mapping[str, Any]]) -> TeamStats:
        salaries = [player["salary"] for player in players]
        total = float(sum(salaries))
        count = len(salaries)
        return TeamStats(
            total_salary=total,
            player_count=count,
            average_salary=total / count if count > 0 else 0.0,
        )

    def create_with_players(
        self,
        data: Mapping[str, Any],
        players: Iterable[Mapping[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """
        Create a team and its initial players atomically.

        Returns:
            The team record with its `players` list.
        """
        roster = [dict(player) for player in players or ()]
        if not roster:
            team = self.create_one(data)
            team["players"] = []
            return team

        def create_all(scoped: TeamService) -> dict[str, Any]:
            team = scoped.create_one(data)
            team["players"] = [
                scoped._players.create({**player, "team_id": team["id"]})
                for player in roster
            ]
            return team

        team = self.transaction(create_all)
        logger.info(
            "Team created with roster",
            team_id=team["id"],
            player_count=len(team["players"]),
        )
        return team

    def _scoped(self, delegate: ModelDelegate[Team]) -> TeamService:
        scoped = super()._scoped(delegate)
        scoped._players = self._players.bind(autocommit=delegate.autocommit)
        return scoped
