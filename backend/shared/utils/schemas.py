"""
Shared Pydantic schemas used across the application.

Payload schemas validate request bodies and normalize their types before
they reach the services; envelope schemas describe the response shapes.
"""

from datetime import datetime
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from shared.config.constants import Limits


# =============================================================================
# Common Types
# =============================================================================

ShirtColor = Literal[
    "red", "blue", "green", "yellow", "white",
    "black", "orange", "purple", "pink", "brown",
]
Position = Literal["Goalkeeper", "Defender", "Midfielder", "Forward"]

TeamName = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=Limits.MIN_TEAM_NAME_LENGTH,
        max_length=Limits.MAX_TEAM_NAME_LENGTH,
        pattern=r"^[a-zA-Z\s]+$",
    ),
]
PlayerName = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=Limits.MIN_PLAYER_NAME_LENGTH,
        max_length=Limits.MAX_PLAYER_NAME_LENGTH,
        pattern=r"^[a-zA-Z\s]+$",
    ),
]
PlayerAge = Annotated[int, Field(ge=Limits.MIN_PLAYER_AGE, le=Limits.MAX_PLAYER_AGE)]
Salary = Annotated[float, Field(gt=0)]


# =============================================================================
# Player Schemas
# =============================================================================


class PlayerBase(BaseModel):
    """Fields shared by every player payload."""

    model_config = ConfigDict(extra="forbid")

    name: PlayerName
    age: PlayerAge
    salary: Salary
    position: Position


class PlayerCreate(PlayerBase):
    """Create player request body."""

    team_id: UUID


class PlayerUpdate(BaseModel):
    """Partial player update. Only the fields sent are changed."""

    model_config = ConfigDict(extra="forbid")

    name: PlayerName | None = None
    age: PlayerAge | None = None
    salary: Salary | None = None
    position: Position | None = None
    team_id: UUID | None = None


# =============================================================================
# Team Schemas
# =============================================================================


class TeamCreate(BaseModel):
    """Create team request body, optionally with its initial players."""

    model_config = ConfigDict(extra="forbid")

    name: TeamName
    shirt_color: ShirtColor
    players: list[PlayerBase] | None = None


class TeamUpdate(BaseModel):
    """Partial team update."""

    model_config = ConfigDict(extra="forbid")

    name: TeamName | None = None
    shirt_color: ShirtColor | None = None


class TeamStats(BaseModel):
    """Salary aggregate of a team's roster."""

    total_salary: float
    player_count: int
    average_salary: float


# =============================================================================
# Query String
# =============================================================================


class ListQueryOptions(BaseModel):
    """
    Format checks for the reserved keys of a list query string.

    Range checks on page/limit and field allow-listing happen in the
    query translator, which knows the target entity.
    """

    sort: str | None = Field(default=None, pattern=r"^[-\w,]+$")
    fields: str | None = Field(default=None, pattern=r"^[\w,]+$")
    page: str | None = None
    limit: str | None = None
    keyword: str | None = Field(default=None, max_length=100)


# =============================================================================
# Envelopes
# =============================================================================


class SuccessResponse(BaseModel):
    """Standard success envelope."""

    status: Literal["success"] = "success"
    message: str = "success"
    data: Any = None


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    status: Literal["fail", "error"]
    message: str
    error_code: str | None = None
    details: Any = None
    timestamp: datetime
