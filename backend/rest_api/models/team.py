"""
Roster Models: Team.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, IdentityMixin, TimestampMixin

if TYPE_CHECKING:
    from .player import Player


class Team(IdentityMixin, TimestampMixin, Base):
    """
    A team owning zero or more players.
    Deleting a team that still has players is rejected by the database.
    """

    __tablename__ = "team"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    shirt_color: Mapped[str] = mapped_column(String(20), nullable=False)

    # Relationships
    players: Mapped[list["Player"]] = relationship(
        back_populates="team",
        passive_deletes="all",
        order_by="Player.created_at",
    )

    def __repr__(self) -> str:
        return f"<Team(id={self.id}, name='{self.name}')>"
