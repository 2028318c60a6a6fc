"""
Roster Models: Player.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, IdentityMixin, TimestampMixin

if TYPE_CHECKING:
    from .team import Team


class Player(IdentityMixin, TimestampMixin, Base):
    """
    A player on a team's roster.
    """

    __tablename__ = "player"

    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    position: Mapped[str] = mapped_column(String(20), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    salary: Mapped[float] = mapped_column(Float, nullable=False)
    team_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("team.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Relationships
    team: Mapped["Team"] = relationship(back_populates="players")

    def __repr__(self) -> str:
        return f"<Player(id={self.id}, name='{self.name}', team_id={self.team_id})>"
