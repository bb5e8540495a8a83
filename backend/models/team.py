from __future__ import annotations

from typing import List

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class MatchTeam(Base):
    """One side of a match (position 1 or 2); owned by its match."""

    __tablename__ = "match_teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    match_id: Mapped[int] = mapped_column(
        ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    goals: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    match: Mapped["Match"] = relationship(back_populates="teams")
    roster: Mapped[List["TeamPlayer"]] = relationship(
        back_populates="team",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TeamPlayer.slot",
    )

    __table_args__ = (
        UniqueConstraint("match_id", "position", name="uq_match_team_position"),
        CheckConstraint("position IN (1, 2)", name="ck_match_team_position"),
        CheckConstraint("goals >= 0", name="ck_match_team_goals"),
    )
