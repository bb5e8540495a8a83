from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class TeamPlayer(Base):
    """Roster entry: a player on a match team; ``slot`` keeps roster order."""

    __tablename__ = "team_players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    team_id: Mapped[int] = mapped_column(
        ForeignKey("match_teams.id", ondelete="CASCADE"), nullable=False, index=True
    )
    player_id: Mapped[str] = mapped_column(
        ForeignKey("players.id"), nullable=False, index=True
    )
    slot: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    team: Mapped["MatchTeam"] = relationship(back_populates="roster")
    player: Mapped["Player"] = relationship(lazy="joined")

    __table_args__ = (
        UniqueConstraint("team_id", "player_id", name="uq_team_player"),
    )
