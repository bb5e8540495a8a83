from __future__ import annotations

from datetime import date as date_type, datetime
from typing import List

from sqlalchemy import Date, DateTime, Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow


class Match(Base):
    """One recorded game between two teams.

    ``result`` and ``rating`` are derived values (from goals and from the
    rating set respectively) stored for listing.
    """

    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    result: Mapped[str] = mapped_column(String(16), nullable=False)  # Victoria | Derrota | Empate
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=5.0)
    created_at_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    teams: Mapped[List["MatchTeam"]] = relationship(
        back_populates="match",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MatchTeam.position",
    )
    ratings: Mapped[List["PlayerRating"]] = relationship(
        back_populates="match",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (Index("ix_match_created", "created_at_utc"),)
