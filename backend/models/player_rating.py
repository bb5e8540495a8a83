"""Player rating: one rater's score for one player in one match."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow


class PlayerRating(Base):
    """
    Score in [0, 10] given by ``owner_player_id`` to ``destination_player_id``.

    At most one row per (match, owner, destination): re-rating overwrites.
    """

    __tablename__ = "player_ratings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    match_id: Mapped[int] = mapped_column(
        ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True
    )
    owner_player_id: Mapped[str] = mapped_column(
        ForeignKey("players.id"), nullable=False
    )
    destination_player_id: Mapped[str] = mapped_column(
        ForeignKey("players.id"), nullable=False, index=True
    )
    value: Mapped[float] = mapped_column(Float, nullable=False)
    created_at_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    match: Mapped["Match"] = relationship(back_populates="ratings")

    __table_args__ = (
        UniqueConstraint(
            "match_id",
            "owner_player_id",
            "destination_player_id",
            name="uq_player_rating_match_owner_destination",
        ),
        CheckConstraint("value >= 0 AND value <= 10", name="ck_player_rating_value"),
    )
