from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Canonical SQLAlchemy base for matches, rosters and ratings."""

    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
