"""Player rating repository: atomic upsert keyed by (match, owner, destination)."""

from __future__ import annotations

from typing import Dict, Iterable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import utcnow
from models.player_rating import PlayerRating
from .base import BaseRepository


class RatingRepository(BaseRepository[PlayerRating]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def upsert(
        self,
        match_id: int,
        owner_player_id: str,
        destination_player_id: str,
        value: float,
    ) -> None:
        """
        Insert the rating or overwrite the value of the existing one.
        One INSERT ... ON CONFLICT DO UPDATE statement, never read-then-write.
        Match existence and roster membership are checked by the caller.
        """
        now = utcnow()
        insert = self.upsert_insert(PlayerRating)
        stmt = insert.values(
            match_id=match_id,
            owner_player_id=owner_player_id,
            destination_player_id=destination_player_id,
            value=float(value),
            created_at_utc=now,
            updated_at_utc=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[
                PlayerRating.match_id,
                PlayerRating.owner_player_id,
                PlayerRating.destination_player_id,
            ],
            set_={
                "value": stmt.excluded.value,
                "updated_at_utc": stmt.excluded.updated_at_utc,
            },
        )
        await self.session.execute(stmt)

    async def list_by_match(self, match_id: int) -> List[PlayerRating]:
        """All ratings of a match, refreshed from the database."""
        stmt = (
            select(PlayerRating)
            .where(PlayerRating.match_id == match_id)
            .order_by(PlayerRating.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_matches(self, match_ids: Iterable[int]) -> Dict[int, List[PlayerRating]]:
        """Ratings for several matches in one query, grouped by match id."""
        ids = list(match_ids)
        grouped: Dict[int, List[PlayerRating]] = {mid: [] for mid in ids}
        if not ids:
            return grouped
        stmt = (
            select(PlayerRating)
            .where(PlayerRating.match_id.in_(ids))
            .order_by(PlayerRating.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        for rating in result.scalars().all():
            grouped.setdefault(rating.match_id, []).append(rating)
        return grouped
