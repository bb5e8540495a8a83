from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import utcnow
from models.player import Player
from models.team import MatchTeam
from models.team_player import TeamPlayer
from .base import BaseRepository


def new_player_id() -> str:
    return uuid.uuid4().hex


class PlayerRepository(BaseRepository[Player]):
    """Repository for Player entities (identity by id, natural key by name_key)."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_name_key(self, name_key: str) -> Optional[Player]:
        """Get player by normalized name (uses unique index on name_key)."""
        stmt = select(Player).where(Player.name_key == name_key)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_on_match_roster(
        self, match_id: int, name_key: str
    ) -> Optional[Player]:
        """Find a player with this normalized name on either team of a match."""
        stmt = (
            select(Player)
            .join(TeamPlayer, TeamPlayer.player_id == Player.id)
            .join(MatchTeam, MatchTeam.id == TeamPlayer.team_id)
            .where(MatchTeam.match_id == match_id)
            .where(Player.name_key == name_key)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def insert_if_absent(self, name: str, name_key: str) -> Player:
        """
        Atomically create the player for name_key unless one exists, then return
        whichever row holds the key (ON CONFLICT DO NOTHING + read back).
        """
        insert = self.upsert_insert(Player)
        stmt = insert.values(
            id=new_player_id(),
            name=name,
            name_key=name_key,
            created_at_utc=utcnow(),
        ).on_conflict_do_nothing(index_elements=[Player.name_key])
        await self.session.execute(stmt)

        player = await self.get_by_name_key(name_key)
        if player is None:  # pragma: no cover - row was just written
            raise RuntimeError(f"Player {name_key!r} missing after insert")
        return player

    async def list_ids_owned_by(self, user_id: str) -> List[str]:
        """Ids of every player claimed by a user."""
        stmt = select(Player.id).where(Player.owner_user_id == user_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def claim_for_user(self, player_id: str, user_id: str) -> bool:
        """Attach an unclaimed player to a user. Returns True if it was claimed now."""
        stmt = (
            update(Player)
            .where(Player.id == player_id)
            .where(Player.owner_user_id.is_(None))
            .values(owner_user_id=user_id)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) > 0
