"""
Player identity resolution: map a display name to a stable player id.

Policy: look among the players already on the given match's roster first,
then fall back to a global lookup-or-create on the normalized name. Creation
is an atomic insert-if-absent, so concurrent raters typing the same new name
end up with one player.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from repositories.player_repo import PlayerRepository
from services.errors import ValidationFailedError

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 255


def normalize_name(name: Optional[str]) -> str:
    """Collapse whitespace runs and strip; names are whitespace-insignificant."""
    return " ".join((name or "").split())


class PlayerIdentityResolver:
    """Resolves names to player ids; one instance per request (memoized)."""

    def __init__(self, session: AsyncSession) -> None:
        self._players = PlayerRepository(session)
        self._resolved: Dict[str, str] = {}

    async def resolve(self, name: str, match_id: Optional[int] = None) -> str:
        """Return the id of the player with this name, creating the player if needed."""
        key = normalize_name(name)
        if not key:
            raise ValidationFailedError("Player name must not be blank")
        if len(key) > NAME_MAX_LENGTH:
            raise ValidationFailedError(
                f"Player name longer than {NAME_MAX_LENGTH} characters"
            )

        cached = self._resolved.get(key)
        if cached is not None:
            return cached

        player = None
        if match_id is not None:
            player = await self._players.find_on_match_roster(match_id, key)
        if player is None:
            player = await self._players.get_by_name_key(key)
        if player is None:
            player = await self._players.insert_if_absent(name=key, name_key=key)
            logger.info("Created player id=%s name=%r", player.id, key)

        self._resolved[key] = player.id
        return player.id

    async def resolve_many(
        self, names: Iterable[str], match_id: Optional[int] = None
    ) -> List[str]:
        """Resolve a batch of names, preserving order."""
        return [await self.resolve(n, match_id=match_id) for n in names]
