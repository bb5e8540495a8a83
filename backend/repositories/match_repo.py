from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from models.match import Match
from models.team import MatchTeam
from models.team_player import TeamPlayer
from .base import BaseRepository

# Only these columns may be overwritten through a partial update.
UPDATABLE_FIELDS = ("name", "date", "result", "rating")


@dataclass
class TeamSpec:
    """Team to persist with a new match: name, goals and ordered player ids."""

    name: str
    goals: int
    player_ids: List[str] = field(default_factory=list)


def _with_rosters(stmt):
    return stmt.options(
        selectinload(Match.teams)
        .selectinload(MatchTeam.roster)
        .joinedload(TeamPlayer.player)
    )


class MatchRepository(BaseRepository[Match]):
    """Repository for Match entities and their teams/rosters."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_id(self, id: int) -> Optional[Match]:
        """Get match by ID with teams, rosters and players loaded."""
        stmt = _with_rosters(select(Match).where(Match.id == id)).execution_options(
            populate_existing=True
        )
        result = await self.session.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def list_recent(
        self,
        player_ids: Optional[Iterable[str]] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Match]:
        """
        List matches newest first. With player_ids, only matches where any of
        those players is on a roster.
        """
        stmt = select(Match)
        if player_ids is not None:
            ids = list(player_ids)
            if not ids:
                return []
            rostered = (
                select(MatchTeam.match_id)
                .join(TeamPlayer, TeamPlayer.team_id == MatchTeam.id)
                .where(TeamPlayer.player_id.in_(ids))
            )
            stmt = stmt.where(Match.id.in_(rostered))
        stmt = (
            _with_rosters(stmt)
            .order_by(Match.created_at_utc.desc(), Match.id.desc())
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.unique().scalars().all())

    async def create_match(
        self,
        *,
        name: str,
        match_date: date,
        result: str,
        rating: float,
        teams: Sequence[TeamSpec],
    ) -> Match:
        """Persist a match with both teams and their rosters (flushed, not committed)."""
        if len(teams) != 2:
            raise ValueError(f"A match needs exactly two teams, got {len(teams)}")
        match = Match(name=name, date=match_date, result=result, rating=rating)
        for position, spec in enumerate(teams, start=1):
            team = MatchTeam(position=position, name=spec.name, goals=spec.goals)
            team.roster = [
                TeamPlayer(player_id=player_id, slot=slot)
                for slot, player_id in enumerate(spec.player_ids)
            ]
            match.teams.append(team)
        await self.add(match)
        await self.session.flush()
        return match

    async def update_fields(self, match: Match, fields: Dict[str, Any]) -> Match:
        """Overwrite name/date/result/rating only; other keys are rejected."""
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")
        for key, value in fields.items():
            setattr(match, key, value)
        self.session.add(match)
        await self.session.flush()
        return match

    async def delete_by_id(self, id: int) -> bool:
        """Delete a match and (via cascade) its teams, rosters and ratings."""
        match = await super().get_by_id(Match, id)
        if match is None:
            return False
        await self.delete(match)
        await self.session.flush()
        return True

    async def roster_player_ids(self, match_id: int) -> List[str]:
        """Player ids on either team of a match, team1 first, in roster order."""
        stmt = (
            select(TeamPlayer.player_id)
            .join(MatchTeam, MatchTeam.id == TeamPlayer.team_id)
            .where(MatchTeam.match_id == match_id)
            .order_by(MatchTeam.position, TeamPlayer.slot)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
