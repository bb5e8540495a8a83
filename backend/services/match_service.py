"""
Match lifecycle: create, read, update metadata, delete, and submit ratings.

Every operation runs inside the caller's request-scoped session; all
validation happens before the first write, and any raised error rolls the
whole request back.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from core.dependencies import Viewer
from domain.ratings import (
    DEFAULT_RATING,
    RatingEntry,
    aggregate,
    derive_result,
    mean,
    rating_band,
)
from models.match import Match
from models.player_rating import PlayerRating
from repositories.match_repo import MatchRepository, TeamSpec
from repositories.player_repo import PlayerRepository
from repositories.rating_repo import RatingRepository
from repositories.user_repo import UserRepository
from schemas.match import (
    CreateMatchIn,
    MatchOut,
    PlayerOut,
    PlayerRatingIn,
    RosterEntryIn,
    TeamOut,
    UpdateMatchIn,
)
from services.errors import (
    MatchNotFoundError,
    OwnerNotOnRosterError,
    ValidationFailedError,
)
from services.identity_service import PlayerIdentityResolver, normalize_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RatingTarget:
    """Destination of one rating: a roster id when known, else a name to resolve."""

    name: str
    value: float
    player_id: Optional[str] = None


# ------------------------------- Views ------------------------------- #


def _rating_entries(ratings: Iterable[PlayerRating]) -> List[RatingEntry]:
    return [
        RatingEntry(
            owner_player_id=r.owner_player_id,
            destination_player_id=r.destination_player_id,
            value=r.value,
        )
        for r in ratings
    ]


def build_match_view(
    match: Match,
    ratings: Sequence[PlayerRating],
    viewer_player_ids: Optional[Iterable[str]] = None,
) -> MatchOut:
    """Aggregate a loaded match into its validated outbound representation."""
    entries = _rating_entries(ratings)
    teams = {team.position: team for team in match.teams}
    roster_ids = [tp.player_id for team in match.teams for tp in team.roster]
    agg = aggregate(
        entries,
        roster_ids,
        stored_rating=match.rating,
        viewer_player_ids=viewer_player_ids,
    )

    def _team_out(position: int) -> TeamOut:
        team = teams.get(position)
        if team is None:
            return TeamOut(name="", goals=0, players=[])
        players = []
        for tp in team.roster:
            value = agg.per_player.get(tp.player_id, DEFAULT_RATING)
            players.append(
                PlayerOut(
                    id=tp.player.id,
                    name=tp.player.name,
                    rating=value,
                    rating_band=rating_band(value),
                    ratings_received=agg.rating_counts.get(tp.player_id, 0),
                )
            )
        return TeamOut(name=team.name, goals=team.goals, players=players)

    return MatchOut(
        id=match.id,
        date=match.date,
        result=match.result,
        name=match.name,
        rating=agg.match_rating,
        rating_band=rating_band(agg.match_rating),
        viewer_scoped=agg.viewer_scoped,
        team1=_team_out(1),
        team2=_team_out(2),
        players_who_submitted_ratings=sorted({e.owner_player_id for e in entries}),
    )


async def _viewer_player_ids(session: AsyncSession, viewer: Viewer) -> List[str]:
    if not viewer.is_authenticated:
        return []
    return await PlayerRepository(session).list_ids_owned_by(viewer.user_id)


async def _ensure_viewer_user(session: AsyncSession, viewer: Viewer) -> None:
    """Just-in-time creation of the authenticated user's record."""
    if viewer.is_authenticated:
        await UserRepository(session).ensure_user(
            viewer.user_id, email=viewer.email, name=viewer.name
        )


async def _load_view(session: AsyncSession, match_id: int, viewer: Viewer) -> MatchOut:
    match = await MatchRepository(session).get_by_id(match_id)
    if match is None:
        raise MatchNotFoundError(match_id)
    ratings = await RatingRepository(session).list_by_match(match_id)
    return build_match_view(match, ratings, await _viewer_player_ids(session, viewer))


# ------------------------------- Queries ------------------------------- #


async def get_match(session: AsyncSession, match_id: int, viewer: Viewer) -> MatchOut:
    """Match view with per-player ratings; match rating scoped to the viewer's players."""
    return await _load_view(session, match_id, viewer)


async def list_matches(
    session: AsyncSession,
    viewer: Viewer,
    mine: bool = False,
    limit: int = 100,
    offset: int = 0,
) -> List[MatchOut]:
    """Matches newest first; with ``mine`` only those where the viewer's players played."""
    if mine and not viewer.is_authenticated:
        raise ValidationFailedError("mine=true requires an authenticated viewer (X-User-Id)")
    viewer_ids = await _viewer_player_ids(session, viewer)

    matches = await MatchRepository(session).list_recent(
        player_ids=viewer_ids if mine else None,
        limit=limit,
        offset=offset,
    )
    grouped = await RatingRepository(session).list_by_matches(m.id for m in matches)
    return [build_match_view(m, grouped.get(m.id, []), viewer_ids) for m in matches]


# ------------------------------- Ratings ------------------------------- #


async def _apply_ratings(
    session: AsyncSession,
    match: Match,
    owner_player_id: str,
    targets: Sequence[_RatingTarget],
    resolver: PlayerIdentityResolver,
) -> int:
    """
    Upsert one rater's ratings and persist the recomputed match rating.

    The owner must already be validated as a roster member. Destinations are
    taken by roster id when given, else resolved by name (created if new).
    Returns the number of ratings written.
    """
    matches = MatchRepository(session)
    ratings = RatingRepository(session)

    roster = set(await matches.roster_player_ids(match.id))
    by_destination: Dict[str, float] = {}
    for target in targets:
        if target.player_id and target.player_id in roster:
            destination = target.player_id
        else:
            destination = await resolver.resolve(target.name, match_id=match.id)
        if destination == owner_player_id:
            logger.debug("Skipping self-rating of player %s in match %s", owner_player_id, match.id)
            continue
        # Last entry for a destination wins within one batch.
        by_destination[destination] = target.value

    for destination, value in by_destination.items():
        await ratings.upsert(match.id, owner_player_id, destination, value)

    all_values = [r.value for r in await ratings.list_by_match(match.id)]
    new_rating = mean(all_values)
    if new_rating is not None and new_rating != match.rating:
        await matches.update_fields(match, {"rating": new_rating})

    logger.info(
        "Applied %d rating(s) from player %s to match %s (match rating=%.3f)",
        len(by_destination),
        owner_player_id,
        match.id,
        match.rating,
    )
    return len(by_destination)


async def submit_ratings(
    session: AsyncSession,
    match_id: int,
    owner_player_id: Optional[str],
    entries: Sequence[PlayerRatingIn],
    viewer: Viewer,
) -> MatchOut:
    """
    Accept a batch of ratings from one rater and return the refreshed match.

    Raises ValidationFailedError when the owner is missing, MatchNotFoundError
    for an unknown match and OwnerNotOnRosterError when the owner did not play
    in it. Nothing is written in any of these cases.
    """
    owner = (owner_player_id or "").strip()
    if not owner:
        raise ValidationFailedError("ownerPlayerId is required")

    matches = MatchRepository(session)
    match = await matches.get_by_id(match_id)
    if match is None:
        raise MatchNotFoundError(match_id)
    if owner not in set(await matches.roster_player_ids(match_id)):
        raise OwnerNotOnRosterError(match_id, owner)

    await _ensure_viewer_user(session, viewer)
    resolver = PlayerIdentityResolver(session)
    targets = [_RatingTarget(name=e.name, value=e.rating, player_id=e.id) for e in entries]
    await _apply_ratings(session, match, owner, targets, resolver)

    if viewer.is_authenticated:
        claimed = await PlayerRepository(session).claim_for_user(owner, viewer.user_id)
        if claimed:
            logger.info("Player %s claimed by user %s", owner, viewer.user_id)

    return await _load_view(session, match_id, viewer)


# ------------------------------- Lifecycle ------------------------------- #


def _roster_names(payload: CreateMatchIn) -> List[str]:
    names = [e.name for e in payload.team1_players] + [e.name for e in payload.team2_players]
    duplicates = sorted(n for n, count in Counter(names).items() if count > 1)
    if duplicates:
        raise ValidationFailedError(f"Players listed more than once: {duplicates}")
    return names


def _initial_targets(payload: CreateMatchIn) -> List[_RatingTarget]:
    """Initial ratings: roster entries carrying a rating plus explicit playerRatings."""
    by_client_id: Dict[str, RosterEntryIn] = {
        e.id: e for e in payload.team1_players + payload.team2_players if e.id
    }
    targets = [
        _RatingTarget(name=e.name, value=e.rating)
        for e in payload.team1_players + payload.team2_players
        if e.rating is not None
    ]
    for r in payload.player_ratings:
        entry = by_client_id.get(r.id) if r.id else None
        targets.append(_RatingTarget(name=entry.name if entry else r.name, value=r.rating))
    return targets


def _initial_rater_name(payload: CreateMatchIn, roster_names: Sequence[str]) -> str:
    """Roster name of the player submitting the initial ratings."""
    if payload.rater_name:
        name = normalize_name(payload.rater_name)
    else:
        owners = {r.owner_player_id for r in payload.player_ratings if r.owner_player_id}
        if len(owners) > 1:
            raise ValidationFailedError("All initial ratings must share one ownerPlayerId")
        client_ids = {
            e.id: e.name for e in payload.team1_players + payload.team2_players if e.id
        }
        owner = next(iter(owners), None)
        if owner is None or owner not in client_ids:
            raise ValidationFailedError(
                "raterName (a roster player) is required when initial ratings are included"
            )
        name = client_ids[owner]
    if name not in roster_names:
        raise ValidationFailedError(f"Rater {name!r} is not on either roster")
    return name


async def create_match(
    session: AsyncSession, payload: CreateMatchIn, viewer: Viewer
) -> MatchOut:
    """
    Create a match with both teams, resolving every roster name to a player.

    Result is derived from goals. When initial ratings are included they are
    applied through the same path as submit_ratings, from the rater named in
    the payload.
    """
    roster_names = _roster_names(payload)
    targets = _initial_targets(payload)
    rater_name = _initial_rater_name(payload, roster_names) if targets else None

    await _ensure_viewer_user(session, viewer)
    resolver = PlayerIdentityResolver(session)
    team1_ids = await resolver.resolve_many(e.name for e in payload.team1_players)
    team2_ids = await resolver.resolve_many(e.name for e in payload.team2_players)

    result = derive_result(payload.team1_goals, payload.team2_goals)
    match = await MatchRepository(session).create_match(
        name=payload.match_name,
        match_date=payload.date or datetime.now(timezone.utc).date(),
        result=result.value,
        rating=DEFAULT_RATING,
        teams=[
            TeamSpec(name=payload.team1_name, goals=payload.team1_goals, player_ids=team1_ids),
            TeamSpec(name=payload.team2_name, goals=payload.team2_goals, player_ids=team2_ids),
        ],
    )
    logger.info(
        "Created match id=%s name=%r result=%s players=%d",
        match.id,
        match.name,
        match.result,
        len(team1_ids) + len(team2_ids),
    )

    if rater_name is not None:
        owner_id = await resolver.resolve(rater_name, match_id=match.id)
        await _apply_ratings(session, match, owner_id, targets, resolver)

    return await _load_view(session, match.id, viewer)


async def update_match(
    session: AsyncSession, match_id: int, payload: UpdateMatchIn, viewer: Viewer
) -> MatchOut:
    """
    Partial overwrite of name/date. ``result`` and ``rating`` are derived
    server-side, so client-supplied values for them are ignored.
    """
    matches = MatchRepository(session)
    match = await matches.get_by_id(match_id)
    if match is None:
        raise MatchNotFoundError(match_id)

    supplied = payload.model_dump(exclude_unset=True)
    ignored = sorted(k for k in ("result", "rating") if k in supplied)
    if ignored:
        logger.info("Ignoring client-supplied derived field(s) %s for match %s", ignored, match_id)

    fields = {k: v for k, v in supplied.items() if k in ("name", "date") and v is not None}
    if fields:
        await matches.update_fields(match, fields)
    return await _load_view(session, match_id, viewer)


async def delete_match(session: AsyncSession, match_id: int) -> bool:
    """Delete a match with its teams, rosters and ratings. False if it did not exist."""
    deleted = await MatchRepository(session).delete_by_id(match_id)
    if deleted:
        logger.info("Deleted match id=%s", match_id)
    return deleted
