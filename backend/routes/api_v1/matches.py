"""CRUD for /api/v1/matches and PUT /api/v1/matches/{id}/ratings."""

from __future__ import annotations

from typing import Annotated, List, Union

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from core.dependencies import Viewer, get_db_session, get_viewer
from schemas.match import (
    CreateMatchIn,
    DeleteMatchOut,
    MatchOut,
    PlayerRatingIn,
    RatingBatchIn,
    UpdateMatchIn,
)
from services import match_service
from services.errors import (
    MatchNotFoundError,
    OwnerNotOnRosterError,
    ValidationFailedError,
)

router = APIRouter(prefix="/matches", tags=["matches"])

# Ids are SQLite/PostgreSQL signed 64-bit integers.
MAX_MATCH_ID = 2**63 - 1
MatchIdPath = Annotated[int, Path(ge=1, le=MAX_MATCH_ID, description="Match id")]


@router.get(
    "",
    response_model=List[MatchOut],
    summary="List matches",
    description="Newest first. With mine=true, only matches where the viewer's players are rostered.",
)
async def get_matches(
    mine: bool = Query(False, description="Only matches the viewer played in (requires X-User-Id)"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0, le=MAX_MATCH_ID),
    session: AsyncSession = Depends(get_db_session),
    viewer: Viewer = Depends(get_viewer),
) -> List[MatchOut]:
    """GET /api/v1/matches -> Match[]."""
    try:
        return await match_service.list_matches(
            session, viewer, mine=mine, limit=limit, offset=offset
        )
    except ValidationFailedError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/{match_id}", response_model=MatchOut, summary="Get a match")
async def get_match(
    match_id: MatchIdPath,
    session: AsyncSession = Depends(get_db_session),
    viewer: Viewer = Depends(get_viewer),
) -> MatchOut:
    """GET /api/v1/matches/{id} -> Match or 404."""
    try:
        return await match_service.get_match(session, match_id, viewer)
    except MatchNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.post(
    "",
    response_model=MatchOut,
    status_code=201,
    summary="Create a match",
    description="Creates the match with both teams; optionally applies initial ratings from raterName.",
)
async def post_match(
    body: CreateMatchIn,
    session: AsyncSession = Depends(get_db_session),
    viewer: Viewer = Depends(get_viewer),
) -> MatchOut:
    """
    Create a match.

    - **team1Goals**, **team2Goals**: >= 0; result is derived from them.
    - **team1Players**, **team2Players**: roster names (optionally with a rating).
    - **raterName**: required when any initial rating is included.
    """
    try:
        return await match_service.create_match(session, body, viewer)
    except ValidationFailedError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.put("/{match_id}", response_model=MatchOut, summary="Update match metadata")
async def put_match(
    match_id: MatchIdPath,
    body: UpdateMatchIn,
    session: AsyncSession = Depends(get_db_session),
    viewer: Viewer = Depends(get_viewer),
) -> MatchOut:
    """PUT /api/v1/matches/{id}: partial overwrite of name/date; result and rating stay derived."""
    try:
        return await match_service.update_match(session, match_id, body, viewer)
    except MatchNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.delete("/{match_id}", response_model=DeleteMatchOut, summary="Delete a match")
async def delete_match(
    match_id: MatchIdPath,
    session: AsyncSession = Depends(get_db_session),
) -> DeleteMatchOut:
    """DELETE /api/v1/matches/{id} -> {success: true} or 404."""
    deleted = await match_service.delete_match(session, match_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Match not found: match_id={match_id}")
    return DeleteMatchOut(success=True)


@router.put(
    "/{match_id}/ratings",
    response_model=MatchOut,
    summary="Submit or update ratings",
    description="One rater (ownerPlayerId) rates many players; re-rating overwrites.",
)
async def put_match_ratings(
    match_id: MatchIdPath,
    body: Union[RatingBatchIn, List[PlayerRatingIn]] = Body(...),
    session: AsyncSession = Depends(get_db_session),
    viewer: Viewer = Depends(get_viewer),
) -> MatchOut:
    """
    Body is either ``{"ownerPlayerId": ..., "ratings": [...]}`` or the legacy
    bare list of ratings, each carrying the same ``ownerPlayerId``.
    """
    if isinstance(body, list):
        try:
            body = RatingBatchIn.from_legacy(body)
        except (ValueError, ValidationError) as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
    try:
        return await match_service.submit_ratings(
            session,
            match_id,
            owner_player_id=body.owner_player_id,
            entries=body.ratings,
            viewer=viewer,
        )
    except ValidationFailedError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except (MatchNotFoundError, OwnerNotOnRosterError) as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
