"""
Match Schemas

Request and response models for /api/v1/matches. JSON field names are
camelCase (``team1Goals``, ``ownerPlayerId``, ``playersWhoSubmittedRatings``)
for compatibility with the existing web client; Python attributes stay
snake_case.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from domain.ratings import MAX_RATING, MIN_RATING, derive_result

ResultLiteral = Literal["Victoria", "Derrota", "Empate"]
TeamLiteral = Literal["team1", "team2"]

MAX_GOALS = 999


def _clean_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = " ".join(value.split())
    if not cleaned:
        raise ValueError("must not be blank")
    return cleaned


class CamelModel(BaseModel):
    """Base model: camelCase aliases, snake_case population allowed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ------------------------------- Requests ------------------------------- #


class RosterEntryIn(CamelModel):
    """Roster entry on create: name only, or name plus an initial rating."""

    id: Optional[str] = Field(default=None, description="Client-side id, used to match playerRatings entries")
    name: str = Field(..., max_length=255)
    rating: Optional[float] = Field(default=None, ge=MIN_RATING, le=MAX_RATING)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _clean_name(v)


class PlayerRatingIn(CamelModel):
    """One rating in a batch: destination by id (if on the roster) or by name."""

    id: Optional[str] = None
    name: str = Field(..., max_length=255)
    rating: float = Field(..., ge=MIN_RATING, le=MAX_RATING)
    team: Optional[TeamLiteral] = None
    owner_player_id: Optional[str] = Field(
        default=None, description="Legacy per-entry rater id; must agree across a batch"
    )

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _clean_name(v)


class CreateMatchIn(CamelModel):
    """Body for POST /matches."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "matchName": "Jueves 5v5",
                "team1Name": "Blancos",
                "team2Name": "Negros",
                "team1Goals": 3,
                "team2Goals": 1,
                "team1Players": [{"name": "Ana"}, {"name": "Luis", "rating": 7.5}],
                "team2Players": [{"name": "Marta"}],
                "raterName": "Ana",
            }
        },
    )

    match_name: str = Field(..., max_length=255)
    date: Optional[dt.date] = Field(default=None, description="Defaults to today (UTC)")
    team1_name: str = Field(default="Team 1", max_length=255)
    team2_name: str = Field(default="Team 2", max_length=255)
    team1_goals: int = Field(..., ge=0, le=MAX_GOALS)
    team2_goals: int = Field(..., ge=0, le=MAX_GOALS)
    team1_players: List[RosterEntryIn] = Field(default_factory=list)
    team2_players: List[RosterEntryIn] = Field(default_factory=list)
    rater_name: Optional[str] = Field(
        default=None, max_length=255, description="Roster name of the player submitting initial ratings"
    )
    player_ratings: List[PlayerRatingIn] = Field(default_factory=list)

    @field_validator("match_name", "team1_name", "team2_name", "rater_name")
    @classmethod
    def names_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _clean_name(v)


class UpdateMatchIn(CamelModel):
    """Body for PUT /matches/{id}: partial overwrite of match metadata."""

    name: Optional[str] = Field(default=None, max_length=255)
    date: Optional[dt.date] = None
    result: Optional[ResultLiteral] = None
    rating: Optional[float] = Field(default=None, ge=MIN_RATING, le=MAX_RATING)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _clean_name(v)


class RatingBatchIn(CamelModel):
    """Body for PUT /matches/{id}/ratings: one rater, many destinations."""

    owner_player_id: Optional[str] = None
    ratings: List[PlayerRatingIn] = Field(default_factory=list)

    @classmethod
    def from_legacy(cls, entries: List[PlayerRatingIn]) -> "RatingBatchIn":
        """Build a batch from the legacy bare-list body (owner repeated per entry)."""
        owners = {e.owner_player_id for e in entries if e.owner_player_id}
        if len(owners) > 1:
            raise ValueError("All ratings in a batch must share one ownerPlayerId")
        return cls(owner_player_id=next(iter(owners), None), ratings=entries)


# ------------------------------- Responses ------------------------------- #


class PlayerOut(CamelModel):
    id: str
    name: str
    rating: float = Field(..., ge=MIN_RATING, le=MAX_RATING)
    rating_band: str
    ratings_received: int = Field(default=0, ge=0)


class TeamOut(CamelModel):
    name: str
    goals: int = Field(..., ge=0)
    players: List[PlayerOut] = Field(default_factory=list)


class MatchOut(CamelModel):
    """Match view with aggregated ratings (validated before it is returned)."""

    id: int
    date: dt.date
    result: ResultLiteral
    name: str
    rating: float = Field(..., ge=MIN_RATING, le=MAX_RATING)
    rating_band: str
    viewer_scoped: bool = False
    team1: TeamOut
    team2: TeamOut
    players_who_submitted_ratings: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def result_matches_goals(self) -> "MatchOut":
        expected = derive_result(self.team1.goals, self.team2.goals).value
        if self.result != expected:
            raise ValueError(
                f"result {self.result!r} inconsistent with goals "
                f"{self.team1.goals}-{self.team2.goals} (expected {expected!r})"
            )
        return self


class DeleteMatchOut(BaseModel):
    success: bool
