"""Pydantic request/response schemas for the match ratings API."""

from .match import (
    CreateMatchIn,
    DeleteMatchOut,
    MatchOut,
    PlayerOut,
    PlayerRatingIn,
    RatingBatchIn,
    RosterEntryIn,
    TeamOut,
    UpdateMatchIn,
)

__all__ = [
    "CreateMatchIn",
    "DeleteMatchOut",
    "MatchOut",
    "PlayerOut",
    "PlayerRatingIn",
    "RatingBatchIn",
    "RosterEntryIn",
    "TeamOut",
    "UpdateMatchIn",
]
