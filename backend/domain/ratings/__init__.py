"""
Rating model: result derivation and aggregation of player ratings.
Pure functions; no database access.
"""

from domain.ratings.aggregation import (
    DEFAULT_RATING,
    MAX_RATING,
    MIN_RATING,
    RatingAggregate,
    RatingEntry,
    aggregate,
    mean,
    per_player_ratings,
)
from domain.ratings.results import MatchResult, derive_result, rating_band

__all__ = [
    "DEFAULT_RATING",
    "MAX_RATING",
    "MIN_RATING",
    "MatchResult",
    "RatingAggregate",
    "RatingEntry",
    "aggregate",
    "derive_result",
    "mean",
    "per_player_ratings",
    "rating_band",
]
