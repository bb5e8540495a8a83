"""Repository layer for DB access only (CRUD + simple queries).

Repositories operate on the models in backend/models/ and are pure DB access,
no business logic. All repositories accept an AsyncSession explicitly and
never commit; the request-scoped session owns the transaction.
"""

from .base import BaseRepository
from .match_repo import MatchRepository, TeamSpec
from .player_repo import PlayerRepository
from .rating_repo import RatingRepository
from .user_repo import UserRepository

__all__ = [
    "BaseRepository",
    "MatchRepository",
    "PlayerRepository",
    "RatingRepository",
    "TeamSpec",
    "UserRepository",
]
