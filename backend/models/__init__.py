"""SQLAlchemy models for matches, rosters, players and ratings.

Importing this package registers every table on ``Base.metadata``.
"""

from .base import Base
from .user import User
from .player import Player
from .match import Match
from .team import MatchTeam
from .team_player import TeamPlayer
from .player_rating import PlayerRating

__all__ = [
    "Base",
    "User",
    "Player",
    "Match",
    "MatchTeam",
    "TeamPlayer",
    "PlayerRating",
]
