"""Services: match lifecycle operations composed over repositories and the rating model."""

from .identity_service import PlayerIdentityResolver, normalize_name
from .match_service import (
    create_match,
    delete_match,
    get_match,
    list_matches,
    submit_ratings,
    update_match,
)

__all__ = [
    "PlayerIdentityResolver",
    "normalize_name",
    "create_match",
    "delete_match",
    "get_match",
    "list_matches",
    "submit_ratings",
    "update_match",
]
