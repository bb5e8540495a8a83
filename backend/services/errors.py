"""Error taxonomy for match operations; routes map these to HTTP statuses."""

from __future__ import annotations


class ValidationFailedError(ValueError):
    """Input is well-formed JSON but violates a business rule (HTTP 400)."""


class MatchNotFoundError(LookupError):
    """No match with this id (HTTP 404)."""

    def __init__(self, match_id: int) -> None:
        super().__init__(f"Match not found: match_id={match_id}")
        self.match_id = match_id


class OwnerNotOnRosterError(LookupError):
    """The rating owner is not on either team of the match (HTTP 404)."""

    def __init__(self, match_id: int, owner_player_id: str) -> None:
        super().__init__(
            f"Player {owner_player_id} is not on the roster of match {match_id}"
        )
        self.match_id = match_id
        self.owner_player_id = owner_player_id
