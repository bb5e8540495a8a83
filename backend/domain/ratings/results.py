"""
Match result derivation and display bands for ratings.

The result is always computed from goals (team1 perspective); clients never
supply it.
"""

from __future__ import annotations

from enum import Enum


class MatchResult(str, Enum):
    """Outcome of a match from team1's point of view."""

    VICTORIA = "Victoria"
    DERROTA = "Derrota"
    EMPATE = "Empate"


def derive_result(team1_goals: int, team2_goals: int) -> MatchResult:
    """Victoria if team1 scored more, Derrota if fewer, Empate on a draw."""
    if team1_goals < 0 or team2_goals < 0:
        raise ValueError("goals must be non-negative")
    if team1_goals > team2_goals:
        return MatchResult.VICTORIA
    if team1_goals < team2_goals:
        return MatchResult.DERROTA
    return MatchResult.EMPATE


# (lower bound inclusive, band) from best to worst
_RATING_BANDS = (
    (9.0, "elite"),
    (8.6, "excellent"),
    (8.1, "very_good"),
    (7.6, "good"),
    (7.1, "solid"),
    (6.6, "decent"),
    (6.1, "average"),
)
_LOWEST_BAND = "poor"


def rating_band(value: float) -> str:
    """Display band for a rating, matching the colour scale of the results pages."""
    for lower, band in _RATING_BANDS:
        if value >= lower:
            return band
    return _LOWEST_BAND
