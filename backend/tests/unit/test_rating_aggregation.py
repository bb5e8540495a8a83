"""
Unit tests for the rating model: means, 5.0 default, viewer-scoped match
rating, result derivation and display bands. Pure functions, no database.
"""

from __future__ import annotations

import pytest

from domain.ratings import (
    DEFAULT_RATING,
    MatchResult,
    RatingEntry,
    aggregate,
    derive_result,
    mean,
    per_player_ratings,
    rating_band,
)


def _r(owner: str, dest: str, value: float) -> RatingEntry:
    return RatingEntry(owner_player_id=owner, destination_player_id=dest, value=value)


def test_mean_empty_is_none() -> None:
    assert mean([]) is None
    assert mean([4, 5]) == pytest.approx(4.5)


def test_per_player_mean_and_default() -> None:
    ratings = [_r("x", "a", 8.0), _r("y", "a", 6.5), _r("z", "a", 7.0)]
    out = per_player_ratings(ratings, roster_player_ids=["a", "b"])
    assert out["a"] == pytest.approx((8.0 + 6.5 + 7.0) / 3)
    assert out["b"] == DEFAULT_RATING


def test_per_player_includes_non_roster_destination() -> None:
    out = per_player_ratings([_r("x", "guest", 9.0)], roster_player_ids=["a"])
    assert out == {"a": DEFAULT_RATING, "guest": 9.0}


def test_unscoped_and_viewer_scoped_rating() -> None:
    """A received {8, 6}, B received {4}: unscoped 6.0, scoped to A 7.0."""
    ratings = [_r("c", "a", 8), _r("d", "a", 6), _r("c", "b", 4)]
    roster = ["a", "b", "c", "d"]

    unscoped = aggregate(ratings, roster, stored_rating=5.0)
    assert unscoped.match_rating == pytest.approx(6.0)
    assert unscoped.viewer_scoped is False

    scoped = aggregate(ratings, roster, stored_rating=5.0, viewer_player_ids={"a"})
    assert scoped.match_rating == pytest.approx(7.0)
    assert scoped.viewer_scoped is True
    assert scoped.per_player["a"] == pytest.approx(7.0)
    assert scoped.per_player["b"] == pytest.approx(4.0)
    assert scoped.rating_counts == {"a": 2, "b": 1}


def test_viewer_rostered_without_ratings_defaults_to_five() -> None:
    ratings = [_r("c", "a", 9)]
    agg = aggregate(ratings, ["a", "b", "c"], stored_rating=9.0, viewer_player_ids=["b"])
    assert agg.viewer_scoped is True
    assert agg.match_rating == DEFAULT_RATING


def test_viewer_not_on_roster_falls_back_to_unscoped() -> None:
    ratings = [_r("c", "a", 9), _r("a", "c", 7)]
    agg = aggregate(ratings, ["a", "c"], stored_rating=5.0, viewer_player_ids=["someone-else"])
    assert agg.viewer_scoped is False
    assert agg.match_rating == pytest.approx(8.0)


def test_no_ratings_uses_stored_rating() -> None:
    agg = aggregate([], ["a"], stored_rating=6.25)
    assert agg.match_rating == 6.25
    assert agg.per_player == {"a": DEFAULT_RATING}


def test_no_ratings_and_no_stored_rating_is_default() -> None:
    assert aggregate([], []).match_rating == DEFAULT_RATING


def test_no_rounding_applied() -> None:
    agg = aggregate([_r("x", "a", 7), _r("y", "a", 7), _r("z", "a", 8)], ["a"])
    assert agg.per_player["a"] == pytest.approx(22 / 3)
    assert agg.per_player["a"] != round(agg.per_player["a"], 1)


@pytest.mark.parametrize(
    "goals,expected",
    [
        ((3, 1), MatchResult.VICTORIA),
        ((1, 3), MatchResult.DERROTA),
        ((2, 2), MatchResult.EMPATE),
        ((0, 0), MatchResult.EMPATE),
    ],
)
def test_derive_result(goals, expected) -> None:
    assert derive_result(*goals) is expected


def test_derive_result_rejects_negative_goals() -> None:
    with pytest.raises(ValueError):
        derive_result(-1, 0)


@pytest.mark.parametrize(
    "value,band",
    [(10.0, "elite"), (9.0, "elite"), (8.6, "excellent"), (8.59, "very_good"), (6.1, "average"), (6.0, "poor"), (0.0, "poor")],
)
def test_rating_band(value, band) -> None:
    assert rating_band(value) == band
