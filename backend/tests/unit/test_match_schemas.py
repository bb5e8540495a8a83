"""Unit tests: request/response models (camelCase aliases, derived-result check)."""

from datetime import date

import pytest
from pydantic import ValidationError

from schemas.match import CreateMatchIn, MatchOut, PlayerRatingIn, RatingBatchIn, TeamOut


def _team(goals: int) -> TeamOut:
    return TeamOut(name="T", goals=goals, players=[])


def test_create_body_accepts_camel_case() -> None:
    body = CreateMatchIn.model_validate(
        {
            "matchName": "  Jueves   5v5 ",
            "team1Goals": 2,
            "team2Goals": 2,
            "team1Players": [{"name": "Ana", "rating": 7}],
            "raterName": "Ana",
        }
    )
    assert body.match_name == "Jueves 5v5"
    assert body.team1_name == "Team 1"
    assert body.date is None
    assert body.team1_players[0].rating == 7.0


def test_match_out_rejects_inconsistent_result() -> None:
    with pytest.raises(ValidationError):
        MatchOut(
            id=1,
            date=date(2025, 1, 1),
            result="Victoria",
            name="x",
            rating=5.0,
            rating_band="poor",
            team1=_team(0),
            team2=_team(1),
        )


def test_match_out_serializes_camel_case() -> None:
    out = MatchOut(
        id=1,
        date=date(2025, 1, 1),
        result="Empate",
        name="x",
        rating=5.0,
        rating_band="poor",
        team1=_team(1),
        team2=_team(1),
    )
    data = out.model_dump(by_alias=True)
    assert "playersWhoSubmittedRatings" in data
    assert "ratingBand" in data
    assert data["viewerScoped"] is False


def test_legacy_batch_requires_single_owner() -> None:
    entries = [
        PlayerRatingIn(name="A", rating=5, owner_player_id="p1"),
        PlayerRatingIn(name="B", rating=6, owner_player_id="p1"),
    ]
    assert RatingBatchIn.from_legacy(entries).owner_player_id == "p1"

    entries.append(PlayerRatingIn(name="C", rating=6, owner_player_id="p2"))
    with pytest.raises(ValueError):
        RatingBatchIn.from_legacy(entries)


@pytest.mark.parametrize("value", [-0.5, 10.01])
def test_rating_out_of_range_rejected(value) -> None:
    with pytest.raises(ValidationError):
        PlayerRatingIn(name="A", rating=value)


def test_create_body_accepts_field_names_and_bounds_goals() -> None:
    body = CreateMatchIn(match_name="Jueves", team1_goals=1, team2_goals=0)
    assert body.model_dump(by_alias=True)["team1Goals"] == 1
    assert "example" in CreateMatchIn.model_json_schema()

    with pytest.raises(ValidationError):
        CreateMatchIn(match_name="Jueves", team1_goals=10**20, team2_goals=0)
