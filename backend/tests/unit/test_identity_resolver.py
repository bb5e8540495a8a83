"""
Unit tests: player identity resolution by name (stable ids, whitespace
normalization, roster-first lookup, blank names rejected).
"""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import func, select

from models.player import Player
from repositories.match_repo import MatchRepository, TeamSpec
from repositories.player_repo import PlayerRepository
from services.errors import ValidationFailedError
from services.identity_service import PlayerIdentityResolver, normalize_name


async def _player_count(session) -> int:
    result = await session.execute(select(func.count(Player.id)))
    return int(result.scalar_one())


def test_normalize_name_collapses_whitespace() -> None:
    assert normalize_name("  Ana   María ") == "Ana María"
    assert normalize_name("\tLuis\n") == "Luis"
    assert normalize_name(None) == ""


@pytest.mark.asyncio
async def test_same_name_resolves_to_same_id(session) -> None:
    resolver = PlayerIdentityResolver(session)
    first = await resolver.resolve("Ana")
    second = await resolver.resolve("Ana")
    assert first == second
    assert await _player_count(session) == 1


@pytest.mark.asyncio
async def test_new_name_creates_exactly_one_player(session) -> None:
    before = await _player_count(session)
    player_id = await PlayerIdentityResolver(session).resolve("Brand New")
    assert await _player_count(session) == before + 1
    player = await session.get(Player, player_id)
    assert player is not None
    assert player.name == "Brand New"
    assert player.owner_user_id is None


@pytest.mark.asyncio
async def test_resolution_stable_across_resolver_instances(session) -> None:
    """A fresh resolver (new request) finds the player created by an earlier one."""
    first = await PlayerIdentityResolver(session).resolve("Marta")
    second = await PlayerIdentityResolver(session).resolve("  Marta ")
    assert first == second
    assert await _player_count(session) == 1


@pytest.mark.asyncio
async def test_blank_name_is_rejected(session) -> None:
    with pytest.raises(ValidationFailedError):
        await PlayerIdentityResolver(session).resolve("   ")
    assert await _player_count(session) == 0


@pytest.mark.asyncio
async def test_roster_lookup_used_with_match_id(session) -> None:
    resolver = PlayerIdentityResolver(session)
    ana, luis = await resolver.resolve_many(["Ana", "Luis"])
    match = await MatchRepository(session).create_match(
        name="Jueves",
        match_date=date(2025, 1, 9),
        result="Empate",
        rating=5.0,
        teams=[TeamSpec("A", 1, [ana]), TeamSpec("B", 1, [luis])],
    )

    found = await PlayerRepository(session).find_on_match_roster(match.id, "Luis")
    assert found is not None and found.id == luis

    assert await PlayerIdentityResolver(session).resolve("Luis", match_id=match.id) == luis
    assert await _player_count(session) == 2


@pytest.mark.asyncio
async def test_insert_if_absent_returns_existing_row(session) -> None:
    repo = PlayerRepository(session)
    first = await repo.insert_if_absent(name="Pepe", name_key="Pepe")
    second = await repo.insert_if_absent(name="Pepe", name_key="Pepe")
    assert first.id == second.id
    assert await _player_count(session) == 1
