"""
Rating aggregation: per-player and per-match averages from raw rating rows.

Inputs: the match's rating rows (owner, destination, value), the roster
player ids and the match's stored rating.
Outputs: per-player mean (5.0 when a player received nothing) and the match
rating, either unscoped (mean over every rating) or scoped to the viewer's
own rostered players.

Rules:
- Unweighted double-precision mean; no rounding here (presentation concern).
- Always recomputed from the full rating set; nothing is cached.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional

DEFAULT_RATING = 5.0
MIN_RATING = 0.0
MAX_RATING = 10.0


@dataclass(frozen=True)
class RatingEntry:
    """One stored rating, detached from the ORM."""

    owner_player_id: str
    destination_player_id: str
    value: float


@dataclass
class RatingAggregate:
    """Aggregated ratings for one match."""

    per_player: Dict[str, float] = field(default_factory=dict)
    match_rating: float = DEFAULT_RATING
    viewer_scoped: bool = False
    rating_counts: Dict[str, int] = field(default_factory=dict)


def mean(values: Iterable[float]) -> Optional[float]:
    """Arithmetic mean, or None for an empty input."""
    items: List[float] = [float(v) for v in values]
    if not items:
        return None
    return sum(items) / len(items)


def per_player_ratings(
    ratings: Iterable[RatingEntry],
    roster_player_ids: Iterable[str] = (),
) -> Dict[str, float]:
    """Mean received rating per destination player; roster players default to 5.0."""
    received: Dict[str, List[float]] = defaultdict(list)
    for r in ratings:
        received[r.destination_player_id].append(r.value)

    out: Dict[str, float] = {pid: DEFAULT_RATING for pid in roster_player_ids}
    for pid, values in received.items():
        avg = mean(values)
        out[pid] = DEFAULT_RATING if avg is None else avg
    return out


def aggregate(
    ratings: Iterable[RatingEntry],
    roster_player_ids: Iterable[str],
    stored_rating: Optional[float] = None,
    viewer_player_ids: Optional[Iterable[str]] = None,
) -> RatingAggregate:
    """
    Aggregate a match's ratings.

    Without a viewer (or when none of the viewer's players are rostered) the
    match rating is the mean of every rating, falling back to
    ``stored_rating`` (or 5.0) when there are none. When the viewer has
    rostered players, it is the mean of the ratings those players received,
    5.0 if they received none yet.
    """
    entries = list(ratings)
    roster: FrozenSet[str] = frozenset(roster_player_ids)

    counts: Dict[str, int] = defaultdict(int)
    for r in entries:
        counts[r.destination_player_id] += 1

    result = RatingAggregate(
        per_player=per_player_ratings(entries, sorted(roster)),
        rating_counts=dict(counts),
    )

    viewer_on_roster = roster & frozenset(viewer_player_ids or ())
    if viewer_on_roster:
        scoped = mean(r.value for r in entries if r.destination_player_id in viewer_on_roster)
        result.match_rating = DEFAULT_RATING if scoped is None else scoped
        result.viewer_scoped = True
        return result

    unscoped = mean(r.value for r in entries)
    if unscoped is not None:
        result.match_rating = unscoped
    elif stored_rating is not None:
        result.match_rating = float(stored_rating)
    return result
