"""
Score aggregation rules.

Everything here works on plain attempt-like objects (anything with `id`,
`user_id`, `accuracy`, `combined`, `max_streak` and `played_at`) so the same
reductions back the stats endpoint, the post-submit best check, the batch
best-score lookup and the leaderboard.

Best-score ordering is explicit and never depends on the order rows come back
from the database: highest `combined` wins, ties go to the most recent
`played_at`, and a remaining tie goes to the higher `id`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from fractions import Fraction
from typing import Any, Iterable, Mapping, Optional, Sequence

MAX_LIMIT = 100


def best_key(attempt: Any) -> tuple:
    return (attempt.combined, attempt.played_at, attempt.id)


def recency_key(attempt: Any) -> tuple:
    return (attempt.played_at, attempt.id)


def best_of(attempts: Iterable[Any]) -> Optional[Any]:
    return max(attempts, key=best_key, default=None)


def latest_of(attempts: Iterable[Any]) -> Optional[Any]:
    return max(attempts, key=recency_key, default=None)


def round_half_up(numerator: int, denominator: int) -> int:
    # floor(x + 1/2) on exact rationals: 2.5 -> 3, -2.5 -> -2
    if denominator == 0:
        return 0
    return math.floor(Fraction(numerator, denominator) + Fraction(1, 2))


def clamp_limit(value: Optional[int], default: int, maximum: int = MAX_LIMIT) -> int:
    # 0 means "not given", as with an empty query parameter
    if not value:
        return default
    return max(1, min(int(value), maximum))


@dataclass
class Stats:
    total_plays: int
    current: Optional[Any]
    best: Optional[Any]
    average_accuracy: int
    average_score: int
    best_streak: int


@dataclass
class BestCheck:
    is_new_best: bool
    best: Optional[Any]
    total_plays: int


@dataclass
class BestScore:
    accuracy: int
    combined: int
    max_streak: int
    total_plays: int


@dataclass
class LeaderboardRow:
    rank: int
    user_id: str
    display_name: str
    accuracy: int
    combined: int
    max_streak: int
    played_at: datetime
    is_current_user: bool


def compute_stats(attempts: Sequence[Any]) -> Stats:
    attempts = list(attempts)
    if not attempts:
        return Stats(0, None, None, 0, 0, 0)

    n = len(attempts)
    return Stats(
        total_plays=n,
        current=latest_of(attempts),
        best=best_of(attempts),
        average_accuracy=round_half_up(sum(a.accuracy for a in attempts), n),
        average_score=round_half_up(sum(a.combined for a in attempts), n),
        best_streak=max(a.max_streak for a in attempts),
    )


def best_check(attempts: Sequence[Any], submitted: Any) -> BestCheck:
    """
    Re-evaluate the best attempt after an upsert. `attempts` must already
    include the submitted row (updated in place or freshly created).
    """
    attempts = list(attempts)
    best = best_of(attempts)
    return BestCheck(
        is_new_best=best is not None and best.id == submitted.id,
        best=best,
        total_plays=len(attempts),
    )


def best_by_target(
    attempts: Iterable[Any], keys: Mapping[Any, str]
) -> dict[str, BestScore]:
    """
    Reduce a mixed bag of attempts to one best score per target.

    `keys` maps each requested target to the identifier used in the result.
    Targets with no attempts are left out of the result entirely.
    """
    grouped: dict[Any, list[Any]] = {}
    for a in attempts:
        if a.target in keys:
            grouped.setdefault(a.target, []).append(a)

    out: dict[str, BestScore] = {}
    for target, group in grouped.items():
        best = best_of(group)
        out[keys[target]] = BestScore(
            accuracy=best.accuracy,
            combined=best.combined,
            max_streak=best.max_streak,
            total_plays=len(group),
        )
    return out


def build_leaderboard(
    rows: Iterable[tuple[Any, str]], current_user_id: Optional[str], limit: int
) -> list[LeaderboardRow]:
    """
    rows: (attempt, display_name) pairs for every user's attempts on one song.

    Each user contributes only their single best attempt. Ranks are positions
    in the sorted list, so equal scores still get distinct consecutive ranks.
    """
    by_user: dict[str, list[tuple[Any, str]]] = {}
    for attempt, display_name in rows:
        by_user.setdefault(attempt.user_id, []).append((attempt, display_name))

    finalists = [max(group, key=lambda pair: best_key(pair[0])) for group in by_user.values()]
    finalists.sort(key=lambda pair: best_key(pair[0]), reverse=True)

    return [
        LeaderboardRow(
            rank=i,
            user_id=attempt.user_id,
            display_name=display_name,
            accuracy=attempt.accuracy,
            combined=attempt.combined,
            max_streak=attempt.max_streak,
            played_at=attempt.played_at,
            is_current_user=attempt.user_id == current_user_id,
        )
        for i, (attempt, display_name) in enumerate(finalists[:limit], start=1)
    ]
