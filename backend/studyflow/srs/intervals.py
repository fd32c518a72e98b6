"""Human-readable interval text and rating previews."""

from __future__ import annotations

from datetime import datetime
from typing import get_args

from .sm2 import RandomSource, Rating, ReviewState, round_half_up, compute_next_state


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def describe_interval(days: int) -> str:
    """Describe an interval in days the way the review screen shows it.

    0 -> "New", 1-6 -> days, 7-29 -> weeks, 30-364 -> months, otherwise years.
    Weeks, months and years are rounded to the nearest whole unit.
    """
    if days == 0:
        return "New"
    if days < 7:
        return _plural(days, "day")
    if days < 30:
        return _plural(round_half_up(days / 7), "week")
    if days < 365:
        return _plural(round_half_up(days / 30), "month")
    return _plural(round_half_up(days / 365), "year")


def preview_interval(
    state: ReviewState,
    rating: Rating,
    *,
    now: datetime | None = None,
    rng: RandomSource | None = None,
    fuzz: bool = True,
) -> str:
    """Describe the interval ``rating`` would produce, without persisting anything."""
    next_state = compute_next_state(state, rating, now=now, rng=rng, fuzz=fuzz)
    return describe_interval(next_state.interval_days)


def preview_all(
    state: ReviewState,
    *,
    now: datetime | None = None,
    rng: RandomSource | None = None,
    fuzz: bool = True,
) -> dict[Rating, str]:
    return {
        rating: preview_interval(state, rating, now=now, rng=rng, fuzz=fuzz)
        for rating in get_args(Rating)
    }
