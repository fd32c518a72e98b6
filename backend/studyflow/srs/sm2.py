"""SM-2 review scheduling.

The scheduler is a pure function over an immutable ``ReviewState``. It never
touches storage; callers persist the returned state themselves.

Precondition: the incoming state is well-formed (ease factor >= 1.3,
non-negative interval and repetitions). States loaded from storage are not
re-validated here.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Literal, Protocol

from .time import utc_now


Rating = Literal["again", "hard", "good", "easy"]

RATING_QUALITY: dict[Rating, int] = {
    "again": 0,
    "hard": 3,
    "good": 4,
    "easy": 5,
}

MIN_EASE_FACTOR = 1.3
DEFAULT_EASE_FACTOR = 2.5

HARD_MULTIPLIER = 0.8
EASY_MULTIPLIER = 1.3

# Intervals at or below this many days are never fuzzed.
FUZZ_THRESHOLD_DAYS = 3
FUZZ_MIN_FRACTION = 0.05
FUZZ_MAX_FRACTION = 0.10

# Upper bound on any scheduled interval (about 100 years).
MAX_INTERVAL_DAYS = 36500


class RandomSource(Protocol):
    def random(self) -> float: ...


@dataclass(frozen=True)
class SM2State:
    ease_factor: float
    repetitions: int
    interval_days: int


@dataclass(frozen=True)
class ReviewState:
    """Scheduling state for a single flashcard.

    Build the state of a card that has never been reviewed with
    ``new_review_state``, which stamps ``next_review`` with the creation time.
    A state constructed directly with ``next_review=None`` is treated as due.
    """

    card_id: str
    interval_days: int = 0
    ease_factor: float = DEFAULT_EASE_FACTOR
    repetitions: int = 0
    next_review: datetime | None = None
    last_reviewed: datetime | None = None

    def is_due(self, now: datetime | None = None) -> bool:
        if self.next_review is None:
            return True
        return (now or utc_now()) >= self.next_review


_default_rng = random.Random()


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp_ease_factor(ef: float) -> float:
    return max(MIN_EASE_FACTOR, ef)


def new_review_state(card_id: str, now: datetime | None = None) -> ReviewState:
    """Return the default state for a card that has never been reviewed."""
    now = (now or utc_now()).replace(microsecond=0)
    return ReviewState(card_id=card_id, next_review=now)


def apply_sm2(state: SM2State, quality: int) -> SM2State:
    """Apply the SM-2 update to the given state.

    quality: 0-5

    Rules:
    - if q < 3: repetitions = 0, intervalDays = 1, EF unchanged
    - else:
        if repetitions == 0: intervalDays = 1
        elif repetitions == 1: intervalDays = 6
        else: intervalDays = round(previousIntervalDays * EF)
        repetitions += 1
        EF' = EF + (0.1 - (5-q)*(0.08 + (5-q)*0.02)), clamped to >= 1.3
    """
    if quality < 0 or quality > 5:
        raise ValueError("quality must be between 0 and 5")

    if quality < 3:
        return SM2State(ease_factor=state.ease_factor, repetitions=0, interval_days=1)

    if state.repetitions == 0:
        interval = 1
    elif state.repetitions == 1:
        interval = 6
    else:
        interval = round_half_up(state.interval_days * state.ease_factor)

    ef_prime = state.ease_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))

    return SM2State(
        ease_factor=_clamp_ease_factor(ef_prime),
        repetitions=state.repetitions + 1,
        interval_days=interval,
    )


def apply_rating_multiplier(interval_days: int, rating: Rating) -> int:
    """Shrink "hard" intervals and stretch "easy" ones after the SM-2 step."""
    if rating == "hard":
        return max(1, round_half_up(interval_days * HARD_MULTIPLIER))
    if rating == "easy":
        return round_half_up(interval_days * EASY_MULTIPLIER)
    return interval_days


def fuzz_interval(interval_days: int, rng: RandomSource | None = None) -> int:
    """Spread due dates by a whole number of days, at most 10% of the interval.

    Intervals of three days or fewer are returned unchanged and consume no
    randomness.
    """
    if interval_days <= FUZZ_THRESHOLD_DAYS:
        return interval_days

    rng = rng or _default_rng
    fraction = FUZZ_MIN_FRACTION + rng.random() * (FUZZ_MAX_FRACTION - FUZZ_MIN_FRACTION)
    fuzz = math.floor(interval_days * fraction)
    direction = 1 if rng.random() > 0.5 else -1
    return interval_days + fuzz * direction


def compute_next_state(
    state: ReviewState,
    rating: Rating,
    *,
    now: datetime | None = None,
    rng: RandomSource | None = None,
    fuzz: bool = True,
) -> ReviewState:
    """Compute the state that follows reviewing a card with ``rating``.

    Args:
        state: Current review state of the card
        rating: Learner's self-assessed recall
        now: Review time (defaults to the current UTC time)
        rng: Random source used for the fuzz step
        fuzz: Set to False to skip the fuzz step entirely

    Returns:
        A new ReviewState; the input is left untouched.

    The resulting interval never exceeds MAX_INTERVAL_DAYS.
    """
    sm2 = apply_sm2(
        SM2State(
            ease_factor=state.ease_factor,
            repetitions=state.repetitions,
            interval_days=state.interval_days,
        ),
        RATING_QUALITY[rating],
    )

    interval = apply_rating_multiplier(sm2.interval_days, rating)
    if fuzz:
        interval = fuzz_interval(interval, rng)
    interval = min(interval, MAX_INTERVAL_DAYS)

    # Second precision keeps the value stable through ISO serialization.
    reviewed_at = (now or utc_now()).replace(microsecond=0)

    return replace(
        state,
        interval_days=interval,
        ease_factor=sm2.ease_factor,
        repetitions=sm2.repetitions,
        next_review=reviewed_at + timedelta(days=interval),
        last_reviewed=reviewed_at,
    )
