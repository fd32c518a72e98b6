"""Streak, XP and daily stats rules.

These functions update the given model in place and return it.
"""

from __future__ import annotations

from datetime import datetime

from studyflow.models import DailyStats, UserProgress
from studyflow.srs.sm2 import round_half_up
from studyflow.srs.time import day_key, day_key_offset, parse_iso_z, utc_datetime_to_iso_z, utc_now


def update_streak(progress: UserProgress, now: datetime | None = None) -> UserProgress:
    """Count ``now`` as a study day.

    Studying again on the same UTC day changes nothing. Studying the day after
    the last study day extends the streak; any longer gap restarts it at 1.
    """
    now = now or utc_now()
    today = day_key(now)
    last_day = day_key(parse_iso_z(progress.lastStudyDate)) if progress.lastStudyDate else None

    if last_day == today:
        return progress

    if last_day == day_key_offset(now, -1):
        progress.currentStreak += 1
    else:
        progress.currentStreak = 1

    progress.longestStreak = max(progress.longestStreak, progress.currentStreak)
    progress.lastStudyDate = utc_datetime_to_iso_z(now)
    progress.updatedAt = progress.lastStudyDate
    return progress


def add_xp(progress: UserProgress, amount: int, now: datetime | None = None) -> UserProgress:
    """Add experience points, levelling up as many times as the total allows.

    Reaching level N+1 costs N*100 XP; leftover XP carries over.
    """
    progress.xp += amount
    while progress.xp >= progress.nextLevelXp:
        progress.xp -= progress.nextLevelXp
        progress.level += 1
        progress.nextLevelXp = progress.level * 100

    progress.updatedAt = utc_datetime_to_iso_z(now or utc_now())
    return progress


def record_review(stats: DailyStats, *, newly_learned: bool, now: datetime | None = None) -> DailyStats:
    """Count one reviewed card in the day's stats.

    A review of a card whose repetition count was 0 also counts as a card learned.
    """
    stats.cardsReviewed += 1
    if newly_learned:
        stats.cardsLearned += 1
    stats.updatedAt = utc_datetime_to_iso_z(now or utc_now())
    return stats


def weekly_average(days: list[DailyStats]) -> int:
    """Average cards reviewed over the last (up to) 7 recorded days."""
    if not days:
        return 0
    recent = days[-7:]
    return round_half_up(sum(day.cardsReviewed for day in recent) / len(recent))
