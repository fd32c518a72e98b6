"""Study analytics computed from review logs and review states.

All functions here are pure: callers load the documents and pass them in.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta

from studyflow.models import (
    Card,
    CardReview,
    DailyStats,
    Deck,
    DeckAnalytics,
    HeatmapDay,
    RetentionDataPoint,
    ReviewLog,
    StudyEfficiency,
    WeakTopic,
)
from studyflow.srs.sm2 import DEFAULT_EASE_FACTOR, round_half_up
from studyflow.srs.time import day_key, parse_iso_z, utc_now

MASTERED_INTERVAL_DAYS = 21
WEAK_CARD_FAILURE_RATE = 0.3
WEAK_CARDS_PER_DECK = 5
WEAK_TOPIC_FAILURE_RATE = 0.4
WEAK_TOPIC_MIN_REVIEWS = 2
EFFICIENCY_WINDOW_DAYS = 30
HEATMAP_SESSION_WEIGHT = 5
# Minimum activity count for heatmap levels 2, 3 and 4.
HEATMAP_LEVEL_THRESHOLDS = (10, 25, 50)


def _percent(part: int, whole: int) -> int:
    return round_half_up(part / whole * 100) if whole else 0


def _failure_rate(logs: list[ReviewLog]) -> float:
    if not logs:
        return 0.0
    return sum(1 for log in logs if not log.wasCorrect) / len(logs)


def _correct_rate(logs: list[ReviewLog]) -> float:
    if not logs:
        return 0.0
    return sum(1 for log in logs if log.wasCorrect) / len(logs)


def _logs_by_card(logs: list[ReviewLog]) -> dict[str, list[ReviewLog]]:
    grouped: dict[str, list[ReviewLog]] = defaultdict(list)
    for log in logs:
        grouped[log.cardId].append(log)
    return grouped


def deck_analytics(
    deck: Deck,
    cards: list[Card],
    reviews: list[CardReview],
    logs: list[ReviewLog],
) -> DeckAnalytics:
    """Summarize one deck.

    Cards with an interval of 21+ days count as mastered, 1-20 as learning,
    everything else as new.
    """
    card_ids = {card.id for card in cards}
    deck_reviews = [review for review in reviews if review.cardId in card_ids]
    deck_logs = [log for log in logs if log.deckId == deck.id]

    mastered = sum(1 for review in deck_reviews if review.interval >= MASTERED_INTERVAL_DAYS)
    learning = sum(1 for review in deck_reviews if 0 < review.interval < MASTERED_INTERVAL_DAYS)

    correct = sum(1 for log in deck_logs if log.wasCorrect)

    if deck_reviews:
        average_ease = sum(review.easeFactor for review in deck_reviews) / len(deck_reviews)
    else:
        average_ease = DEFAULT_EASE_FACTOR

    by_card = _logs_by_card(deck_logs)
    failure_rates = [(card.id, _failure_rate(by_card.get(card.id, []))) for card in cards]
    weak = sorted(
        (item for item in failure_rates if item[1] > WEAK_CARD_FAILURE_RATE),
        key=lambda item: item[1],
        reverse=True,
    )

    return DeckAnalytics(
        deckId=deck.id,
        deckTitle=deck.title,
        totalCards=len(cards),
        masteredCards=mastered,
        learningCards=learning,
        newCards=len(cards) - mastered - learning,
        retentionRate=_percent(correct, len(deck_logs)),
        averageEaseFactor=round(average_ease, 2),
        weakCards=[card_id for card_id, _ in weak[:WEAK_CARDS_PER_DECK]],
    )


def overall_retention(decks: list[DeckAnalytics]) -> int:
    """Mean retention rate over decks that have at least one card."""
    with_cards = [deck for deck in decks if deck.totalCards > 0]
    if not with_cards:
        return 0
    return round_half_up(sum(deck.retentionRate for deck in with_cards) / len(with_cards))


def study_efficiency(logs: list[ReviewLog], now: datetime | None = None) -> StudyEfficiency | None:
    """Score recent study habits on a 0-100 scale.

    Uses the last 30 days of logs. The score weighs correctness (up to 40),
    consistency of study days (up to 30) and answer speed (up to 30 points,
    one per second under 30s). Returns None when there are no recent logs.
    """
    now = now or utc_now()
    window_start = now - timedelta(days=EFFICIENCY_WINDOW_DAYS)
    recent = [log for log in logs if parse_iso_z(log.timestamp) >= window_start]
    if not recent:
        return None

    correct_rate = _correct_rate(recent)
    average_response = sum(log.responseTime for log in recent) / len(recent)

    study_days = {day_key(parse_iso_z(log.timestamp)) for log in recent}
    consistency = min(100, round_half_up(len(study_days) / EFFICIENCY_WINDOW_DAYS * 100))

    midpoint = now - timedelta(days=EFFICIENCY_WINDOW_DAYS // 2)
    later = [log for log in recent if parse_iso_z(log.timestamp) >= midpoint]
    earlier = [log for log in recent if parse_iso_z(log.timestamp) < midpoint]
    trend = round_half_up((_correct_rate(later) - _correct_rate(earlier)) * 100)

    score = round_half_up(
        correct_rate * 40 + consistency * 0.3 + max(0.0, 30 - average_response / 1000)
    )

    return StudyEfficiency(
        score=min(100, max(0, score)),
        averageResponseTime=round_half_up(average_response),
        correctRate=round_half_up(correct_rate * 100),
        consistencyScore=consistency,
        improvementTrend=trend,
    )


def retention_series(
    logs: list[ReviewLog],
    now: datetime | None = None,
    days: int = 14,
) -> list[RetentionDataPoint]:
    """Daily retention for the last ``days`` UTC days, oldest first."""
    now = now or utc_now()
    by_day: dict[str, list[ReviewLog]] = defaultdict(list)
    for log in logs:
        by_day[day_key(parse_iso_z(log.timestamp))].append(log)

    points = []
    for offset in range(days - 1, -1, -1):
        key = day_key(now - timedelta(days=offset))
        day_logs = by_day.get(key, [])
        correct = sum(1 for log in day_logs if log.wasCorrect)
        points.append(
            RetentionDataPoint(date=key, retention=_percent(correct, len(day_logs)), reviews=len(day_logs))
        )
    return points


def weak_topics(
    decks: list[Deck],
    cards: list[Card],
    reviews: list[CardReview],
    logs: list[ReviewLog],
    limit: int = 10,
) -> list[WeakTopic]:
    """Cards failed in more than 40% of at least two reviews, worst first."""
    deck_titles = {deck.id: deck.title for deck in decks}
    last_reviewed = {review.cardId: review.lastReviewed for review in reviews}
    by_card = _logs_by_card(logs)

    topics = []
    for card in cards:
        if card.deckId not in deck_titles:
            continue
        card_logs = by_card.get(card.id, [])
        if len(card_logs) < WEAK_TOPIC_MIN_REVIEWS:
            continue
        rate = _failure_rate(card_logs)
        if rate <= WEAK_TOPIC_FAILURE_RATE:
            continue
        topics.append(
            WeakTopic(
                deckId=card.deckId,
                deckTitle=deck_titles[card.deckId],
                cardId=card.id,
                question=card.question,
                failureRate=round_half_up(rate * 100),
                lastReviewed=last_reviewed.get(card.id),
            )
        )

    topics.sort(key=lambda topic: topic.failureRate, reverse=True)
    return topics[:limit]


def _heatmap_level(count: int) -> int:
    if count <= 0:
        return 0
    return 1 + sum(1 for threshold in HEATMAP_LEVEL_THRESHOLDS if count >= threshold)


def study_heatmap(
    daily_stats: list[DailyStats],
    now: datetime | None = None,
    days: int = 90,
) -> list[HeatmapDay]:
    """Activity per UTC day for the last ``days`` days, oldest first.

    A day's count is cards reviewed plus five per completed session; days
    without stats count as 0.
    """
    now = now or utc_now()
    by_day = {stats.date: stats for stats in daily_stats}

    heatmap = []
    for offset in range(days - 1, -1, -1):
        key = day_key(now - timedelta(days=offset))
        stats = by_day.get(key)
        count = stats.cardsReviewed + stats.sessionsCompleted * HEATMAP_SESSION_WEIGHT if stats else 0
        heatmap.append(HeatmapDay(date=key, count=count, level=_heatmap_level(count)))
    return heatmap
