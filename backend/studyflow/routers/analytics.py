"""Analytics API router.

Reports are computed on request from the user's decks, cards, review states,
review logs and daily stats.
"""

from datetime import timedelta

from fastapi import APIRouter, Query

from studyflow.models import (
    DeckAnalyticsResponse,
    RetentionResponse,
    StudyEfficiencyResponse,
    StudyHeatmapResponse,
    WeakTopicsResponse,
)
from studyflow.repositories import (
    get_card_repository,
    get_deck_repository,
    get_progress_repository,
    get_review_log_repository,
    get_review_repository,
)
from studyflow.routers.dependencies import UserId
from studyflow.services import analytics
from studyflow.srs.time import day_key_offset, utc_datetime_to_iso_z, utc_now

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/decks", response_model=DeckAnalyticsResponse)
def get_deck_analytics(user_id: UserId) -> DeckAnalyticsResponse:
    """Per-deck mastery and retention."""
    decks = get_deck_repository().list_by_user(user_id)
    cards = get_card_repository().list_by_user(user_id)
    reviews = get_review_repository().list_by_user(user_id)
    logs = get_review_log_repository().list_by_user(user_id)

    results = [
        analytics.deck_analytics(
            deck,
            [card for card in cards if card.deckId == deck.id],
            reviews,
            logs,
        )
        for deck in decks
    ]
    return DeckAnalyticsResponse(
        decks=results,
        totalMastered=sum(deck.masteredCards for deck in results),
        totalLearning=sum(deck.learningCards for deck in results),
        overallRetention=analytics.overall_retention(results),
    )


@router.get("/efficiency", response_model=StudyEfficiencyResponse)
def get_study_efficiency(user_id: UserId) -> StudyEfficiencyResponse:
    """Study efficiency score over the last 30 days."""
    now = utc_now()
    logs = get_review_log_repository().list_in_range(
        user_id,
        utc_datetime_to_iso_z(now - timedelta(days=analytics.EFFICIENCY_WINDOW_DAYS)),
        utc_datetime_to_iso_z(now),
    )
    return StudyEfficiencyResponse(efficiency=analytics.study_efficiency(logs, now))


@router.get("/retention", response_model=RetentionResponse)
def get_retention(
    user_id: UserId,
    days: int = Query(14, ge=1, le=90, description="Number of days to report"),
) -> RetentionResponse:
    """Daily retention rate, oldest day first."""
    now = utc_now()
    logs = get_review_log_repository().list_in_range(
        user_id,
        utc_datetime_to_iso_z(now - timedelta(days=days)),
        utc_datetime_to_iso_z(now),
    )
    return RetentionResponse(points=analytics.retention_series(logs, now, days))


@router.get("/weak-topics", response_model=WeakTopicsResponse)
def get_weak_topics(
    user_id: UserId,
    limit: int = Query(10, ge=1, le=50),
) -> WeakTopicsResponse:
    """Cards the user fails most often."""
    topics = analytics.weak_topics(
        get_deck_repository().list_by_user(user_id),
        get_card_repository().list_by_user(user_id),
        get_review_repository().list_by_user(user_id),
        get_review_log_repository().list_by_user(user_id),
        limit,
    )
    return WeakTopicsResponse(topics=topics, count=len(topics))


@router.get("/heatmap", response_model=StudyHeatmapResponse)
def get_study_heatmap(
    user_id: UserId,
    days: int = Query(90, ge=1, le=365, description="Number of days to report"),
) -> StudyHeatmapResponse:
    """Study activity per day, oldest day first."""
    now = utc_now()
    stats = get_progress_repository().list_daily_stats(user_id, day_key_offset(now, -(days - 1)))
    return StudyHeatmapResponse(days=analytics.study_heatmap(stats, now, days))
