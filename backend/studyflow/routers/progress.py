"""Progress API router."""

import logging

from fastapi import APIRouter

from studyflow.config import get_app_settings
from studyflow.models import AddXpRequest, DailyStatsListResponse, UserProgress
from studyflow.repositories import get_progress_repository
from studyflow.routers.dependencies import UserId
from studyflow.services.progress import add_xp, weekly_average
from studyflow.srs.time import day_key_offset, utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("", response_model=UserProgress)
def get_progress(user_id: UserId) -> UserProgress:
    """Get streak, XP and totals for the current user."""
    return get_progress_repository().get_progress(user_id)


@router.get("/daily", response_model=DailyStatsListResponse)
def list_daily_stats(user_id: UserId) -> DailyStatsListResponse:
    """List daily stats within the retention window, oldest first."""
    retention_days = get_app_settings().daily_stats_retention_days
    since = day_key_offset(utc_now(), -retention_days)

    days = get_progress_repository().list_daily_stats(user_id, since)
    return DailyStatsListResponse(days=days, count=len(days), weeklyAverage=weekly_average(days))


@router.post("/xp", response_model=UserProgress)
def award_xp(request: AddXpRequest, user_id: UserId) -> UserProgress:
    """Add experience points, levelling up when enough have been earned."""
    repo = get_progress_repository()
    progress = repo.get_progress(user_id)
    level_before = progress.level

    add_xp(progress, request.amount)
    saved = repo.save_progress(progress)

    if saved.level > level_before:
        logger.info("User %s reached level %s", user_id, saved.level)
    return saved
