"""Repository for user progress and daily stats."""

from azure.cosmos import ContainerProxy
from azure.cosmos.exceptions import CosmosResourceNotFoundError

from studyflow.db import get_daily_stats_container, get_progress_container
from studyflow.models import DailyStats, UserProgress


class ProgressRepository:
    """Repository for UserProgress and DailyStats documents.

    Missing documents read back as fresh defaults, so callers never see a
    not-found error for a user who has not studied yet.
    """

    def __init__(
        self,
        progress_container: ContainerProxy | None = None,
        daily_stats_container: ContainerProxy | None = None,
    ):
        self._progress_container = progress_container
        self._daily_stats_container = daily_stats_container

    @property
    def progress_container(self) -> ContainerProxy:
        if self._progress_container is None:
            self._progress_container = get_progress_container()
        return self._progress_container

    @property
    def daily_stats_container(self) -> ContainerProxy:
        if self._daily_stats_container is None:
            self._daily_stats_container = get_daily_stats_container()
        return self._daily_stats_container

    def get_progress(self, user_id: str) -> UserProgress:
        try:
            item = self.progress_container.read_item(item=user_id, partition_key=user_id)
        except CosmosResourceNotFoundError:
            return UserProgress.initial(user_id)
        return UserProgress(**item)

    def save_progress(self, progress: UserProgress) -> UserProgress:
        saved_item = self.progress_container.upsert_item(body=progress.model_dump())
        return UserProgress(**saved_item)

    def get_daily_stats(self, user_id: str, date: str) -> DailyStats:
        """Get stats for one UTC day (YYYY-MM-DD)."""
        empty = DailyStats.empty(user_id, date)
        try:
            item = self.daily_stats_container.read_item(item=empty.id, partition_key=user_id)
        except CosmosResourceNotFoundError:
            return empty
        return DailyStats(**item)

    def save_daily_stats(self, stats: DailyStats) -> DailyStats:
        saved_item = self.daily_stats_container.upsert_item(body=stats.model_dump())
        return DailyStats(**saved_item)

    def list_daily_stats(self, user_id: str, since_date: str | None = None) -> list[DailyStats]:
        """List daily stats, oldest first, optionally from ``since_date`` on."""
        query = "SELECT * FROM c WHERE c.userId = @userId AND c.date >= @since ORDER BY c.date ASC"
        parameters = [
            {"name": "@userId", "value": user_id},
            {"name": "@since", "value": since_date or ""},
        ]
        items = self.daily_stats_container.query_items(
            query=query,
            parameters=parameters,
            partition_key=user_id,
        )
        return [DailyStats(**item) for item in items]

    def prune_daily_stats(self, user_id: str, before_date: str) -> int:
        """Delete stats older than ``before_date``. Returns how many were removed."""
        query = "SELECT c.id FROM c WHERE c.userId = @userId AND c.date < @before"
        parameters = [
            {"name": "@userId", "value": user_id},
            {"name": "@before", "value": before_date},
        ]
        stale = list(
            self.daily_stats_container.query_items(
                query=query,
                parameters=parameters,
                partition_key=user_id,
            )
        )
        for item in stale:
            self.daily_stats_container.delete_item(item=item["id"], partition_key=user_id)
        return len(stale)


# Singleton instance
_progress_repository: ProgressRepository | None = None


def get_progress_repository() -> ProgressRepository:
    """Get the progress repository singleton."""
    global _progress_repository
    if _progress_repository is None:
        _progress_repository = ProgressRepository()
    return _progress_repository
