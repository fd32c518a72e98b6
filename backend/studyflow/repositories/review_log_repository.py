"""Repository for the append-only review log."""

from azure.cosmos import ContainerProxy

from studyflow.db import get_review_logs_container
from studyflow.models import ReviewLog


class ReviewLogRepository:
    """Repository for ReviewLog database operations.

    Entries are only ever created and queried, never replaced.
    """

    def __init__(self, container: ContainerProxy | None = None):
        """Initialize the repository with an optional container."""
        self._container = container

    @property
    def container(self) -> ContainerProxy:
        """Get the container, lazily initializing if needed."""
        if self._container is None:
            self._container = get_review_logs_container()
        return self._container

    def append(self, log: ReviewLog) -> ReviewLog:
        created_item = self.container.create_item(body=log.model_dump())
        return ReviewLog(**created_item)

    def _list(self, user_id: str, where: str = "", parameters: list[dict] | None = None) -> list[ReviewLog]:
        condition = f" AND {where}" if where else ""
        query = f"SELECT * FROM c WHERE c.userId = @userId{condition} ORDER BY c.timestamp ASC"
        items = self.container.query_items(
            query=query,
            parameters=[{"name": "@userId", "value": user_id}, *(parameters or [])],
            partition_key=user_id,
        )
        return [ReviewLog(**item) for item in items]

    def list_by_user(self, user_id: str) -> list[ReviewLog]:
        return self._list(user_id)

    def list_in_range(self, user_id: str, start_iso: str, end_iso: str) -> list[ReviewLog]:
        """List logs with start_iso <= timestamp <= end_iso."""
        return self._list(
            user_id,
            "c.timestamp >= @start AND c.timestamp <= @end",
            [
                {"name": "@start", "value": start_iso},
                {"name": "@end", "value": end_iso},
            ],
        )


# Singleton instance
_review_log_repository: ReviewLogRepository | None = None


def get_review_log_repository() -> ReviewLogRepository:
    """Get the review log repository singleton."""
    global _review_log_repository
    if _review_log_repository is None:
        _review_log_repository = ReviewLogRepository()
    return _review_log_repository
