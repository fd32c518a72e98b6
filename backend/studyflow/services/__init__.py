"""Review orchestration, progress rules and analytics."""

from .reviews import (
    ReviewEvent,
    ReviewObserver,
    ReviewProcessor,
    ReviewService,
    ReviewLogRecorder,
    ProgressTracker,
    DeckCountUpdater,
    get_deck_count_updater,
    get_review_processor,
    get_review_service,
)

__all__ = [
    "ReviewEvent",
    "ReviewObserver",
    "ReviewProcessor",
    "ReviewService",
    "ReviewLogRecorder",
    "ProgressTracker",
    "DeckCountUpdater",
    "get_deck_count_updater",
    "get_review_processor",
    "get_review_service",
]
