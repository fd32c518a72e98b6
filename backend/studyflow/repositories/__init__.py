"""Repositories module for data access layer."""

from .deck_repository import (
    DeckRepository,
    DeckNotFoundError,
    get_deck_repository,
)
from .card_repository import (
    CardRepository,
    CardNotFoundError,
    get_card_repository,
)
from .review_repository import (
    ReviewRepository,
    ReviewNotFoundError,
    ReviewConflictError,
    get_review_repository,
)
from .review_log_repository import (
    ReviewLogRepository,
    get_review_log_repository,
)
from .progress_repository import (
    ProgressRepository,
    get_progress_repository,
)

__all__ = [
    "DeckRepository",
    "DeckNotFoundError",
    "get_deck_repository",
    "CardRepository",
    "CardNotFoundError",
    "get_card_repository",
    "ReviewRepository",
    "ReviewNotFoundError",
    "ReviewConflictError",
    "get_review_repository",
    "ReviewLogRepository",
    "get_review_log_repository",
    "ProgressRepository",
    "get_progress_repository",
]
