"""Models module for Pydantic schemas."""

from .deck import (
    Deck,
    DeckBase,
    DeckCreate,
    DeckUpdate,
    DeckResponse,
    DeckListResponse,
)
from .card import (
    Card,
    CardBase,
    CardCreate,
    CardUpdate,
    CardResponse,
    CardListResponse,
    CardType,
)
from .review import (
    CardReview,
    CardReviewResponse,
    ReviewLog,
    ReviewRequest,
    LearnNextResponse,
    DueCardsResponse,
    ReviewPreviewResponse,
)
from .progress import (
    UserProgress,
    DailyStats,
    DailyStatsListResponse,
    AddXpRequest,
)
from .analytics import (
    DeckAnalytics,
    StudyEfficiency,
    RetentionDataPoint,
    WeakTopic,
    HeatmapDay,
    DeckAnalyticsResponse,
    StudyEfficiencyResponse,
    RetentionResponse,
    WeakTopicsResponse,
    StudyHeatmapResponse,
)

__all__ = [
    "Deck",
    "DeckBase",
    "DeckCreate",
    "DeckUpdate",
    "DeckResponse",
    "DeckListResponse",
    "Card",
    "CardBase",
    "CardCreate",
    "CardUpdate",
    "CardResponse",
    "CardListResponse",
    "CardType",
    "CardReview",
    "CardReviewResponse",
    "ReviewLog",
    "ReviewRequest",
    "LearnNextResponse",
    "DueCardsResponse",
    "ReviewPreviewResponse",
    "UserProgress",
    "DailyStats",
    "DailyStatsListResponse",
    "AddXpRequest",
    "DeckAnalytics",
    "StudyEfficiency",
    "RetentionDataPoint",
    "WeakTopic",
    "HeatmapDay",
    "DeckAnalyticsResponse",
    "StudyEfficiencyResponse",
    "RetentionResponse",
    "WeakTopicsResponse",
    "StudyHeatmapResponse",
]
