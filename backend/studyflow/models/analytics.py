"""Analytics report models."""

from pydantic import BaseModel, Field


class DeckAnalytics(BaseModel):
    deckId: str
    deckTitle: str
    totalCards: int
    masteredCards: int
    learningCards: int
    newCards: int
    retentionRate: int = Field(..., description="Percentage of successful reviews")
    averageEaseFactor: float
    weakCards: list[str] = Field(default_factory=list, description="Card IDs with low retention")


class StudyEfficiency(BaseModel):
    score: int = Field(..., ge=0, le=100)
    averageResponseTime: int = Field(..., description="Milliseconds")
    correctRate: int = Field(..., description="Percentage")
    consistencyScore: int = Field(..., ge=0, le=100)
    improvementTrend: int = Field(..., description="Positive means improving")


class RetentionDataPoint(BaseModel):
    date: str
    retention: int
    reviews: int


class WeakTopic(BaseModel):
    deckId: str
    deckTitle: str
    cardId: str
    question: str
    failureRate: int = Field(..., description="Percentage")
    lastReviewed: str | None = None


class HeatmapDay(BaseModel):
    date: str
    count: int = Field(..., description="Cards reviewed plus 5 per completed session")
    level: int = Field(..., ge=0, le=4)


class DeckAnalyticsResponse(BaseModel):
    decks: list[DeckAnalytics]
    totalMastered: int
    totalLearning: int
    overallRetention: int


class StudyEfficiencyResponse(BaseModel):
    efficiency: StudyEfficiency | None = Field(None, description="Null when there are no recent reviews")


class RetentionResponse(BaseModel):
    points: list[RetentionDataPoint]


class WeakTopicsResponse(BaseModel):
    topics: list[WeakTopic]
    count: int


class StudyHeatmapResponse(BaseModel):
    days: list[HeatmapDay]
