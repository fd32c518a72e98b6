"""Progress, streak and daily stats models."""

from pydantic import BaseModel, Field

from studyflow.srs.time import utc_now_iso


class UserProgress(BaseModel):
    """Aggregate study progress for one user (one document per user)."""

    id: str = Field(..., description="Document ID (same as userId)")
    userId: str = Field(..., description="Owner user ID (partition key)")
    currentStreak: int = Field(0, ge=0)
    longestStreak: int = Field(0, ge=0)
    totalCardsReviewed: int = Field(0, ge=0)
    totalStudyTime: int = Field(0, ge=0, description="Total study time in seconds")
    lastStudyDate: str | None = Field(None, description="Last study timestamp (UTC ISO Z)")
    xp: int = Field(0, ge=0, description="Experience points towards the next level")
    level: int = Field(1, ge=1)
    nextLevelXp: int = Field(100, ge=1, description="XP needed for the next level")
    updatedAt: str = Field(default_factory=utc_now_iso)

    @classmethod
    def initial(cls, user_id: str) -> "UserProgress":
        return cls(id=user_id, userId=user_id)


class DailyStats(BaseModel):
    """Study activity for one user on one UTC day."""

    id: str = Field(..., description="Document ID: <userId>:<date>")
    userId: str = Field(..., description="Owner user ID (partition key)")
    date: str = Field(..., description="UTC day, YYYY-MM-DD")
    cardsReviewed: int = Field(0, ge=0)
    cardsLearned: int = Field(0, ge=0)
    studyTime: int = Field(0, ge=0, description="Study time in seconds")
    sessionsCompleted: int = Field(0, ge=0)
    accuracy: float = Field(0, ge=0, le=100)
    pomodorosCompleted: int = Field(0, ge=0)
    updatedAt: str = Field(default_factory=utc_now_iso)

    @classmethod
    def empty(cls, user_id: str, date: str) -> "DailyStats":
        return cls(id=f"{user_id}:{date}", userId=user_id, date=date)


class DailyStatsListResponse(BaseModel):
    """Response for GET /progress/daily."""

    days: list[DailyStats]
    count: int
    weeklyAverage: int = Field(..., description="Average cards reviewed over the last 7 recorded days")


class AddXpRequest(BaseModel):
    """Request for POST /progress/xp."""

    amount: int = Field(..., gt=0, le=10000)
