"""Review state and review log models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from studyflow.models.card import CardResponse
from studyflow.models.deck import generate_uuid
from studyflow.srs.sm2 import DEFAULT_EASE_FACTOR, MIN_EASE_FACTOR, Rating, ReviewState, new_review_state
from studyflow.srs.time import parse_iso_z, utc_datetime_to_iso_z, utc_now_iso


class CardReview(BaseModel):
    """Persisted scheduling state of one card.

    The document ID is the card ID, so the store holds at most one review
    per card. Loading a document validates the scheduling invariants; the
    scheduler itself trusts its input.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Document ID (same as cardId)")
    cardId: str = Field(..., description="Card this review state belongs to")
    deckId: str = Field(..., description="Deck of the card, used for due-card queries")
    userId: str = Field(..., description="Owner user ID (partition key)")
    interval: int = Field(0, ge=0, description="Days until the card is next due")
    easeFactor: float = Field(DEFAULT_EASE_FACTOR, ge=MIN_EASE_FACTOR, description="SM-2 ease factor")
    repetitions: int = Field(0, ge=0, description="Consecutive successful reviews")
    nextReview: str = Field(default_factory=utc_now_iso, description="Next due timestamp (UTC ISO Z)")
    lastReviewed: str | None = Field(None, description="Last review timestamp (UTC ISO Z)")
    updatedAt: str = Field(default_factory=utc_now_iso, description="Last update timestamp")

    # Store-assigned version tag; never written back as part of the body.
    etag: str | None = Field(None, alias="_etag", exclude=True)

    @classmethod
    def for_new_card(cls, card_id: str, deck_id: str, user_id: str) -> "CardReview":
        """Default state for a card that has never been reviewed: due now."""
        return cls.from_state(new_review_state(card_id), deck_id=deck_id, user_id=user_id)

    @classmethod
    def from_state(
        cls,
        state: ReviewState,
        *,
        deck_id: str,
        user_id: str,
        etag: str | None = None,
    ) -> "CardReview":
        return cls(
            id=state.card_id,
            cardId=state.card_id,
            deckId=deck_id,
            userId=user_id,
            interval=state.interval_days,
            easeFactor=state.ease_factor,
            repetitions=state.repetitions,
            nextReview=utc_datetime_to_iso_z(state.next_review) if state.next_review else utc_now_iso(),
            lastReviewed=utc_datetime_to_iso_z(state.last_reviewed) if state.last_reviewed else None,
            etag=etag,
        )

    def to_state(self) -> ReviewState:
        return ReviewState(
            card_id=self.cardId,
            interval_days=self.interval,
            ease_factor=self.easeFactor,
            repetitions=self.repetitions,
            next_review=parse_iso_z(self.nextReview),
            last_reviewed=parse_iso_z(self.lastReviewed) if self.lastReviewed else None,
        )


class CardReviewResponse(BaseModel):
    """Review state returned by API."""

    cardId: str
    deckId: str
    interval: int
    easeFactor: float
    repetitions: int
    nextReview: str
    lastReviewed: str | None
    intervalText: str


class ReviewLog(BaseModel):
    """One review event, appended for analytics and never updated."""

    id: str = Field(default_factory=generate_uuid, description="Unique identifier")
    userId: str = Field(..., description="Owner user ID (partition key)")
    cardId: str
    deckId: str
    rating: Rating
    responseTime: int = Field(..., ge=0, description="Time to answer in milliseconds")
    timestamp: str = Field(default_factory=utc_now_iso, description="Review timestamp (UTC ISO Z)")
    wasCorrect: bool = Field(..., description="False only for 'again'")


class ReviewRequest(BaseModel):
    """Request for POST /learn/review."""

    cardId: str = Field(..., description="ID of the reviewed card")
    rating: Rating = Field(..., description="again, hard, good or easy")
    responseTimeMs: int | None = Field(
        None, ge=0, description="Time the learner took to answer, in milliseconds"
    )


class LearnNextResponse(BaseModel):
    """Response for GET /learn/next."""

    card: CardResponse | None = Field(None, description="A card due now")
    review: CardReviewResponse | None = Field(None, description="Scheduling state of the due card")
    nextDueAt: str | None = Field(
        None,
        description="Earliest upcoming nextReview when no card is due now",
    )


class DueCardsResponse(BaseModel):
    """Response for GET /learn/due."""

    cards: list[CardResponse]
    count: int


class ReviewPreviewResponse(BaseModel):
    """Response for GET /learn/preview."""

    cardId: str
    currentInterval: str = Field(..., description="Current interval as display text")
    previews: dict[Rating, str] = Field(..., description="Interval text each rating would produce")
