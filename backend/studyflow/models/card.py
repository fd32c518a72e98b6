"""Card models for API requests and responses."""

from typing import Literal
from pydantic import BaseModel, Field

from studyflow.models.deck import generate_uuid
from studyflow.srs.time import utc_now_iso


CardType = Literal["standard", "cloze"]


class CardBase(BaseModel):
    """Base card model with common fields."""

    question: str = Field(..., min_length=1, max_length=2000, description="Prompt side of the card")
    answer: str = Field(..., min_length=1, max_length=2000, description="Answer side of the card")
    cardType: CardType = Field("standard", description="Standard question/answer or cloze deletion")
    clozeContent: str | None = Field(
        None,
        max_length=4000,
        description="Cloze text, e.g. 'The capital of {{France}} is Paris'",
    )


class CardCreate(CardBase):
    """Model for creating a new card."""

    pass


class CardUpdate(BaseModel):
    """Model for updating an existing card."""

    question: str | None = Field(None, min_length=1, max_length=2000, description="Prompt side of the card")
    answer: str | None = Field(None, min_length=1, max_length=2000, description="Answer side of the card")
    cardType: CardType | None = Field(None, description="Standard question/answer or cloze deletion")
    clozeContent: str | None = Field(None, max_length=4000, description="Cloze text")


class Card(CardBase):
    """Full card model as stored in the database.

    Scheduling state lives in a separate CardReview document keyed by the card ID.
    """

    id: str = Field(default_factory=generate_uuid, description="Unique identifier")
    deckId: str = Field(..., description="Parent deck ID")
    userId: str = Field(..., description="Owner user ID (partition key)")
    createdAt: str = Field(default_factory=utc_now_iso, description="Creation timestamp")
    updatedAt: str = Field(default_factory=utc_now_iso, description="Last update timestamp")

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174001",
                "deckId": "123e4567-e89b-12d3-a456-426614174000",
                "userId": "user-001",
                "question": "What is the hybridization of carbon in ethene?",
                "answer": "sp2",
                "cardType": "standard",
                "createdAt": "2025-01-01T00:00:00Z",
                "updatedAt": "2025-01-01T00:00:00Z",
            }
        }


class CardResponse(CardBase):
    """Card response model returned by API."""

    id: str
    deckId: str
    userId: str
    createdAt: str
    updatedAt: str


class CardListResponse(BaseModel):
    """Response containing a list of cards."""

    cards: list[CardResponse]
    count: int
