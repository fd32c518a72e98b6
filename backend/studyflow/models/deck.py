"""Deck models for API requests and responses."""

from pydantic import BaseModel, Field
from uuid import uuid4

from studyflow.srs.time import utc_now_iso


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid4())


class DeckBase(BaseModel):
    """Base deck model with common fields."""

    title: str = Field(..., min_length=1, max_length=200, description="Title of the deck")
    description: str | None = Field(None, max_length=1000, description="Optional description")


class DeckCreate(DeckBase):
    """Model for creating a new deck."""

    pass


class DeckUpdate(BaseModel):
    """Model for updating an existing deck."""

    title: str | None = Field(None, min_length=1, max_length=200, description="Title of the deck")
    description: str | None = Field(None, max_length=1000, description="Optional description")


class Deck(DeckBase):
    """Full deck model as stored in the database."""

    id: str = Field(default_factory=generate_uuid, description="Unique identifier")
    userId: str = Field(..., description="Owner user ID (partition key)")
    cardCount: int = Field(0, ge=0, description="Number of cards in the deck")
    dueCount: int = Field(0, ge=0, description="Number of cards due at the last recount")
    createdAt: str = Field(default_factory=utc_now_iso, description="Creation timestamp")
    updatedAt: str = Field(default_factory=utc_now_iso, description="Last update timestamp")

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "userId": "user-001",
                "title": "Organic Chemistry",
                "description": "Functional groups and reactions",
                "cardCount": 42,
                "dueCount": 7,
                "createdAt": "2025-01-01T00:00:00Z",
                "updatedAt": "2025-01-01T00:00:00Z",
            }
        }


class DeckResponse(DeckBase):
    """Deck response model returned by API."""

    id: str
    userId: str
    cardCount: int
    dueCount: int
    createdAt: str
    updatedAt: str


class DeckListResponse(BaseModel):
    """Response containing a list of decks."""

    decks: list[DeckResponse]
    count: int
