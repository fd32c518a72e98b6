"""Cards API router.

Creating a card also creates its review state; deleting a card removes it.
"""

from fastapi import APIRouter, HTTPException, status

from studyflow.models import Card, CardCreate, CardUpdate, CardResponse, CardListResponse
from studyflow.repositories import (
    CardNotFoundError,
    DeckNotFoundError,
    get_card_repository,
    get_deck_repository,
    get_review_repository,
)
from studyflow.routers.dependencies import UserId
from studyflow.services import get_deck_count_updater

router = APIRouter(prefix="/decks/{deck_id}/cards", tags=["cards"])


def verify_deck_ownership(deck_id: str, user_id: str) -> None:
    """Verify that the deck exists and belongs to the user."""
    if not get_deck_repository().exists(deck_id, user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Deck with ID {deck_id} not found",
        )


def get_card_in_deck(deck_id: str, card_id: str, user_id: str) -> Card:
    """Load a card, treating a card from another deck as missing."""
    try:
        card = get_card_repository().get_by_id(card_id, user_id)
    except CardNotFoundError:
        card = None
    if card is None or card.deckId != deck_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card with ID {card_id} not found in deck {deck_id}",
        )
    return card


@router.get("", response_model=CardListResponse)
def list_cards(deck_id: str, user_id: UserId) -> CardListResponse:
    """List all cards in a deck."""
    verify_deck_ownership(deck_id, user_id)

    cards = get_card_repository().list_by_deck(deck_id, user_id)
    return CardListResponse(
        cards=[CardResponse(**card.model_dump()) for card in cards],
        count=len(cards),
    )


@router.get("/{card_id}", response_model=CardResponse)
def get_card(deck_id: str, card_id: str, user_id: UserId) -> CardResponse:
    """Get a specific card by ID."""
    verify_deck_ownership(deck_id, user_id)
    return CardResponse(**get_card_in_deck(deck_id, card_id, user_id).model_dump())


@router.post("", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
def create_card(deck_id: str, card_create: CardCreate, user_id: UserId) -> CardResponse:
    """Create a new card (due immediately) in a deck."""
    try:
        card = get_card_repository().create(deck_id, user_id, card_create)
    except DeckNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Deck with ID {deck_id} not found",
        )

    get_review_repository().create_for_card(card.id, deck_id, user_id)
    get_deck_count_updater().refresh(user_id, deck_id)
    return CardResponse(**card.model_dump())


@router.put("/{card_id}", response_model=CardResponse)
def update_card(
    deck_id: str, card_id: str, card_update: CardUpdate, user_id: UserId
) -> CardResponse:
    """Update an existing card. Its review state is left as is."""
    verify_deck_ownership(deck_id, user_id)
    get_card_in_deck(deck_id, card_id, user_id)

    try:
        card = get_card_repository().update(card_id, user_id, card_update)
    except CardNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card with ID {card_id} not found",
        )
    return CardResponse(**card.model_dump())


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_card(deck_id: str, card_id: str, user_id: UserId) -> None:
    """Delete a card and its review state."""
    verify_deck_ownership(deck_id, user_id)
    get_card_in_deck(deck_id, card_id, user_id)

    try:
        get_card_repository().delete(card_id, user_id)
    except CardNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card with ID {card_id} not found",
        )
    get_review_repository().delete(card_id, user_id)
    get_deck_count_updater().refresh(user_id, deck_id)
