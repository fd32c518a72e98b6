"""Decks API router."""

from fastapi import APIRouter, HTTPException, status

from studyflow.models import Deck, DeckCreate, DeckUpdate, DeckResponse, DeckListResponse
from studyflow.repositories import (
    DeckNotFoundError,
    get_card_repository,
    get_deck_repository,
    get_review_repository,
)
from studyflow.routers.dependencies import UserId
from studyflow.srs.time import utc_now_iso

router = APIRouter(prefix="/decks", tags=["decks"])


def _deck_not_found(deck_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Deck with ID {deck_id} not found",
    )


def _with_live_due_count(deck: Deck, now_iso: str) -> DeckResponse:
    due_count = get_review_repository().count_due_for_deck(deck.userId, deck.id, now_iso)
    return DeckResponse(**{**deck.model_dump(), "dueCount": due_count})


@router.get("", response_model=DeckListResponse)
def list_decks(user_id: UserId) -> DeckListResponse:
    """List all decks for the current user with up-to-date due counts."""
    now_iso = utc_now_iso()
    decks = [_with_live_due_count(deck, now_iso) for deck in get_deck_repository().list_by_user(user_id)]
    return DeckListResponse(decks=decks, count=len(decks))


@router.get("/{deck_id}", response_model=DeckResponse)
def get_deck(deck_id: str, user_id: UserId) -> DeckResponse:
    """Get a specific deck by ID."""
    try:
        deck = get_deck_repository().get_by_id(deck_id, user_id)
    except DeckNotFoundError:
        raise _deck_not_found(deck_id)
    return _with_live_due_count(deck, utc_now_iso())


@router.post("", response_model=DeckResponse, status_code=status.HTTP_201_CREATED)
def create_deck(deck_create: DeckCreate, user_id: UserId) -> DeckResponse:
    """Create a new deck."""
    deck = get_deck_repository().create(deck_create, user_id)
    return DeckResponse(**deck.model_dump())


@router.put("/{deck_id}", response_model=DeckResponse)
def update_deck(deck_id: str, deck_update: DeckUpdate, user_id: UserId) -> DeckResponse:
    """Update an existing deck."""
    try:
        deck = get_deck_repository().update(deck_id, user_id, deck_update)
    except DeckNotFoundError:
        raise _deck_not_found(deck_id)
    return DeckResponse(**deck.model_dump())


@router.delete("/{deck_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_deck(deck_id: str, user_id: UserId) -> None:
    """Delete a deck together with its cards and their review states."""
    deck_repo = get_deck_repository()
    if not deck_repo.exists(deck_id, user_id):
        raise _deck_not_found(deck_id)

    card_ids = get_card_repository().delete_by_deck(deck_id, user_id)
    get_review_repository().delete_many(card_ids, user_id)
    try:
        deck_repo.delete(deck_id, user_id)
    except DeckNotFoundError:
        raise _deck_not_found(deck_id)
