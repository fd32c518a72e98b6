"""Learn (SRS) API router."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from studyflow.models import (
    CardResponse,
    CardReview,
    CardReviewResponse,
    DueCardsResponse,
    LearnNextResponse,
    ReviewPreviewResponse,
    ReviewRequest,
)
from studyflow.repositories import (
    CardNotFoundError,
    ReviewConflictError,
    get_deck_repository,
    get_review_repository,
)
from studyflow.routers.dependencies import UserId
from studyflow.services import get_review_service
from studyflow.srs.intervals import describe_interval
from studyflow.srs.time import utc_now_iso

router = APIRouter(prefix="/learn", tags=["learn"])


def to_review_response(review: CardReview) -> CardReviewResponse:
    return CardReviewResponse(
        cardId=review.cardId,
        deckId=review.deckId,
        interval=review.interval,
        easeFactor=review.easeFactor,
        repetitions=review.repetitions,
        nextReview=review.nextReview,
        lastReviewed=review.lastReviewed,
        intervalText=describe_interval(review.interval),
    )


def verify_deck_ownership(deck_id: str, user_id: str) -> None:
    if not get_deck_repository().exists(deck_id, user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Deck with ID {deck_id} not found",
        )


@router.get("/next", response_model=LearnNextResponse)
def get_next_card(
    user_id: UserId,
    deck_id: str = Query(..., alias="deckId", description="Deck to study"),
) -> LearnNextResponse:
    """Get the most overdue card in a deck.

    When nothing is due, returns the time the next card becomes due instead
    (null for an empty deck).
    """
    verify_deck_ownership(deck_id, user_id)

    result = get_review_service().next_due(user_id, deck_id, utc_now_iso())
    if result is None:
        return LearnNextResponse(
            nextDueAt=get_review_repository().get_next_due_at_for_deck(user_id, deck_id),
        )

    card, review = result
    return LearnNextResponse(
        card=CardResponse(**card.model_dump()),
        review=to_review_response(review),
    )


@router.get("/due", response_model=DueCardsResponse)
def list_due_cards(
    user_id: UserId,
    deck_id: str = Query(..., alias="deckId", description="Deck to study"),
) -> DueCardsResponse:
    """List every card of a deck that is due now, most overdue first."""
    verify_deck_ownership(deck_id, user_id)

    cards = get_review_service().due_cards(user_id, deck_id, utc_now_iso())
    return DueCardsResponse(
        cards=[CardResponse(**card.model_dump()) for card in cards],
        count=len(cards),
    )


@router.post("/review", response_model=CardReviewResponse)
def review_card(request: ReviewRequest, user_id: UserId) -> CardReviewResponse:
    """Rate a card and reschedule it.

    Returns 409 if the card's review state was changed by another request
    while this one was being processed; the client may simply retry.
    """
    try:
        review = get_review_service().submit_review(
            user_id,
            request.cardId,
            request.rating,
            request.responseTimeMs,
        )
    except CardNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card with ID {request.cardId} not found",
        )
    except ReviewConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return to_review_response(review)


@router.get("/preview", response_model=ReviewPreviewResponse)
def preview_card(
    user_id: UserId,
    card_id: str = Query(..., alias="cardId", description="Card to preview"),
) -> ReviewPreviewResponse:
    """Show the interval each rating would give a card, without saving anything."""
    try:
        review, previews = get_review_service().preview(user_id, card_id)
    except CardNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card with ID {card_id} not found",
        )

    return ReviewPreviewResponse(
        cardId=card_id,
        currentInterval=describe_interval(review.interval),
        previews=previews,
    )
