"""Repository for per-card review state (CardReview documents)."""

import logging

from azure.core import MatchConditions
from azure.cosmos import ContainerProxy
from azure.cosmos.exceptions import (
    CosmosAccessConditionFailedError,
    CosmosResourceExistsError,
    CosmosResourceNotFoundError,
)

from studyflow.db import get_reviews_container
from studyflow.models import CardReview
from studyflow.srs.sm2 import ReviewState
from studyflow.srs.time import utc_now_iso

logger = logging.getLogger(__name__)


class ReviewNotFoundError(Exception):
    """Raised when a card has no stored review state."""

    pass


class ReviewConflictError(Exception):
    """Raised when a review state was modified since it was read."""

    pass


class ReviewRepository:
    """Repository for CardReview database operations.

    Documents are keyed by card ID, one per card.
    """

    def __init__(self, container: ContainerProxy | None = None):
        """Initialize the repository with an optional container."""
        self._container = container

    @property
    def container(self) -> ContainerProxy:
        """Get the container, lazily initializing if needed."""
        if self._container is None:
            self._container = get_reviews_container()
        return self._container

    def get_by_card(self, card_id: str, user_id: str) -> CardReview:
        try:
            item = self.container.read_item(item=card_id, partition_key=user_id)
        except CosmosResourceNotFoundError:
            raise ReviewNotFoundError(f"No review state for card {card_id}")
        return CardReview(**item)

    def create_for_card(self, card_id: str, deck_id: str, user_id: str) -> CardReview:
        """Create the default review state for a new card.

        If the card already has one (e.g. a retried request), the stored state wins.
        """
        review = CardReview.for_new_card(card_id, deck_id, user_id)
        try:
            created_item = self.container.create_item(body=review.model_dump())
        except CosmosResourceExistsError:
            return self.get_by_card(card_id, user_id)
        return CardReview(**created_item)

    def save_state(
        self,
        state: ReviewState,
        *,
        user_id: str,
        deck_id: str,
        etag: str | None = None,
    ) -> CardReview:
        """Persist a scheduler result.

        With an etag the write only succeeds if the stored document is unchanged
        since it was read; otherwise the document is upserted.

        Raises:
            ReviewConflictError: If the etag no longer matches.
        """
        review = CardReview.from_state(state, deck_id=deck_id, user_id=user_id)
        body = review.model_dump()

        if etag is None:
            saved_item = self.container.upsert_item(body=body)
            return CardReview(**saved_item)

        try:
            saved_item = self.container.replace_item(
                item=review.id,
                body=body,
                etag=etag,
                match_condition=MatchConditions.IfNotModified,
            )
        except CosmosAccessConditionFailedError:
            logger.warning("Concurrent review update rejected: user=%s, card=%s", user_id, state.card_id)
            raise ReviewConflictError(f"Review state for card {state.card_id} was modified concurrently")
        return CardReview(**saved_item)

    def _query(self, query: str, parameters: list[dict], user_id: str) -> list:
        return list(
            self.container.query_items(
                query=query,
                parameters=parameters,
                partition_key=user_id,
            )
        )

    def list_by_user(self, user_id: str) -> list[CardReview]:
        items = self._query(
            "SELECT * FROM c WHERE c.userId = @userId",
            [{"name": "@userId", "value": user_id}],
            user_id,
        )
        return [CardReview(**item) for item in items]

    def list_due_for_deck(self, user_id: str, deck_id: str, now_iso: str) -> list[CardReview]:
        """Return reviews due at ``now_iso``, most overdue first."""
        items = self._query(
            "SELECT * FROM c "
            "WHERE c.deckId = @deckId AND c.userId = @userId AND c.nextReview <= @nowIso "
            "ORDER BY c.nextReview ASC",
            [
                {"name": "@deckId", "value": deck_id},
                {"name": "@userId", "value": user_id},
                {"name": "@nowIso", "value": now_iso},
            ],
            user_id,
        )
        return [CardReview(**item) for item in items]

    def get_next_due_at_for_deck(self, user_id: str, deck_id: str) -> str | None:
        """Return the earliest nextReview in a deck (or None if the deck has no cards)."""
        items = self._query(
            "SELECT TOP 1 VALUE c.nextReview FROM c "
            "WHERE c.deckId = @deckId AND c.userId = @userId "
            "ORDER BY c.nextReview ASC",
            [
                {"name": "@deckId", "value": deck_id},
                {"name": "@userId", "value": user_id},
            ],
            user_id,
        )
        if not items:
            return None
        return items[0]

    def count_due_for_deck(self, user_id: str, deck_id: str, now_iso: str | None = None) -> int:
        items = self._query(
            "SELECT VALUE COUNT(1) FROM c "
            "WHERE c.deckId = @deckId AND c.userId = @userId AND c.nextReview <= @nowIso",
            [
                {"name": "@deckId", "value": deck_id},
                {"name": "@userId", "value": user_id},
                {"name": "@nowIso", "value": now_iso or utc_now_iso()},
            ],
            user_id,
        )
        return items[0]

    def delete(self, card_id: str, user_id: str) -> None:
        """Delete the review state of a card; a missing document is not an error."""
        try:
            self.container.delete_item(item=card_id, partition_key=user_id)
        except CosmosResourceNotFoundError:
            logger.debug("No review state to delete for card %s", card_id)

    def delete_many(self, card_ids: list[str], user_id: str) -> None:
        for card_id in card_ids:
            self.delete(card_id, user_id)


# Singleton instance
_review_repository: ReviewRepository | None = None


def get_review_repository() -> ReviewRepository:
    """Get the review repository singleton."""
    global _review_repository
    if _review_repository is None:
        _review_repository = ReviewRepository()
    return _review_repository
