"""Repository for Card CRUD operations."""

from azure.cosmos import ContainerProxy
from azure.cosmos.exceptions import CosmosResourceNotFoundError

from studyflow.db import get_cards_container
from studyflow.models import Card, CardCreate, CardUpdate
from studyflow.repositories.deck_repository import DeckNotFoundError, get_deck_repository
from studyflow.srs.time import utc_now_iso


class CardNotFoundError(Exception):
    """Raised when a card is not found."""

    pass


class CardRepository:
    """Repository for Card database operations."""

    def __init__(self, container: ContainerProxy | None = None):
        """Initialize the repository with an optional container."""
        self._container = container

    @property
    def container(self) -> ContainerProxy:
        """Get the container, lazily initializing if needed."""
        if self._container is None:
            self._container = get_cards_container()
        return self._container

    def list_by_deck(self, deck_id: str, user_id: str) -> list[Card]:
        """List all cards in a deck, newest first."""
        query = "SELECT * FROM c WHERE c.deckId = @deckId AND c.userId = @userId ORDER BY c.createdAt DESC"
        parameters = [
            {"name": "@deckId", "value": deck_id},
            {"name": "@userId", "value": user_id},
        ]

        items = self.container.query_items(
            query=query,
            parameters=parameters,
            partition_key=user_id,
        )
        return [Card(**item) for item in items]

    def list_by_user(self, user_id: str) -> list[Card]:
        query = "SELECT * FROM c WHERE c.userId = @userId"
        items = self.container.query_items(
            query=query,
            parameters=[{"name": "@userId", "value": user_id}],
            partition_key=user_id,
        )
        return [Card(**item) for item in items]

    def list_by_ids(self, card_ids: list[str], user_id: str) -> list[Card]:
        """Fetch several cards, preserving the order of ``card_ids``.

        IDs with no matching card are skipped.
        """
        if not card_ids:
            return []

        query = "SELECT * FROM c WHERE c.userId = @userId AND ARRAY_CONTAINS(@ids, c.id)"
        parameters = [
            {"name": "@userId", "value": user_id},
            {"name": "@ids", "value": card_ids},
        ]
        by_id = {
            item["id"]: Card(**item)
            for item in self.container.query_items(
                query=query,
                parameters=parameters,
                partition_key=user_id,
            )
        }
        return [by_id[card_id] for card_id in card_ids if card_id in by_id]

    def get_by_id(self, card_id: str, user_id: str) -> Card:
        """Get a card by ID and user ID."""
        try:
            item = self.container.read_item(item=card_id, partition_key=user_id)
        except CosmosResourceNotFoundError:
            raise CardNotFoundError(f"Card with ID {card_id} not found")
        return Card(**item)

    def count_by_deck(self, deck_id: str, user_id: str) -> int:
        query = "SELECT VALUE COUNT(1) FROM c WHERE c.deckId = @deckId AND c.userId = @userId"
        parameters = [
            {"name": "@deckId", "value": deck_id},
            {"name": "@userId", "value": user_id},
        ]
        return list(
            self.container.query_items(
                query=query,
                parameters=parameters,
                partition_key=user_id,
            )
        )[0]

    def create(self, deck_id: str, user_id: str, card_create: CardCreate) -> Card:
        """Create a new card in a deck.

        Only the card document is written here; callers create its review state.
        """
        if not get_deck_repository().exists(deck_id, user_id):
            raise DeckNotFoundError(f"Deck with ID {deck_id} not found")

        card = Card(deckId=deck_id, userId=user_id, **card_create.model_dump())
        created_item = self.container.create_item(body=card.model_dump())
        return Card(**created_item)

    def update(self, card_id: str, user_id: str, card_update: CardUpdate) -> Card:
        """Update question/answer fields of an existing card."""
        existing = self.get_by_id(card_id, user_id)

        update_data = card_update.model_dump(exclude_unset=True)
        if not update_data:
            return existing

        for key, value in update_data.items():
            setattr(existing, key, value)
        existing.updatedAt = utc_now_iso()
        updated_item = self.container.replace_item(item=card_id, body=existing.model_dump())
        return Card(**updated_item)

    def delete(self, card_id: str, user_id: str) -> None:
        """Delete a card by ID."""
        try:
            self.container.delete_item(item=card_id, partition_key=user_id)
        except CosmosResourceNotFoundError:
            raise CardNotFoundError(f"Card with ID {card_id} not found")

    def delete_by_deck(self, deck_id: str, user_id: str) -> list[str]:
        """Delete all cards in a deck. Returns the IDs of the deleted cards."""
        card_ids = [card.id for card in self.list_by_deck(deck_id, user_id)]
        for card_id in card_ids:
            self.container.delete_item(item=card_id, partition_key=user_id)
        return card_ids


# Singleton instance
_card_repository: CardRepository | None = None


def get_card_repository() -> CardRepository:
    """Get the card repository singleton."""
    global _card_repository
    if _card_repository is None:
        _card_repository = CardRepository()
    return _card_repository
