"""Repository for Deck CRUD operations."""

from azure.cosmos import ContainerProxy
from azure.cosmos.exceptions import CosmosResourceNotFoundError

from studyflow.db import get_decks_container
from studyflow.models import Deck, DeckCreate, DeckUpdate
from studyflow.srs.time import utc_now_iso


class DeckNotFoundError(Exception):
    """Raised when a deck is not found."""

    pass


class DeckRepository:
    """Repository for Deck database operations."""

    def __init__(self, container: ContainerProxy | None = None):
        """Initialize the repository with an optional container."""
        self._container = container

    @property
    def container(self) -> ContainerProxy:
        """Get the container, lazily initializing if needed."""
        if self._container is None:
            self._container = get_decks_container()
        return self._container

    def list_by_user(self, user_id: str) -> list[Deck]:
        """List all decks for a user, newest first."""
        query = "SELECT * FROM c WHERE c.userId = @userId ORDER BY c.createdAt DESC"
        parameters = [{"name": "@userId", "value": user_id}]

        items = self.container.query_items(
            query=query,
            parameters=parameters,
            partition_key=user_id,
        )
        return [Deck(**item) for item in items]

    def get_by_id(self, deck_id: str, user_id: str) -> Deck:
        """Get a deck by ID and user ID."""
        try:
            item = self.container.read_item(item=deck_id, partition_key=user_id)
        except CosmosResourceNotFoundError:
            raise DeckNotFoundError(f"Deck with ID {deck_id} not found")
        return Deck(**item)

    def exists(self, deck_id: str, user_id: str) -> bool:
        try:
            self.get_by_id(deck_id, user_id)
        except DeckNotFoundError:
            return False
        return True

    def create(self, deck_create: DeckCreate, user_id: str) -> Deck:
        """Create a new, empty deck."""
        deck = Deck(userId=user_id, **deck_create.model_dump())
        created_item = self.container.create_item(body=deck.model_dump())
        return Deck(**created_item)

    def update(self, deck_id: str, user_id: str, deck_update: DeckUpdate) -> Deck:
        """Update title/description; returns the deck unchanged if nothing was set."""
        existing = self.get_by_id(deck_id, user_id)

        update_data = deck_update.model_dump(exclude_unset=True)
        if not update_data:
            return existing

        for key, value in update_data.items():
            setattr(existing, key, value)
        existing.updatedAt = utc_now_iso()
        updated_item = self.container.replace_item(item=deck_id, body=existing.model_dump())
        return Deck(**updated_item)

    def update_counts(self, deck_id: str, user_id: str, card_count: int, due_count: int) -> Deck:
        """Store freshly computed card and due counts on the deck."""
        deck = self.get_by_id(deck_id, user_id)
        deck.cardCount = card_count
        deck.dueCount = due_count
        deck.updatedAt = utc_now_iso()
        updated_item = self.container.replace_item(item=deck_id, body=deck.model_dump())
        return Deck(**updated_item)

    def delete(self, deck_id: str, user_id: str) -> None:
        """Delete a deck by ID."""
        try:
            self.container.delete_item(item=deck_id, partition_key=user_id)
        except CosmosResourceNotFoundError:
            raise DeckNotFoundError(f"Deck with ID {deck_id} not found")


# Singleton instance
_deck_repository: DeckRepository | None = None


def get_deck_repository() -> DeckRepository:
    """Get the deck repository singleton."""
    global _deck_repository
    if _deck_repository is None:
        _deck_repository = DeckRepository()
    return _deck_repository
