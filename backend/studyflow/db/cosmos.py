"""
Cosmos DB client and container access for StudyFlow.

Every entity lives in its own container, partitioned by ``/userId``:
decks, cards, reviews (one CardReview per card), review_logs (append-only),
progress (one document per user) and daily_stats (one document per user per day).

Authentication:
- COSMOS_EMULATOR=true: local emulator with its well-known key
- otherwise: DefaultAzureCredential against COSMOS_ENDPOINT (Managed Identity
  in Azure, `az login` locally)
"""

import os
import logging
from functools import lru_cache
from azure.cosmos import CosmosClient, DatabaseProxy, ContainerProxy
from azure.cosmos.exceptions import CosmosHttpResponseError
from azure.identity import DefaultAzureCredential

logger = logging.getLogger(__name__)

# Cosmos DB Emulator well-known key (public, not a secret)
# https://learn.microsoft.com/en-us/azure/cosmos-db/emulator#authentication
EMULATOR_KEY = "C2y6yDjf5/R+ob0N8A7Cgv30VRDJIWEHLM+4QDU5DE2nQ9nDuVTqobD4b8mGGyPMbIZnqyMsEcaGQy67XIw/Jw=="
EMULATOR_ENDPOINT = "https://localhost:8081"


class CosmosDBSettings:
    """Settings for the StudyFlow database and its containers."""

    def __init__(self):
        self.endpoint = os.getenv("COSMOS_ENDPOINT", "")
        self.database_name = os.getenv("COSMOS_DB_NAME", "studyflow")
        self.decks_container = os.getenv("COSMOS_DECKS_CONTAINER", "decks")
        self.cards_container = os.getenv("COSMOS_CARDS_CONTAINER", "cards")
        self.reviews_container = os.getenv("COSMOS_REVIEWS_CONTAINER", "reviews")
        self.review_logs_container = os.getenv("COSMOS_REVIEW_LOGS_CONTAINER", "review_logs")
        self.progress_container = os.getenv("COSMOS_PROGRESS_CONTAINER", "progress")
        self.daily_stats_container = os.getenv("COSMOS_DAILY_STATS_CONTAINER", "daily_stats")
        self.use_emulator = os.getenv("COSMOS_EMULATOR", "false").lower() == "true"

    def is_configured(self) -> bool:
        """Check if Cosmos DB is configured."""
        return self.use_emulator or bool(self.endpoint)


@lru_cache()
def get_settings() -> CosmosDBSettings:
    """Get cached Cosmos DB settings."""
    return CosmosDBSettings()


_client: CosmosClient | None = None
_database: DatabaseProxy | None = None


def get_client() -> CosmosClient:
    """Get or create the shared Cosmos DB client.

    Raises:
        RuntimeError: If neither COSMOS_ENDPOINT nor COSMOS_EMULATOR is set.
    """
    global _client
    if _client is not None:
        return _client

    settings = get_settings()
    if not settings.is_configured():
        raise RuntimeError(
            "Cosmos DB is not configured. "
            "Set COSMOS_ENDPOINT, or COSMOS_EMULATOR=true for the local emulator."
        )

    if settings.use_emulator:
        logger.info("Using Cosmos DB Emulator at %s", EMULATOR_ENDPOINT)
        # Emulator serves a self-signed certificate
        _client = CosmosClient(EMULATOR_ENDPOINT, credential=EMULATOR_KEY, connection_verify=False)
    else:
        logger.info("Using DefaultAzureCredential for Cosmos DB at %s", settings.endpoint)
        _client = CosmosClient(settings.endpoint, credential=DefaultAzureCredential())
    return _client


def get_database() -> DatabaseProxy:
    """Get or create the database proxy."""
    global _database
    if _database is None:
        _database = get_client().get_database_client(get_settings().database_name)
    return _database


def get_container(container_name: str) -> ContainerProxy:
    """Get a container proxy by name."""
    return get_database().get_container_client(container_name)


def get_decks_container() -> ContainerProxy:
    return get_container(get_settings().decks_container)


def get_cards_container() -> ContainerProxy:
    return get_container(get_settings().cards_container)


def get_reviews_container() -> ContainerProxy:
    return get_container(get_settings().reviews_container)


def get_review_logs_container() -> ContainerProxy:
    return get_container(get_settings().review_logs_container)


def get_progress_container() -> ContainerProxy:
    return get_container(get_settings().progress_container)


def get_daily_stats_container() -> ContainerProxy:
    return get_container(get_settings().daily_stats_container)


def verify_connection() -> bool:
    """Return True if the database can be read, False otherwise."""
    settings = get_settings()
    if not settings.is_configured():
        return False
    try:
        get_database().read()
        return True
    except (CosmosHttpResponseError, RuntimeError, OSError) as e:
        logger.warning("Cosmos DB connection check failed: %s", e)
        return False


def close_client() -> None:
    """Drop the cached client and database proxies."""
    global _client, _database
    # CosmosClient manages its connection pool internally
    _client = None
    _database = None
