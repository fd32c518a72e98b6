"""API routers module."""

from .decks import router as decks_router
from .cards import router as cards_router
from .learn import router as learn_router
from .progress import router as progress_router
from .analytics import router as analytics_router

__all__ = [
    "decks_router",
    "cards_router",
    "learn_router",
    "progress_router",
    "analytics_router",
]
