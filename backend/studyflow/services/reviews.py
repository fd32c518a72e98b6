"""Review processing: scheduling, persistence and post-review side effects.

``ReviewProcessor.process_review`` is the single entry point used when a
learner rates a card. It runs the SM-2 scheduler, saves the new state through
a review store, then hands a ``ReviewEvent`` to each registered observer
(review log, progress/streak, deck counts). The scheduler itself never sees
any of these collaborators.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Protocol, Sequence

from studyflow.config import get_app_settings
from studyflow.models import Card, CardReview, ReviewLog
from studyflow.repositories import (
    CardRepository,
    DeckNotFoundError,
    DeckRepository,
    ProgressRepository,
    ReviewLogRepository,
    ReviewNotFoundError,
    ReviewRepository,
    get_card_repository,
    get_deck_repository,
    get_progress_repository,
    get_review_log_repository,
    get_review_repository,
)
from studyflow.services.progress import record_review, update_streak
from studyflow.srs.intervals import preview_all
from studyflow.srs.sm2 import RATING_QUALITY, RandomSource, Rating, ReviewState, compute_next_state
from studyflow.srs.time import day_key, day_key_offset, utc_datetime_to_iso_z, utc_now, utc_now_iso

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewEvent:
    """Everything observers need to know about one processed review."""

    user_id: str
    deck_id: str
    rating: Rating
    response_time_ms: int
    previous: ReviewState
    current: ReviewState
    reviewed_at: datetime

    @property
    def card_id(self) -> str:
        return self.current.card_id

    @property
    def was_correct(self) -> bool:
        return RATING_QUALITY[self.rating] >= 3


class ReviewStore(Protocol):
    def save_state(
        self,
        state: ReviewState,
        *,
        user_id: str,
        deck_id: str,
        etag: str | None = None,
    ) -> CardReview: ...


class ReviewObserver(Protocol):
    def on_review_processed(self, event: ReviewEvent) -> None: ...


class ReviewProcessor:
    """Apply a rating to a review state and fan out the side effects."""

    def __init__(
        self,
        review_store: ReviewStore,
        observers: Sequence[ReviewObserver] = (),
        *,
        rng: RandomSource | None = None,
        fuzz: bool = True,
        default_response_time_ms: int = 3000,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = review_store
        self._observers = list(observers)
        self._rng = rng
        self._fuzz = fuzz
        self._default_response_time_ms = default_response_time_ms
        self._clock = clock

    def process_review(
        self,
        state: ReviewState,
        rating: Rating,
        response_time_ms: int | None = None,
        *,
        user_id: str,
        deck_id: str,
        etag: str | None = None,
    ) -> ReviewState:
        """Schedule the card, persist the result and notify observers.

        Raises:
            ReviewConflictError: If ``etag`` is given and the stored state changed.
        """
        new_state = compute_next_state(
            state,
            rating,
            now=self._clock(),
            rng=self._rng,
            fuzz=self._fuzz,
        )
        self._store.save_state(new_state, user_id=user_id, deck_id=deck_id, etag=etag)

        logger.info(
            "Review processed: user=%s, deck=%s, card=%s, rating=%s, interval=%s, next_review=%s",
            user_id,
            deck_id,
            state.card_id,
            rating,
            new_state.interval_days,
            utc_datetime_to_iso_z(new_state.next_review),
        )

        event = ReviewEvent(
            user_id=user_id,
            deck_id=deck_id,
            rating=rating,
            response_time_ms=(
                self._default_response_time_ms if response_time_ms is None else response_time_ms
            ),
            previous=state,
            current=new_state,
            reviewed_at=new_state.last_reviewed,
        )
        for observer in self._observers:
            # The new state is already saved; a failing side effect must not undo it.
            try:
                observer.on_review_processed(event)
            except Exception:
                logger.exception(
                    "Review observer %s failed for card %s", type(observer).__name__, event.card_id
                )

        return new_state


class ReviewLogRecorder:
    """Append one ReviewLog entry per processed review."""

    def __init__(self, log_repo: ReviewLogRepository):
        self._log_repo = log_repo

    def on_review_processed(self, event: ReviewEvent) -> None:
        self._log_repo.append(
            ReviewLog(
                userId=event.user_id,
                cardId=event.card_id,
                deckId=event.deck_id,
                rating=event.rating,
                responseTime=event.response_time_ms,
                timestamp=utc_datetime_to_iso_z(event.reviewed_at),
                wasCorrect=event.was_correct,
            )
        )
        logger.debug("Review log appended: card=%s, rating=%s", event.card_id, event.rating)


class ProgressTracker:
    """Update totals, today's stats and the study streak."""

    def __init__(self, progress_repo: ProgressRepository, retention_days: int = 30):
        self._progress_repo = progress_repo
        self._retention_days = retention_days

    def on_review_processed(self, event: ReviewEvent) -> None:
        now = event.reviewed_at

        progress = self._progress_repo.get_progress(event.user_id)
        progress.totalCardsReviewed += 1
        update_streak(progress, now)
        progress.updatedAt = utc_datetime_to_iso_z(now)
        self._progress_repo.save_progress(progress)

        stats = self._progress_repo.get_daily_stats(event.user_id, day_key(now))
        record_review(stats, newly_learned=event.previous.repetitions == 0, now=now)
        self._progress_repo.save_daily_stats(stats)

        pruned = self._progress_repo.prune_daily_stats(
            event.user_id, day_key_offset(now, -self._retention_days)
        )
        logger.debug(
            "Progress updated: user=%s, streak=%s, total=%s, pruned_days=%s",
            event.user_id,
            progress.currentStreak,
            progress.totalCardsReviewed,
            pruned,
        )


class DeckCountUpdater:
    """Keep a deck's cardCount and dueCount current."""

    def __init__(
        self,
        deck_repo: DeckRepository,
        card_repo: CardRepository,
        review_repo: ReviewRepository,
    ):
        self._deck_repo = deck_repo
        self._card_repo = card_repo
        self._review_repo = review_repo

    def refresh(self, user_id: str, deck_id: str, now_iso: str | None = None) -> None:
        card_count = self._card_repo.count_by_deck(deck_id, user_id)
        due_count = self._review_repo.count_due_for_deck(user_id, deck_id, now_iso or utc_now_iso())
        try:
            self._deck_repo.update_counts(deck_id, user_id, card_count, due_count)
        except DeckNotFoundError:
            logger.debug("Skipping count refresh for missing deck %s", deck_id)

    def on_review_processed(self, event: ReviewEvent) -> None:
        self.refresh(event.user_id, event.deck_id, utc_datetime_to_iso_z(event.reviewed_at))


class ReviewService:
    """Card-level review operations used by the learn API."""

    def __init__(
        self,
        card_repo: CardRepository,
        review_repo: ReviewRepository,
        processor: ReviewProcessor,
        *,
        rng: RandomSource | None = None,
        fuzz: bool = True,
    ):
        self._card_repo = card_repo
        self._review_repo = review_repo
        self._processor = processor
        self._rng = rng
        self._fuzz = fuzz

    def get_review(self, card: Card) -> CardReview:
        """Load a card's review state, creating the default one if it is missing."""
        try:
            return self._review_repo.get_by_card(card.id, card.userId)
        except ReviewNotFoundError:
            logger.info("Backfilling missing review state for card %s", card.id)
            return self._review_repo.create_for_card(card.id, card.deckId, card.userId)

    def submit_review(
        self,
        user_id: str,
        card_id: str,
        rating: Rating,
        response_time_ms: int | None = None,
    ) -> CardReview:
        """Rate a card and return its new review state.

        Raises:
            CardNotFoundError: If the card does not exist for this user.
            ReviewConflictError: If the review state changed while processing.
        """
        card = self._card_repo.get_by_id(card_id, user_id)
        review = self.get_review(card)

        new_state = self._processor.process_review(
            review.to_state(),
            rating,
            response_time_ms,
            user_id=user_id,
            deck_id=card.deckId,
            etag=review.etag,
        )
        return CardReview.from_state(new_state, deck_id=card.deckId, user_id=user_id)

    def preview(self, user_id: str, card_id: str) -> tuple[CardReview, dict[Rating, str]]:
        """Return the card's review state and the interval text for each rating."""
        card = self._card_repo.get_by_id(card_id, user_id)
        review = self.get_review(card)
        return review, preview_all(review.to_state(), rng=self._rng, fuzz=self._fuzz)

    def next_due(self, user_id: str, deck_id: str, now_iso: str) -> tuple[Card, CardReview] | None:
        """Return the most overdue card of a deck with its review state."""
        for review in self._review_repo.list_due_for_deck(user_id, deck_id, now_iso):
            cards = self._card_repo.list_by_ids([review.cardId], user_id)
            if cards:
                return cards[0], review
            # Review state left behind by a deleted card
            self._review_repo.delete(review.cardId, user_id)
        return None

    def due_cards(self, user_id: str, deck_id: str, now_iso: str) -> list[Card]:
        reviews = self._review_repo.list_due_for_deck(user_id, deck_id, now_iso)
        return self._card_repo.list_by_ids([review.cardId for review in reviews], user_id)


def get_deck_count_updater() -> DeckCountUpdater:
    return DeckCountUpdater(get_deck_repository(), get_card_repository(), get_review_repository())


def get_review_processor() -> ReviewProcessor:
    """Build the processor with the standard observers."""
    settings = get_app_settings()
    return ReviewProcessor(
        get_review_repository(),
        observers=[
            ReviewLogRecorder(get_review_log_repository()),
            ProgressTracker(get_progress_repository(), settings.daily_stats_retention_days),
            get_deck_count_updater(),
        ],
        fuzz=settings.fuzz_enabled,
        default_response_time_ms=settings.default_response_time_ms,
    )


def get_review_service() -> ReviewService:
    settings = get_app_settings()
    return ReviewService(
        get_card_repository(),
        get_review_repository(),
        get_review_processor(),
        fuzz=settings.fuzz_enabled,
    )
