"""Tests for the Cosmos DB repositories against mocked containers."""

import pytest
from unittest.mock import MagicMock

from azure.core import MatchConditions
from azure.cosmos.exceptions import (
    CosmosAccessConditionFailedError,
    CosmosResourceExistsError,
    CosmosResourceNotFoundError,
)

from studyflow.models import CardCreate, DailyStats, ReviewLog
from studyflow.repositories import (
    CardRepository,
    DeckNotFoundError,
    DeckRepository,
    ProgressRepository,
    ReviewConflictError,
    ReviewLogRepository,
    ReviewNotFoundError,
    ReviewRepository,
)
from studyflow.repositories import card_repository
from studyflow.srs.sm2 import ReviewState


def echo_container():
    """A container mock whose writes return the written body."""
    container = MagicMock()
    container.create_item.side_effect = lambda body: dict(body)
    container.upsert_item.side_effect = lambda body: dict(body)
    container.replace_item.side_effect = lambda item, body, **kwargs: dict(body)
    return container


def not_found():
    return CosmosResourceNotFoundError(status_code=404, message="Not found")


def review_doc(card_id="c1", **overrides):
    doc = {
        "id": card_id,
        "cardId": card_id,
        "deckId": "d1",
        "userId": "u1",
        "interval": 0,
        "easeFactor": 2.5,
        "repetitions": 0,
        "nextReview": "2025-12-13T00:00:00Z",
        "lastReviewed": None,
        "updatedAt": "2025-12-13T00:00:00Z",
        "_etag": '"etag-1"',
        "_rid": "abc",
        "_ts": 1765584000,
    }
    doc.update(overrides)
    return doc


class TestReviewRepository:
    """Tests for ReviewRepository."""

    def test_get_by_card_reads_etag(self):
        container = echo_container()
        container.read_item.return_value = review_doc()

        review = ReviewRepository(container).get_by_card("c1", "u1")

        container.read_item.assert_called_once_with(item="c1", partition_key="u1")
        assert review.etag == '"etag-1"'

    def test_get_by_card_missing(self):
        container = echo_container()
        container.read_item.side_effect = not_found()

        with pytest.raises(ReviewNotFoundError):
            ReviewRepository(container).get_by_card("c1", "u1")

    def test_create_for_card_uses_card_id_as_document_id(self):
        container = echo_container()

        review = ReviewRepository(container).create_for_card("c1", "d1", "u1")

        body = container.create_item.call_args.kwargs["body"]
        assert body["id"] == "c1"
        assert body["cardId"] == "c1"
        assert body["interval"] == 0
        assert review.deckId == "d1"

    def test_create_for_card_keeps_existing_state(self):
        container = echo_container()
        container.create_item.side_effect = CosmosResourceExistsError(status_code=409, message="Conflict")
        container.read_item.return_value = review_doc(interval=6, repetitions=2)

        review = ReviewRepository(container).create_for_card("c1", "d1", "u1")

        assert review.interval == 6

    def test_save_state_without_etag_upserts(self, now):
        container = echo_container()
        state = ReviewState(card_id="c1", interval_days=6, repetitions=2, next_review=now, last_reviewed=now)

        review = ReviewRepository(container).save_state(state, user_id="u1", deck_id="d1")

        container.upsert_item.assert_called_once()
        container.replace_item.assert_not_called()
        assert review.interval == 6
        assert review.nextReview == "2025-12-13T09:30:00Z"

    def test_save_state_with_etag_replaces_if_not_modified(self, now):
        container = echo_container()
        state = ReviewState(card_id="c1", interval_days=1, repetitions=1, next_review=now, last_reviewed=now)

        ReviewRepository(container).save_state(state, user_id="u1", deck_id="d1", etag='"etag-1"')

        kwargs = container.replace_item.call_args.kwargs
        assert kwargs["item"] == "c1"
        assert kwargs["etag"] == '"etag-1"'
        assert kwargs["match_condition"] == MatchConditions.IfNotModified
        assert "_etag" not in kwargs["body"]

    def test_save_state_etag_mismatch_raises_conflict(self, now):
        container = echo_container()
        container.replace_item.side_effect = CosmosAccessConditionFailedError(
            status_code=412, message="Precondition failed"
        )
        state = ReviewState(card_id="c1", next_review=now)

        with pytest.raises(ReviewConflictError):
            ReviewRepository(container).save_state(state, user_id="u1", deck_id="d1", etag='"stale"')

    def test_list_due_for_deck_query(self):
        container = echo_container()
        container.query_items.return_value = [review_doc("c2"), review_doc("c1")]

        reviews = ReviewRepository(container).list_due_for_deck("u1", "d1", "2025-12-13T00:00:00Z")

        assert [r.cardId for r in reviews] == ["c2", "c1"]
        kwargs = container.query_items.call_args.kwargs
        assert "ORDER BY c.nextReview ASC" in kwargs["query"]
        assert {"name": "@nowIso", "value": "2025-12-13T00:00:00Z"} in kwargs["parameters"]
        assert kwargs["partition_key"] == "u1"

    def test_count_and_next_due_at(self):
        container = echo_container()
        repo = ReviewRepository(container)

        container.query_items.return_value = [3]
        assert repo.count_due_for_deck("u1", "d1", "2025-12-13T00:00:00Z") == 3

        container.query_items.return_value = []
        assert repo.get_next_due_at_for_deck("u1", "d1") is None

        container.query_items.return_value = ["2025-12-20T00:00:00Z"]
        assert repo.get_next_due_at_for_deck("u1", "d1") == "2025-12-20T00:00:00Z"

    def test_delete_missing_is_ignored(self):
        container = echo_container()
        container.delete_item.side_effect = not_found()

        ReviewRepository(container).delete_many(["c1", "c2"], "u1")

        assert container.delete_item.call_count == 2


class TestCardRepository:
    """Tests for CardRepository."""

    def card_doc(self, card_id):
        return {"id": card_id, "deckId": "d1", "userId": "u1", "question": "Q", "answer": "A"}

    def test_list_by_ids_preserves_order(self):
        container = echo_container()
        container.query_items.return_value = [self.card_doc("c1"), self.card_doc("c3")]

        cards = CardRepository(container).list_by_ids(["c3", "c2", "c1"], "u1")

        assert [c.id for c in cards] == ["c3", "c1"]

    def test_list_by_ids_empty_skips_query(self):
        container = echo_container()
        assert CardRepository(container).list_by_ids([], "u1") == []
        container.query_items.assert_not_called()

    def test_create_requires_deck(self, monkeypatch):
        deck_repo = MagicMock()
        deck_repo.exists.return_value = False
        monkeypatch.setattr(card_repository, "get_deck_repository", lambda: deck_repo)
        container = echo_container()

        with pytest.raises(DeckNotFoundError):
            CardRepository(container).create("d1", "u1", CardCreate(question="Q", answer="A"))
        container.create_item.assert_not_called()

    def test_create(self, monkeypatch):
        deck_repo = MagicMock()
        deck_repo.exists.return_value = True
        monkeypatch.setattr(card_repository, "get_deck_repository", lambda: deck_repo)

        card = CardRepository(echo_container()).create("d1", "u1", CardCreate(question="Q", answer="A"))

        assert card.deckId == "d1"
        assert card.cardType == "standard"

    def test_delete_by_deck_returns_ids(self):
        container = echo_container()
        container.query_items.return_value = [self.card_doc("c1"), self.card_doc("c2")]

        assert CardRepository(container).delete_by_deck("d1", "u1") == ["c1", "c2"]
        assert container.delete_item.call_count == 2


class TestDeckRepository:
    """Tests for DeckRepository."""

    def test_update_counts(self):
        container = echo_container()
        container.read_item.return_value = {"id": "d1", "userId": "u1", "title": "Chemistry"}

        deck = DeckRepository(container).update_counts("d1", "u1", 12, 4)

        assert deck.cardCount == 12
        assert deck.dueCount == 4

    def test_missing_deck(self):
        container = echo_container()
        container.read_item.side_effect = not_found()
        repo = DeckRepository(container)

        assert repo.exists("d1", "u1") is False
        with pytest.raises(DeckNotFoundError):
            repo.update_counts("d1", "u1", 0, 0)


class TestProgressRepository:
    """Tests for ProgressRepository."""

    def test_missing_documents_read_as_defaults(self):
        progress_container = echo_container()
        progress_container.read_item.side_effect = not_found()
        stats_container = echo_container()
        stats_container.read_item.side_effect = not_found()
        repo = ProgressRepository(progress_container, stats_container)

        assert repo.get_progress("u1").totalCardsReviewed == 0
        stats = repo.get_daily_stats("u1", "2025-12-13")
        assert stats.id == "u1:2025-12-13"
        stats_container.read_item.assert_called_once_with(item="u1:2025-12-13", partition_key="u1")

    def test_save_daily_stats_upserts(self):
        stats_container = echo_container()
        repo = ProgressRepository(echo_container(), stats_container)

        repo.save_daily_stats(DailyStats.empty("u1", "2025-12-13"))

        stats_container.upsert_item.assert_called_once()

    def test_prune_daily_stats(self):
        stats_container = echo_container()
        stats_container.query_items.return_value = [{"id": "u1:2025-10-01"}, {"id": "u1:2025-10-02"}]
        repo = ProgressRepository(echo_container(), stats_container)

        assert repo.prune_daily_stats("u1", "2025-11-13") == 2
        stats_container.delete_item.assert_any_call(item="u1:2025-10-01", partition_key="u1")


def test_review_log_list_in_range():
    container = echo_container()
    container.query_items.return_value = [
        ReviewLog(
            userId="u1", cardId="c1", deckId="d1", rating="good", responseTime=900, wasCorrect=True
        ).model_dump()
    ]

    logs = ReviewLogRepository(container).list_in_range("u1", "2025-12-01T00:00:00Z", "2025-12-13T00:00:00Z")

    assert logs[0].rating == "good"
    kwargs = container.query_items.call_args.kwargs
    assert "c.timestamp >= @start AND c.timestamp <= @end" in kwargs["query"]
    assert kwargs["parameters"][0] == {"name": "@userId", "value": "u1"}
