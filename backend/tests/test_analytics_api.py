"""Tests for /analytics endpoints (stubbed repos)."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from studyflow.main import app
from studyflow.models import Card, CardReview, DailyStats, Deck, ReviewLog
from studyflow.routers import analytics as analytics_router

USER = {"X-User-Id": "test-user"}
NOW = datetime(2025, 12, 13, 9, 30, tzinfo=timezone.utc)


@dataclass
class StubListRepo:
    items: list = field(default_factory=list)
    ranges: list = field(default_factory=list)

    def list_by_user(self, user_id):
        return [item for item in self.items if item.userId == user_id]

    def list_in_range(self, user_id, start_iso, end_iso):
        self.ranges.append((start_iso, end_iso))
        return [
            item for item in self.list_by_user(user_id) if start_iso <= item.timestamp <= end_iso
        ]


def log(card_id, correct, timestamp, deck_id="deck-1"):
    return ReviewLog(
        userId="test-user",
        cardId=card_id,
        deckId=deck_id,
        rating="good" if correct else "again",
        responseTime=3000,
        timestamp=timestamp,
        wasCorrect=correct,
    )


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def repos(monkeypatch):
    decks = StubListRepo([Deck(id="deck-1", userId="test-user", title="Anatomy")])
    cards = StubListRepo(
        [
            Card(id=card_id, deckId="deck-1", userId="test-user", question=f"Bone {card_id}?", answer="A")
            for card_id in ("c1", "c2")
        ]
    )
    reviews = StubListRepo(
        [
            CardReview(id="c1", cardId="c1", deckId="deck-1", userId="test-user", interval=30),
            CardReview(id="c2", cardId="c2", deckId="deck-1", userId="test-user", interval=3),
        ]
    )
    logs = StubListRepo(
        [
            log("c1", True, "2025-12-13T08:00:00Z"),
            log("c2", False, "2025-12-12T08:00:00Z"),
            log("c2", False, "2025-12-12T08:05:00Z"),
            log("c2", True, "2025-12-12T08:10:00Z"),
        ]
    )

    monkeypatch.setattr(analytics_router, "get_deck_repository", lambda: decks)
    monkeypatch.setattr(analytics_router, "get_card_repository", lambda: cards)
    monkeypatch.setattr(analytics_router, "get_review_repository", lambda: reviews)
    monkeypatch.setattr(analytics_router, "get_review_log_repository", lambda: logs)
    monkeypatch.setattr(analytics_router, "utc_now", lambda: NOW)
    return logs


def test_deck_analytics(client, repos):
    resp = client.get("/analytics/decks", headers=USER)

    assert resp.status_code == 200
    data = resp.json()
    assert data["totalMastered"] == 1
    assert data["totalLearning"] == 1
    assert data["overallRetention"] == 50
    [deck] = data["decks"]
    assert deck["deckTitle"] == "Anatomy"
    assert deck["weakCards"] == ["c2"]


def test_efficiency(client, repos):
    resp = client.get("/analytics/efficiency", headers=USER)

    assert resp.status_code == 200
    efficiency = resp.json()["efficiency"]
    assert efficiency["correctRate"] == 50
    assert efficiency["averageResponseTime"] == 3000
    assert repos.ranges == [("2025-11-13T09:30:00Z", "2025-12-13T09:30:00Z")]


def test_efficiency_without_reviews(client, repos):
    repos.items.clear()
    resp = client.get("/analytics/efficiency", headers=USER)
    assert resp.json() == {"efficiency": None}


def test_retention_default_two_weeks(client, repos):
    resp = client.get("/analytics/retention", headers=USER)

    points = resp.json()["points"]
    assert len(points) == 14
    assert points[-1] == {"date": "2025-12-13", "retention": 100, "reviews": 1}
    assert points[-2] == {"date": "2025-12-12", "retention": 33, "reviews": 3}
    assert points[0]["reviews"] == 0


def test_retention_custom_days(client, repos):
    resp = client.get("/analytics/retention?days=3", headers=USER)
    assert [p["date"] for p in resp.json()["points"]] == ["2025-12-11", "2025-12-12", "2025-12-13"]


def test_retention_rejects_bad_days(client, repos):
    resp = client.get("/analytics/retention?days=0", headers=USER)
    assert resp.status_code == 422


def test_weak_topics(client, repos):
    resp = client.get("/analytics/weak-topics", headers=USER)

    assert resp.status_code == 200
    data = resp.json()
    assert data["count"] == 1
    assert data["topics"][0]["cardId"] == "c2"
    assert data["topics"][0]["failureRate"] == 67
    assert data["topics"][0]["question"] == "Bone c2?"


@dataclass
class StubDailyStatsRepo:
    days: list = field(default_factory=list)
    since: list = field(default_factory=list)

    def list_daily_stats(self, user_id, since_date=None):
        self.since.append(since_date)
        return [day for day in self.days if day.userId == user_id and day.date >= since_date]


def test_heatmap(client, monkeypatch):
    today = DailyStats.empty("test-user", "2025-12-13")
    today.cardsReviewed = 12
    yesterday = DailyStats.empty("test-user", "2025-12-12")
    yesterday.cardsReviewed = 20
    yesterday.sessionsCompleted = 2
    stats = StubDailyStatsRepo([yesterday, today])
    monkeypatch.setattr(analytics_router, "get_progress_repository", lambda: stats)
    monkeypatch.setattr(analytics_router, "utc_now", lambda: NOW)

    resp = client.get("/analytics/heatmap?days=3", headers=USER)

    assert resp.status_code == 200
    assert resp.json()["days"] == [
        {"date": "2025-12-11", "count": 0, "level": 0},
        {"date": "2025-12-12", "count": 30, "level": 3},
        {"date": "2025-12-13", "count": 12, "level": 2},
    ]
    assert stats.since == ["2025-12-11"]


def test_heatmap_defaults_to_ninety_days(client, monkeypatch):
    stats = StubDailyStatsRepo()
    monkeypatch.setattr(analytics_router, "get_progress_repository", lambda: stats)
    monkeypatch.setattr(analytics_router, "utc_now", lambda: NOW)

    resp = client.get("/analytics/heatmap", headers=USER)

    assert len(resp.json()["days"]) == 90
    assert stats.since == ["2025-09-15"]


def test_heatmap_rejects_bad_days(client):
    resp = client.get("/analytics/heatmap?days=400", headers=USER)
    assert resp.status_code == 422
