"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timezone

import pytest

# Tests never talk to a real database
os.environ.setdefault("COSMOS_EMULATOR", "false")
os.environ.pop("COSMOS_ENDPOINT", None)


class SequenceRng:
    """Random source that returns preset values in order.

    Raises IndexError if asked for more values than were given, which makes
    unexpected draws visible in tests.
    """

    def __init__(self, *values: float):
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)


@pytest.fixture
def now():
    """A fixed review time."""
    return datetime(2025, 12, 13, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def fuzz_disabled_env(monkeypatch):
    """Fixture that disables interval fuzz for the app settings."""
    from studyflow.config import get_app_settings

    monkeypatch.setenv("SRS_FUZZ_ENABLED", "false")
    get_app_settings.cache_clear()
    yield
    get_app_settings.cache_clear()
