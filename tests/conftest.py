"""Pytest configuration and fixtures."""

import os
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone

import pytest

from industry_interview.config import Settings

# Set test environment variables before importing app modules
os.environ.setdefault("ENVIRONMENT", "development")
# Increase rate limit for testing
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "1000")
# Point the catalog at a file that does not exist so built-in defaults are used
os.environ.setdefault("INDUSTRIES_JSON_PATH", "tests/__no_industries__.json")


@pytest.fixture(autouse=True)
def reset_caches() -> Iterator[None]:
    """Reset cached settings, catalog and stores before each test."""
    from industry_interview.catalog import get_canonical_industries
    from industry_interview.config import get_settings
    from industry_interview.document_store import reset_document_store

    get_settings.cache_clear()
    get_canonical_industries.cache_clear()
    reset_document_store()

    # Reset rate limiter storage
    try:
        from industry_interview.main import limiter

        if hasattr(limiter, "_storage") and limiter._storage:
            limiter._storage.reset()
    except (ImportError, AttributeError):
        pass

    yield
    get_settings.cache_clear()
    get_canonical_industries.cache_clear()
    reset_document_store()


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Callable[..., Settings]:
    """Fixture to set test settings."""

    def _mock_settings(**kwargs: str) -> Settings:
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        from industry_interview.config import get_settings

        get_settings.cache_clear()
        return get_settings()

    return _mock_settings


class FakeClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(seconds=1)
        return current


@pytest.fixture
def clock() -> FakeClock:
    """Fresh deterministic clock."""
    return FakeClock()


@pytest.fixture
def engine(clock):
    """Engine with default rules, default thresholds and a fixed clock."""
    from industry_interview.engine import IndustryInterviewEngine

    return IndustryInterviewEngine(settings=Settings(), clock=clock)
