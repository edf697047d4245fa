import logging
import logging.handlers
import os
from datetime import datetime, timedelta, timezone

import pytest

# Set test environment variables
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"


class FakeClock:
    """Settable UTC clock shared by services and repositories in a test."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(autouse=True)
def _strip_file_handlers():
    """Remove file handlers from root logger so tests never write to logs/app.log."""
    root = logging.getLogger()
    saved = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    for h in saved:
        root.removeHandler(h)
    yield
    # Restore any that were removed (and strip any new ones tests may have added)
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler):
            root.removeHandler(h)
    for h in saved:
        root.addHandler(h)


@pytest.fixture
def clock():
    """Clock fixed at 2025-03-10 12:00 UTC."""
    return FakeClock(datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def card_store():
    from src.infrastructure.repositories import InMemoryCardStore

    return InMemoryCardStore()


@pytest.fixture
def set_store():
    from src.infrastructure.repositories import InMemorySetStore

    return InMemorySetStore()


@pytest.fixture
def session_repository(clock):
    from src.infrastructure.repositories import InMemorySessionRepository

    return InMemorySessionRepository(clock=clock)


@pytest.fixture
def progress_repository():
    from src.infrastructure.repositories import InMemoryDailyProgressRepository

    return InMemoryDailyProgressRepository()


@pytest.fixture
def tracker(progress_repository, clock):
    from src.services.daily_limit_service import DailyLimitTracker

    return DailyLimitTracker(progress_repository, clock=clock)
