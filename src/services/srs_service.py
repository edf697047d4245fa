"""
SRS Service
Spaced repetition scheduler facade for the API layer.

Card and Set Stores are usually request-scoped (one database session per
request), while sessions, daily progress and review locks must be shared by
every request in the process. ``build_srs_service`` wires the former onto the
process-wide instances of the latter.
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Callable, Optional

from src.core.config import Settings, get_settings
from src.domain.repositories import (
    CardStore,
    DailyProgressRepository,
    SessionRepository,
    SetStore,
)
from src.infrastructure.repositories import (
    InMemoryDailyProgressRepository,
    InMemorySessionRepository,
)
from src.models.srs_schemas import (
    MAX_NEW_CARDS_PER_SESSION,
    MAX_REVIEW_CARDS_PER_SESSION,
    DueCardsResponse,
    ReviewResult,
    SessionSummary,
    StartSessionResponse,
)
from src.utils.keyed_lock import KeyedLock

from .daily_limit_service import DailyLimitTracker
from .due_cards_service import DueCardsService
from .session_cleanup_service import cleanup_expired_sessions
from .study_session_service import StudySessionService


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SRSService:
    """Entry point for due-card queries and study sessions.

    Without explicit repositories the service gets private in-memory ones,
    and the session repository expires entries on the service clock. A
    supplied session repository must run on the same clock as the service,
    or lookups and ``run_maintenance`` disagree about expiry.
    """

    def __init__(
        self,
        card_store: CardStore,
        set_store: SetStore,
        sessions: Optional[SessionRepository] = None,
        progress: Optional[DailyProgressRepository] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = _utcnow,
        locks: Optional[KeyedLock] = None,
    ):
        settings = settings or get_settings()
        if sessions is None:
            sessions = InMemorySessionRepository(clock=clock)
        if progress is None:
            progress = InMemoryDailyProgressRepository()
        self.settings = settings
        self._session_repository = sessions
        self._clock = clock

        self.tracker = DailyLimitTracker(
            progress,
            new_cards_cap=settings.new_cards_daily_cap,
            reviews_cap=settings.reviews_daily_cap,
            clock=clock,
        )
        self.due_cards = DueCardsService(
            card_store,
            self.tracker,
            store_timeout=settings.store_timeout_seconds,
            read_attempts=settings.store_read_attempts,
            retry_base_delay=settings.store_retry_base_delay,
            clock=clock,
        )
        self.sessions = StudySessionService(
            card_store,
            set_store,
            sessions,
            self.tracker,
            retention=timedelta(hours=settings.session_retention_hours),
            store_timeout=settings.store_timeout_seconds,
            read_attempts=settings.store_read_attempts,
            retry_base_delay=settings.store_retry_base_delay,
            clock=clock,
            locks=locks,
        )

    async def get_due_cards(
        self, user_id: str, set_id: Optional[str] = None
    ) -> DueCardsResponse:
        return await self.due_cards.get_due_cards(user_id, set_id)

    async def start_session(
        self,
        user_id: str,
        set_id: str,
        new_cards_limit: int = MAX_NEW_CARDS_PER_SESSION,
        review_cards_limit: int = MAX_REVIEW_CARDS_PER_SESSION,
    ) -> StartSessionResponse:
        return await self.sessions.start_session(
            user_id, set_id, new_cards_limit, review_cards_limit
        )

    async def submit_review(
        self, session_id: str, card_id: str, rating: int, user_id: str
    ) -> ReviewResult:
        return await self.sessions.submit_review(session_id, card_id, rating, user_id)

    async def get_session_summary(self, session_id: str, user_id: str) -> SessionSummary:
        return await self.sessions.get_summary(session_id, user_id)

    async def complete_session(self, session_id: str, user_id: str) -> SessionSummary:
        """Complete the session and return its final summary."""
        await self.sessions.complete_session(session_id, user_id)
        return await self.sessions.get_summary(session_id, user_id)

    async def run_maintenance(self) -> int:
        """One cleanup pass. Returns the number of sessions removed."""
        return await cleanup_expired_sessions(
            self._session_repository, self.tracker, self._clock
        )


# ---------------------------------------------------------------------------
# Process-wide state
# ---------------------------------------------------------------------------


@lru_cache()
def get_session_repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@lru_cache()
def get_progress_repository() -> InMemoryDailyProgressRepository:
    return InMemoryDailyProgressRepository()


@lru_cache()
def get_review_locks() -> KeyedLock:
    return KeyedLock()


def build_srs_service(
    card_store: CardStore,
    set_store: SetStore,
    settings: Optional[Settings] = None,
) -> SRSService:
    """Create an SRSService over request-scoped stores and shared state."""
    return SRSService(
        card_store,
        set_store,
        sessions=get_session_repository(),
        progress=get_progress_repository(),
        settings=settings,
        locks=get_review_locks(),
    )
