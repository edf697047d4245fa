"""
Study session manager.

Owns the lifecycle of a study session: selecting a capped batch of cards at
start, applying SM-2 per submitted review, and summarizing. Sessions live in
a SessionRepository with a retention window measured from started_at.

Reviews are serialized per user, which keeps each session's review order
intact and prevents lost updates when the same card is rated twice in
flight. Daily caps gate session start only; counters move per review, so an
abandoned session consumes no quota.
"""

import logging
import uuid
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from src.domain.errors import DailyLimitReached, NotFound, Unauthorized
from src.domain.repositories import CardStore, SessionRepository, SetStore
from src.models.daily_progress import ProgressKind
from src.models.scheduling import CardFilter, CardOrder, CardStatus
from src.models.srs_schemas import (
    MAX_NEW_CARDS_PER_SESSION,
    MAX_REVIEW_CARDS_PER_SESSION,
    ReviewResult,
    SessionCard,
    SessionSummary,
    StartSessionRequest,
    StartSessionResponse,
    SubmitReviewRequest,
    parse_request,
)
from src.models.study_session import StudySession
from src.utils.keyed_lock import KeyedLock
from src.utils.logging import log_review_recorded

from .daily_limit_service import DailyLimitTracker
from .srs.srs_algorithm import calculate_next_review
from .srs.store_calls import read_store, write_store

logger = logging.getLogger(__name__)

DEFAULT_RETENTION = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StudySessionService:
    """Creates, updates, summarizes and expires study sessions."""

    def __init__(
        self,
        card_store: CardStore,
        set_store: SetStore,
        sessions: SessionRepository,
        tracker: DailyLimitTracker,
        retention: timedelta = DEFAULT_RETENTION,
        store_timeout: float = 5.0,
        read_attempts: int = 1,
        retry_base_delay: float = 0.2,
        clock: Callable[[], datetime] = _utcnow,
        locks: Optional[KeyedLock] = None,
    ):
        self._cards = card_store
        self._sets = set_store
        self._sessions = sessions
        self._tracker = tracker
        self._retention = retention
        self._timeout = store_timeout
        self._attempts = read_attempts
        self._retry_base_delay = retry_base_delay
        self._clock = clock
        self._locks = locks or KeyedLock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start_session(
        self,
        user_id: str,
        set_id: str,
        new_cards_limit: int = MAX_NEW_CARDS_PER_SESSION,
        review_cards_limit: int = MAX_REVIEW_CARDS_PER_SESSION,
    ) -> StartSessionResponse:
        """
        Start a session over one set.

        Raises:
            ValidationError: limits not within 1..20 (new) / 1..100 (review)
            NotFound: set missing or owned by someone else
            DailyLimitReached: both daily allowances are used up
            StoreUnavailable: a store call failed or timed out
        """
        request = parse_request(
            StartSessionRequest,
            user_id=user_id,
            set_id=set_id,
            new_cards_limit=new_cards_limit,
            review_cards_limit=review_cards_limit,
        )

        owns_set = await self._read(
            "verify_ownership",
            lambda: self._sets.verify_ownership(request.set_id, request.user_id),
        )
        if not owns_set:
            raise NotFound("Set", request.set_id)

        progress = await self._tracker.get_progress(request.user_id)
        allowance = self._tracker.allowance(progress)
        if allowance.exhausted:
            raise DailyLimitReached(
                new_cards_today=progress.new_cards_today,
                new_cards_limit=self._tracker.new_cards_cap,
                reviews_today=progress.reviews_today,
                reviews_limit=self._tracker.reviews_cap,
            )

        now = self._clock()
        new_limit = min(request.new_cards_limit, allowance.new_cards_remaining)
        review_limit = min(request.review_cards_limit, allowance.reviews_remaining)

        new_cards = await self._read(
            "list_cards",
            lambda: self._cards.list_cards(
                CardFilter(
                    user_id=request.user_id,
                    set_id=request.set_id,
                    status=CardStatus.NEW,
                ),
                CardOrder.CREATED_AT,
                new_limit,
            ),
        )
        review_cards = await self._read(
            "list_cards",
            lambda: self._cards.list_cards(
                CardFilter(
                    user_id=request.user_id, set_id=request.set_id, due_before=now
                ),
                CardOrder.DUE_AT,
                review_limit,
            ),
        )

        # New cards first; a card id is listed once even if both queries return it
        selected = {}
        for card in [*new_cards, *review_cards]:
            selected.setdefault(card.id, card)
        cards = list(selected.values())

        session = StudySession(
            session_id=str(uuid.uuid4()),
            user_id=request.user_id,
            set_id=request.set_id,
            card_ids=[card.id for card in cards],
            started_at=now,
            new_cards=len(new_cards),
            review_cards=len(cards) - len(new_cards),
        )
        await self._sessions.put(session, self._expires_at(session))

        logger.info(
            f"Started session {session.session_id} for user {request.user_id}: "
            f"{session.new_cards} new, {session.review_cards} review"
        )

        return StartSessionResponse(
            session_id=session.session_id,
            cards=[
                SessionCard(id=c.id, front=c.front, back=c.back, status=c.status)
                for c in cards
            ],
            total_cards=len(cards),
            new_cards=session.new_cards,
            review_cards=session.review_cards,
        )

    async def submit_review(
        self, session_id: str, card_id: str, rating: int, user_id: str
    ) -> ReviewResult:
        """
        Apply one rating to a card within a session.

        The card write happens before anything else is recorded: if the store
        fails, neither the session nor the daily counters change. A slow write
        is awaited, never abandoned, so a landed write is always recorded.

        Raises:
            ValidationError: rating outside 1..5
            NotFound: unknown session, or card missing / not the user's
            Unauthorized: session belongs to another user
            StoreUnavailable: a store call failed or timed out
        """
        request = parse_request(
            SubmitReviewRequest,
            session_id=session_id,
            card_id=card_id,
            rating=rating,
            user_id=user_id,
        )

        async with self._locks.hold(request.user_id):
            session = await self._owned_session(request.session_id, request.user_id)

            card = await self._read(
                "get_card",
                lambda: self._cards.get_card(request.card_id, request.user_id),
            )
            if card is None:
                raise NotFound("Card", request.card_id)

            now = self._clock()
            next_state = calculate_next_review(card.scheduling, request.rating, now)

            updated = await write_store(
                "update_card_scheduling",
                self._cards.update_card_scheduling(
                    request.card_id, request.user_id, next_state
                ),
                self._timeout,
            )
            if updated is None:
                raise NotFound("Card", request.card_id)

            session.record_review(request.card_id, request.rating, now)
            await self._sessions.put(session, self._expires_at(session))

            kind = (
                ProgressKind.NEW_CARD
                if card.status == CardStatus.NEW
                else ProgressKind.REVIEW
            )
            await self._tracker.increment(request.user_id, kind)

        log_review_recorded(
            session_id=request.session_id,
            card_id=request.card_id,
            rating=request.rating,
            details={
                "user_id": request.user_id,
                "previous_status": card.status.value,
                "status": updated.status.value,
                "interval_days": updated.interval_days,
                "ease_factor": updated.ease_factor,
                "repetitions": updated.repetitions,
            },
        )

        return ReviewResult(
            card_id=updated.id,
            next_review_at=updated.due_at,
            interval_days=updated.interval_days,
            ease_factor=updated.ease_factor,
            repetitions=updated.repetitions,
            status=updated.status,
        )

    async def get_summary(self, session_id: str, user_id: str) -> SessionSummary:
        """Summarize a session.

        An active session is measured up to now and reports now as
        ``completed_at``; the session itself stays active.
        """
        session = await self._owned_session(session_id, user_id)

        ratings = [review.rating for review in session.reviews]
        average = round(sum(ratings) / len(ratings), 2) if ratings else 0.0
        distribution = dict(sorted(Counter(ratings).items()))

        end = session.completed_at or self._clock()
        elapsed = int((end - session.started_at).total_seconds())

        return SessionSummary(
            session_id=session.session_id,
            started_at=session.started_at,
            completed_at=end,
            total_cards=len(session.card_ids),
            cards_reviewed=len(ratings),
            average_rating=average,
            ratings_distribution=distribution,
            time_spent_seconds=max(0, elapsed),
        )

    async def complete_session(self, session_id: str, user_id: str) -> datetime:
        """Mark a session completed. Repeated calls keep the first timestamp."""
        async with self._locks.hold(user_id):
            session = await self._owned_session(session_id, user_id)
            if session.is_completed:
                return session.completed_at
            completed_at = session.complete(self._clock())
            await self._sessions.put(session, self._expires_at(session))

        logger.info(
            f"Completed session {session_id}: {len(session.reviews)} review(s)"
        )
        return completed_at

    async def cleanup_expired(self, now: Optional[datetime] = None) -> int:
        """Drop sessions older than the retention window."""
        return await self._sessions.delete_expired(now or self._clock())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _owned_session(self, session_id: str, user_id: str) -> StudySession:
        session = await self._sessions.get(session_id)
        if session is None:
            raise NotFound("Session", session_id)
        if session.user_id != user_id:
            logger.warning(
                f"User {user_id} attempted to access session {session_id} "
                f"owned by another user"
            )
            raise Unauthorized(session_id)
        return session

    def _expires_at(self, session: StudySession) -> datetime:
        return session.started_at + self._retention

    async def _read(self, operation: str, call):
        return await read_store(
            operation,
            call,
            timeout=self._timeout,
            attempts=self._attempts,
            base_delay=self._retry_base_delay,
        )
