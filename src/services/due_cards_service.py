"""
Due-card query: what can this user study right now.

Read-only. Availability counts come from two count queries; the card list is
one OR-filtered query (new, or studied and due) sorted by due_at with nulls
last, then created_at, so already-due reviews come ahead of new cards.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from src.domain.repositories import CardStore
from src.models.scheduling import CardFilter, CardOrder, CardStatus
from src.models.srs_schemas import DueCard, DueCardsResponse

from .daily_limit_service import DailyLimitTracker
from .srs.store_calls import read_store

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DueCardsService:
    def __init__(
        self,
        card_store: CardStore,
        tracker: DailyLimitTracker,
        store_timeout: float = 5.0,
        read_attempts: int = 1,
        retry_base_delay: float = 0.2,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._cards = card_store
        self._tracker = tracker
        self._timeout = store_timeout
        self._attempts = read_attempts
        self._retry_base_delay = retry_base_delay
        self._clock = clock

    async def get_due_cards(
        self, user_id: str, set_id: Optional[str] = None
    ) -> DueCardsResponse:
        now = self._clock()

        new_filter = CardFilter(user_id=user_id, set_id=set_id, status=CardStatus.NEW)
        review_filter = CardFilter(user_id=user_id, set_id=set_id, due_before=now)
        eligible_filter = CardFilter(
            user_id=user_id, set_id=set_id, due_before=now, include_new=True
        )

        new_count = await self._read(
            "count_cards", lambda: self._cards.count_cards(new_filter)
        )
        review_count = await self._read(
            "count_cards", lambda: self._cards.count_cards(review_filter)
        )

        limits = await self._tracker.limits(user_id)
        cards_limit = max(limits.new_cards_remaining, limits.reviews_remaining)

        cards = await self._read(
            "list_cards",
            lambda: self._cards.list_cards(
                eligible_filter, CardOrder.DUE_AT_THEN_CREATED_AT, cards_limit
            ),
        )

        return DueCardsResponse(
            new_cards_available=new_count,
            review_cards_available=review_count,
            daily_limits=limits,
            cards=[
                DueCard(
                    id=card.id,
                    set_id=card.set_id,
                    front=card.front,
                    back=card.back,
                    status=card.status,
                    due_at=card.due_at,
                )
                for card in cards
            ],
        )

    async def _read(self, operation: str, call):
        return await read_store(
            operation,
            call,
            timeout=self._timeout,
            attempts=self._attempts,
            base_delay=self._retry_base_delay,
        )
