"""
In-process CardStore and SetStore.

Mirror the filter and ordering semantics of the SQLAlchemy stores so the
scheduler can run without a database (tests, demos, single-user tools).
"""

import threading
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from src.models.scheduling import (
    CardFilter,
    CardOrder,
    CardSnapshot,
    CardStatus,
    SchedulingState,
)

_FAR_FUTURE = datetime.max.replace(tzinfo=timezone.utc)


def _matches(card: CardSnapshot, card_filter: CardFilter) -> bool:
    if card.user_id != card_filter.user_id:
        return False
    if card_filter.set_id is not None and card.set_id != card_filter.set_id:
        return False
    if card_filter.status is not None and card.status != card_filter.status:
        return False
    if card_filter.due_before is not None:
        is_due = (
            card.status != CardStatus.NEW
            and card.due_at is not None
            and card.due_at <= card_filter.due_before
        )
        if card_filter.include_new:
            return is_due or card.status == CardStatus.NEW
        return is_due
    return True


def _sort_key(order: CardOrder):
    if order is CardOrder.CREATED_AT:
        return lambda c: (c.created_at, c.id)
    if order is CardOrder.DUE_AT:
        return lambda c: (c.due_at is None, c.due_at or _FAR_FUTURE, c.id)
    return lambda c: (c.due_at is None, c.due_at or _FAR_FUTURE, c.created_at, c.id)


class InMemoryCardStore:
    def __init__(self) -> None:
        self._cards: Dict[str, CardSnapshot] = {}
        self._lock = threading.Lock()

    def add_card(
        self,
        user_id: str,
        set_id: str,
        front: str = "",
        back: str = "",
        created_at: Optional[datetime] = None,
        state: Optional[SchedulingState] = None,
        card_id: Optional[str] = None,
    ) -> CardSnapshot:
        card = CardSnapshot(
            id=card_id or str(uuid.uuid4()),
            user_id=user_id,
            set_id=set_id,
            front=front,
            back=back,
            created_at=created_at or datetime.now(timezone.utc),
        )
        if state is not None:
            card = card.with_scheduling(state)
        with self._lock:
            self._cards[card.id] = card
        return card

    async def get_card(self, card_id: str, user_id: str) -> Optional[CardSnapshot]:
        with self._lock:
            card = self._cards.get(card_id)
        if card is None or card.user_id != user_id:
            return None
        return card

    async def update_card_scheduling(
        self, card_id: str, user_id: str, state: SchedulingState
    ) -> Optional[CardSnapshot]:
        with self._lock:
            card = self._cards.get(card_id)
            if card is None or card.user_id != user_id:
                return None
            updated = card.with_scheduling(state)
            self._cards[card_id] = updated
            return updated

    async def list_cards(
        self, card_filter: CardFilter, order: CardOrder, limit: int
    ) -> List[CardSnapshot]:
        if limit <= 0:
            return []
        with self._lock:
            cards = [c for c in self._cards.values() if _matches(c, card_filter)]
        cards.sort(key=_sort_key(order))
        return cards[:limit]

    async def count_cards(self, card_filter: CardFilter) -> int:
        with self._lock:
            return sum(1 for c in self._cards.values() if _matches(c, card_filter))


class InMemorySetStore:
    def __init__(self) -> None:
        self._owners: Dict[str, str] = {}

    def add_set(self, user_id: str, set_id: Optional[str] = None) -> str:
        set_id = set_id or str(uuid.uuid4())
        self._owners[set_id] = user_id
        return set_id

    async def verify_ownership(self, set_id: str, user_id: str) -> bool:
        return self._owners.get(set_id) == user_id
