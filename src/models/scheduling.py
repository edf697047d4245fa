"""Scheduling value types shared by the SM-2 engine, stores and services."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional

DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
MIN_RATING = 1
MAX_RATING = 5


class CardStatus(str, Enum):
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    RELEARNING = "relearning"


class CardOrder(str, Enum):
    """Sort orders understood by CardStore.list_cards."""

    CREATED_AT = "created_at"
    DUE_AT = "due_at"
    # due_at ascending with nulls last, then created_at ascending
    DUE_AT_THEN_CREATED_AT = "due_at,created_at"


@dataclass(frozen=True)
class SchedulingState:
    """Per-card memory parameters mutated only by the SM-2 engine."""

    status: CardStatus = CardStatus.NEW
    interval_days: int = 0
    ease_factor: float = DEFAULT_EASE_FACTOR
    repetitions: int = 0
    due_at: Optional[datetime] = None


@dataclass(frozen=True)
class CardSnapshot:
    """A card as read from the Card Store."""

    id: str
    user_id: str
    set_id: str
    front: str
    back: str
    created_at: datetime
    status: CardStatus = CardStatus.NEW
    interval_days: int = 0
    ease_factor: float = DEFAULT_EASE_FACTOR
    repetitions: int = 0
    due_at: Optional[datetime] = None

    @property
    def scheduling(self) -> SchedulingState:
        return SchedulingState(
            status=self.status,
            interval_days=self.interval_days,
            ease_factor=self.ease_factor,
            repetitions=self.repetitions,
            due_at=self.due_at,
        )

    def with_scheduling(self, state: SchedulingState) -> "CardSnapshot":
        return replace(
            self,
            status=state.status,
            interval_days=state.interval_days,
            ease_factor=state.ease_factor,
            repetitions=state.repetitions,
            due_at=state.due_at,
        )


@dataclass(frozen=True)
class CardFilter:
    """Selection criteria for CardStore.list_cards / count_cards.

    ``status`` restricts to one status. ``due_before`` restricts to
    already-studied cards (status != new) due at or before that instant;
    with ``include_new`` the new cards are OR'ed back in.
    """

    user_id: str
    set_id: Optional[str] = None
    status: Optional[CardStatus] = None
    due_before: Optional[datetime] = None
    include_new: bool = False
