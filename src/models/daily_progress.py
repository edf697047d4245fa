"""Per-user, per-UTC-day study counters."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class ProgressKind(str, Enum):
    NEW_CARD = "new_card"
    REVIEW = "review"


@dataclass(frozen=True)
class DailyProgress:
    user_id: str
    day: date
    new_cards_today: int = 0
    reviews_today: int = 0

    def incremented(self, kind: ProgressKind) -> "DailyProgress":
        if kind is ProgressKind.NEW_CARD:
            return DailyProgress(
                self.user_id, self.day, self.new_cards_today + 1, self.reviews_today
            )
        return DailyProgress(
            self.user_id, self.day, self.new_cards_today, self.reviews_today + 1
        )


@dataclass(frozen=True)
class DailyAllowance:
    new_cards_remaining: int
    reviews_remaining: int

    @property
    def exhausted(self) -> bool:
        return self.new_cards_remaining <= 0 and self.reviews_remaining <= 0
