"""In-memory study session state (not persisted to durable storage)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class ReviewRecord:
    card_id: str
    rating: int
    reviewed_at: datetime


@dataclass
class StudySession:
    """One bounded study interaction.

    ``card_ids`` is fixed at start time; ``reviews`` is append-only.
    """

    session_id: str
    user_id: str
    set_id: str
    card_ids: List[str]
    started_at: datetime
    new_cards: int = 0
    review_cards: int = 0
    completed_at: Optional[datetime] = None
    reviews: List[ReviewRecord] = field(default_factory=list)

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def record_review(self, card_id: str, rating: int, reviewed_at: datetime) -> ReviewRecord:
        record = ReviewRecord(card_id=card_id, rating=rating, reviewed_at=reviewed_at)
        self.reviews.append(record)
        return record

    def complete(self, now: datetime) -> datetime:
        """Mark completed; later calls keep the first timestamp."""
        if self.completed_at is None:
            self.completed_at = now
        return self.completed_at
