"""
Daily limit tracking for SRS study.

Counts new cards introduced and reviews performed per user per UTC calendar
day. Counters are keyed by (user_id, day), so the first access on a new day
sees zeros without any reset job. This service only reports state; refusing
work when a cap is hit is the session manager's job.
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable

from src.domain.repositories import DailyProgressRepository
from src.models.daily_progress import DailyAllowance, DailyProgress, ProgressKind
from src.models.srs_schemas import DailyLimits

logger = logging.getLogger(__name__)

DEFAULT_NEW_CARDS_CAP = 20
DEFAULT_REVIEWS_CAP = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DailyLimitTracker:
    """Per-user daily counters with lazy date-boundary reset."""

    def __init__(
        self,
        repository: DailyProgressRepository,
        new_cards_cap: int = DEFAULT_NEW_CARDS_CAP,
        reviews_cap: int = DEFAULT_REVIEWS_CAP,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._repository = repository
        self.new_cards_cap = new_cards_cap
        self.reviews_cap = reviews_cap
        self._clock = clock

    def today(self) -> date:
        """Current UTC calendar day."""
        return self._clock().astimezone(timezone.utc).date()

    async def get_progress(self, user_id: str) -> DailyProgress:
        """Today's counters; zeros if nothing was recorded today."""
        day = self.today()
        progress = await self._repository.get(user_id, day)
        return progress or DailyProgress(user_id=user_id, day=day)

    async def remaining(self, user_id: str) -> DailyAllowance:
        progress = await self.get_progress(user_id)
        return self.allowance(progress)

    async def limits(self, user_id: str) -> DailyLimits:
        """Caps and remaining allowance, as reported by the due-card query."""
        allowance = await self.remaining(user_id)
        return DailyLimits(
            new_cards=self.new_cards_cap,
            reviews=self.reviews_cap,
            new_cards_remaining=allowance.new_cards_remaining,
            reviews_remaining=allowance.reviews_remaining,
        )

    async def increment(self, user_id: str, kind: ProgressKind) -> DailyProgress:
        progress = await self._repository.increment(user_id, self.today(), kind)
        logger.debug(
            f"Daily progress for {user_id} on {progress.day}: "
            f"new={progress.new_cards_today} reviews={progress.reviews_today}"
        )
        return progress

    async def prune(self) -> int:
        """Drop counters from previous days. Memory bounding only."""
        removed = await self._repository.delete_before(self.today())
        if removed:
            logger.info(f"Pruned {removed} stale daily progress row(s)")
        return removed

    def allowance(self, progress: DailyProgress) -> DailyAllowance:
        return DailyAllowance(
            new_cards_remaining=max(0, self.new_cards_cap - progress.new_cards_today),
            reviews_remaining=max(0, self.reviews_cap - progress.reviews_today),
        )
