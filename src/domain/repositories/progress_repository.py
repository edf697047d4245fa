"""DailyProgressRepository protocol: counters keyed by (user_id, day)."""

from datetime import date
from typing import Optional, Protocol, runtime_checkable

from src.models.daily_progress import DailyProgress, ProgressKind


@runtime_checkable
class DailyProgressRepository(Protocol):
    async def get(self, user_id: str, day: date) -> Optional[DailyProgress]:
        """Return the counters for *day*, or None if nothing was recorded."""
        ...

    async def increment(
        self, user_id: str, day: date, kind: ProgressKind
    ) -> DailyProgress:
        """Atomically add one to the *kind* counter, creating the row if needed."""
        ...

    async def delete_before(self, day: date) -> int:
        """Drop rows for days strictly before *day*. Returns rows removed."""
        ...
