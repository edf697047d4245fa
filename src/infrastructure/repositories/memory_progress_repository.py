"""In-process DailyProgressRepository keyed by (user_id, day)."""

import threading
from datetime import date
from typing import Dict, Optional, Tuple

from src.models.daily_progress import DailyProgress, ProgressKind


class InMemoryDailyProgressRepository:
    """Counters live under a composite key, so a new day simply has no row yet."""

    def __init__(self) -> None:
        self._rows: Dict[Tuple[str, date], DailyProgress] = {}
        self._lock = threading.Lock()

    async def get(self, user_id: str, day: date) -> Optional[DailyProgress]:
        with self._lock:
            return self._rows.get((user_id, day))

    async def increment(
        self, user_id: str, day: date, kind: ProgressKind
    ) -> DailyProgress:
        key = (user_id, day)
        with self._lock:
            current = self._rows.get(key) or DailyProgress(user_id=user_id, day=day)
            updated = current.incremented(kind)
            self._rows[key] = updated
            return updated

    async def delete_before(self, day: date) -> int:
        with self._lock:
            stale = [key for key in self._rows if key[1] < day]
            for key in stale:
                del self._rows[key]
            return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)
