"""In-process SessionRepository for single-process deployments."""

import threading
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Tuple

from src.models.study_session import StudySession


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemorySessionRepository:
    """
    Dict-backed session table guarded by a lock.

    Expired entries are invisible to ``get`` and physically removed by
    ``delete_expired`` (or lazily on lookup).
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._sessions: Dict[str, Tuple[StudySession, datetime]] = {}
        self._clock = clock
        self._lock = threading.Lock()

    async def get(self, session_id: str) -> Optional[StudySession]:
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            session, expires_at = entry
            if expires_at <= self._clock():
                del self._sessions[session_id]
                return None
            return session

    async def put(self, session: StudySession, expires_at: datetime) -> None:
        with self._lock:
            self._sessions[session.session_id] = (session, expires_at)

    async def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    async def delete_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [
                sid
                for sid, (_, expires_at) in self._sessions.items()
                if expires_at <= now
            ]
            for sid in expired:
                del self._sessions[sid]
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
