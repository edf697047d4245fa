"""SessionRepository protocol: keyed study-session storage with expiry."""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from src.models.study_session import StudySession


@runtime_checkable
class SessionRepository(Protocol):
    """Key-value store for in-progress sessions.

    The in-process implementation keeps objects in a dict; a shared cache
    implementation would serialize them, so callers always ``put`` after
    mutating a session they got.
    """

    async def get(self, session_id: str) -> Optional[StudySession]:
        """Return the session, or None if unknown or expired."""
        ...

    async def put(self, session: StudySession, expires_at: datetime) -> None:
        """Insert or replace a session, retained until *expires_at*."""
        ...

    async def delete(self, session_id: str) -> bool:
        """Remove a session. Returns True if it existed."""
        ...

    async def delete_expired(self, now: datetime) -> int:
        """Remove every session whose expiry is at or before *now*."""
        ...
