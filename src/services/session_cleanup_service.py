"""
Expired study session cleanup.

Periodically drops study sessions past their retention window and daily
progress counters from previous days, bounding the memory held by the
in-process repositories. Correctness never depends on this running.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from src.domain.repositories import SessionRepository

from .daily_limit_service import DailyLimitTracker

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def cleanup_expired_sessions(
    sessions: SessionRepository,
    tracker: Optional[DailyLimitTracker] = None,
    clock: Callable[[], datetime] = _utcnow,
) -> int:
    """
    Remove expired sessions and, if a tracker is given, stale progress rows.

    Returns:
        Number of sessions removed.
    """
    removed = 0
    try:
        removed = await sessions.delete_expired(clock())
        if removed > 0:
            logger.info(f"Session cleanup: removed {removed} expired session(s)")
        else:
            logger.debug("Session cleanup: no expired sessions found")

        if tracker is not None:
            await tracker.prune()
    except Exception as e:
        logger.error(f"Session cleanup failed: {e}", exc_info=True)

    return removed


async def run_periodic_session_cleanup(
    sessions: SessionRepository,
    tracker: Optional[DailyLimitTracker] = None,
    interval_minutes: float = 60.0,
    clock: Callable[[], datetime] = _utcnow,
) -> None:
    """
    Run expired session cleanup periodically.

    Runs once immediately on startup, then repeats every interval_minutes
    until cancelled.
    """
    logger.info(f"Starting periodic session cleanup (every {interval_minutes}m)")
    while True:
        try:
            await cleanup_expired_sessions(sessions, tracker, clock)
        except asyncio.CancelledError:
            logger.info("Periodic session cleanup task cancelled")
            break

        try:
            await asyncio.sleep(interval_minutes * 60)
        except asyncio.CancelledError:
            logger.info("Periodic session cleanup task cancelled")
            break
