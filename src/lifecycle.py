"""
Application lifespan management.

Handles startup and shutdown of the scheduler's process-wide pieces:
- Logging setup
- Database initialization
- Periodic session cleanup

Framework-agnostic: an API layer enters ``lifespan()`` from its own startup
hook and builds request-scoped services with ``build_srs_service``.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Optional

from .core.config import Settings, get_settings
from .core.database import (
    close_database,
    health_check,
    init_database,
    is_database_initialized,
)
from .services.daily_limit_service import DailyLimitTracker
from .services.session_cleanup_service import run_periodic_session_cleanup
from .services.srs_service import get_progress_repository, get_session_repository
from .utils.logging import setup_logging
from .version import __version__

logger = logging.getLogger(__name__)

_cleanup_task: Optional[asyncio.Task] = None


def is_cleanup_running() -> bool:
    """Check if the periodic cleanup task is alive."""
    return _cleanup_task is not None and not _cleanup_task.done()


@asynccontextmanager
async def lifespan(settings: Optional[Settings] = None) -> AsyncIterator[None]:
    """Initialize the database and run session cleanup until exit."""
    global _cleanup_task
    settings = settings or get_settings()
    setup_logging(
        log_level=settings.effective_log_level,
        log_to_file=settings.log_to_file,
        logs_dir=Path(settings.logs_dir),
    )
    logger.info(f"SRS scheduler {__version__} starting up ({settings.environment})")

    try:
        await init_database(settings.database_url)
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    tracker = DailyLimitTracker(
        get_progress_repository(),
        new_cards_cap=settings.new_cards_daily_cap,
        reviews_cap=settings.reviews_daily_cap,
    )
    _cleanup_task = asyncio.create_task(
        run_periodic_session_cleanup(
            get_session_repository(),
            tracker,
            interval_minutes=settings.session_cleanup_interval_minutes,
        ),
        name="session_cleanup",
    )

    try:
        yield
    finally:
        await _shutdown()


async def health_status() -> Dict[str, Any]:
    """Readiness report for an API layer's health endpoint."""
    db_healthy = is_database_initialized() and await health_check()
    cleanup_running = is_cleanup_running()
    return {
        "status": "ok" if db_healthy and cleanup_running else "degraded",
        "version": __version__,
        "database": "connected" if db_healthy else "disconnected",
        "session_cleanup": "running" if cleanup_running else "stopped",
    }


async def _shutdown(timeout: float = 5.0) -> None:
    global _cleanup_task
    logger.info("SRS scheduler shutting down")

    if _cleanup_task is not None:
        _cleanup_task.cancel()
        try:
            await asyncio.wait_for(_cleanup_task, timeout=timeout)
        except (asyncio.CancelledError, asyncio.TimeoutError):
            pass
        _cleanup_task = None

    await close_database()
