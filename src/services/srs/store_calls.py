"""
Timeout guard for Card/Set Store calls.

Every store call is an async boundary; a slow or broken store must surface as
StoreUnavailable instead of hanging the request. Writes are the exception:
they run to completion so the caller always learns their outcome.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from src.domain.errors import StoreUnavailable
from src.utils.retry import with_retry

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def call_store(
    operation: str, awaitable: Awaitable[T], timeout: Optional[float]
) -> T:
    """Await a store call with a timeout, mapping transport failures."""
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except StoreUnavailable:
        raise
    except asyncio.TimeoutError as e:
        logger.warning(f"Store call {operation} timed out after {timeout}s")
        raise StoreUnavailable(operation, f"timed out after {timeout}s") from e
    except (ConnectionError, OSError) as e:
        logger.warning(f"Store call {operation} failed: {e}")
        raise StoreUnavailable(operation, str(e)) from e


async def read_store(
    operation: str,
    call: Callable[[], Awaitable[T]],
    timeout: float,
    attempts: int = 1,
    base_delay: float = 0.2,
) -> T:
    """Run an idempotent store read with a timeout and backoff retries.

    *call* is a zero-argument factory because an awaitable can only be
    awaited once.
    """
    return await with_retry(
        lambda: call_store(operation, call(), timeout),
        attempts=attempts,
        base_delay=base_delay,
        retry_on=(StoreUnavailable,),
        name=operation,
    )


async def write_store(operation: str, awaitable: Awaitable[T], timeout: float) -> T:
    """Await a store write to completion, warning when it outlasts *timeout*.

    A write is never cancelled: a commit already handed to the driver can land
    after cancellation, and the caller would then record nothing for a write
    that took effect. Its outcome decides what happens next, so the caller
    waits for it. Failures still surface as StoreUnavailable.
    """
    task = asyncio.ensure_future(awaitable)
    done, _ = await asyncio.wait({task}, timeout=timeout)
    if not done:
        logger.warning(
            f"Store write {operation} exceeded {timeout}s; awaiting its outcome"
        )
    return await call_store(operation, asyncio.shield(task), timeout=None)
