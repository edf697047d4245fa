"""
Backoff retries for idempotent store reads.

Never wrap a write: retrying one could apply a review twice.
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Sequence, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(attempt: int, base_delay: float) -> float:
    """Delay before retry number ``attempt + 1``: doubling, plus up to 50% jitter."""
    delay = base_delay * (2**attempt)
    return delay + delay * random.uniform(0, 0.5)


async def with_retry(
    call: Callable[[], Awaitable[T]],
    *,
    attempts: int,
    base_delay: float,
    retry_on: Sequence[Type[Exception]],
    name: str = "store call",
) -> T:
    """Await ``call()`` up to ``attempts`` times, sleeping between failures.

    Exceptions outside ``retry_on`` propagate immediately; the last retryable
    one propagates once attempts run out.
    """
    retry_on = tuple(retry_on)
    for attempt in range(attempts):
        try:
            return await call()
        except retry_on as e:
            if attempt == attempts - 1:
                logger.error(f"{name} failed after {attempts} attempt(s): {e}")
                raise
            delay = backoff_delay(attempt, base_delay)
            logger.warning(
                f"{name} failed ({e}); retry {attempt + 1}/{attempts - 1} in {delay:.2f}s"
            )
            await asyncio.sleep(delay)
    raise ValueError("attempts must be at least 1")
