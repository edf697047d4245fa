"""
SRS SM-2 Algorithm Implementation
Calculates the next scheduling state of a card from a review rating.

Pure and deterministic: no I/O, and "now" is passed in by the caller.
"""

import math
from datetime import datetime, timedelta

from src.models.scheduling import MIN_EASE_FACTOR, CardStatus, SchedulingState

# Ratings below this are a failed recall
PASSING_RATING = 3


def round_half_up(value: float) -> int:
    """Integer rounding with .5 going up (not Python's banker's rounding)."""
    return int(math.floor(value + 0.5))


def adjust_ease_factor(ease_factor: float, rating: int) -> float:
    """
    Apply the SM-2 ease update, floored at 1.3.

    Formula: EF' = EF + (0.1 - (5-q) * (0.08 + (5-q) * 0.02))
    """
    miss = 5 - rating
    return max(MIN_EASE_FACTOR, ease_factor + (0.1 - miss * (0.08 + miss * 0.02)))


def calculate_next_review(
    state: SchedulingState, rating: int, now: datetime
) -> SchedulingState:
    """
    Calculate next review using SM-2 algorithm.

    Args:
        state: Current scheduling state of the card
        rating: 1=Again, 2=Hard, 3=Good, 4=Easy, 5=Perfect (validated upstream)
        now: Review time; due_at is now + interval_days

    Returns:
        New SchedulingState, ease factor rounded to 2 decimals
    """
    interval = state.interval_days
    ease_factor = state.ease_factor
    repetitions = state.repetitions

    if rating < PASSING_RATING:
        interval = 0
        repetitions = 0
        status = (
            CardStatus.LEARNING
            if state.status == CardStatus.NEW
            else CardStatus.RELEARNING
        )
    else:
        repetitions += 1
        if repetitions == 1:
            interval = 1
            status = CardStatus.LEARNING
        elif repetitions == 2:
            interval = 6
            status = CardStatus.REVIEW
        else:
            # Uses the ease factor from before this review
            interval = round_half_up(interval * ease_factor)
            status = CardStatus.REVIEW
        ease_factor = adjust_ease_factor(ease_factor, rating)

    return SchedulingState(
        status=status,
        interval_days=interval,
        ease_factor=round(ease_factor, 2),
        repetitions=repetitions,
        due_at=now + timedelta(days=interval),
    )
