"""
SRS (Spaced Repetition System) Module
SM-2 scheduling and guarded store access for study sessions
"""

from .srs_algorithm import (
    PASSING_RATING,
    adjust_ease_factor,
    calculate_next_review,
    round_half_up,
)
from .store_calls import call_store, read_store, write_store

__all__ = [
    "PASSING_RATING",
    "adjust_ease_factor",
    "calculate_next_review",
    "round_half_up",
    "call_store",
    "read_store",
    "write_store",
]
