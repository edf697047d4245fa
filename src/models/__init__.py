from .base import Base, TimestampMixin
from .card import Card
from .card_set import CardSet

__all__ = [
    "Base",
    "TimestampMixin",
    "Card",
    "CardSet",
]
