"""
Database model for a flashcard and its SM-2 scheduling columns.

Only the scheduler writes interval_days, ease_factor, repetitions, status
and due_at; content columns belong to card CRUD outside this package.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin
from .scheduling import DEFAULT_EASE_FACTOR, CardStatus

if TYPE_CHECKING:
    from .card_set import CardSet


class Card(Base, TimestampMixin):
    __tablename__ = "cards"
    __table_args__ = (
        Index("ix_cards_user_status_due", "user_id", "status", "due_at"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    set_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("card_sets.id", ondelete="CASCADE"), nullable=False
    )
    front: Mapped[str] = mapped_column(Text, nullable=False, default="")
    back: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # SM-2 scheduling state
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=CardStatus.NEW.value
    )
    interval_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ease_factor: Mapped[float] = mapped_column(
        Float, nullable=False, default=DEFAULT_EASE_FACTOR
    )
    repetitions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    due_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    card_set: Mapped["CardSet"] = relationship("CardSet", back_populates="cards")

    def __repr__(self) -> str:
        return (
            f"<Card(id={self.id}, set_id={self.set_id}, status={self.status}, "
            f"due_at={self.due_at})>"
        )
