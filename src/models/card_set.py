"""Database model for a flashcard set (ownership scope for cards)."""

import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .card import Card


class CardSet(Base, TimestampMixin):
    __tablename__ = "card_sets"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    cards: Mapped[List["Card"]] = relationship(
        "Card", back_populates="card_set", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<CardSet(id={self.id}, user_id={self.user_id}, name={self.name!r})>"
