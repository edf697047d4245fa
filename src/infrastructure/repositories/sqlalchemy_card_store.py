"""SQLAlchemy implementation of CardStore."""

import logging
from typing import List, Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.errors import StoreUnavailable
from src.models.base import ensure_utc
from src.models.card import Card
from src.models.scheduling import (
    CardFilter,
    CardOrder,
    CardSnapshot,
    CardStatus,
    SchedulingState,
)

logger = logging.getLogger(__name__)


def _to_snapshot(card: Card) -> CardSnapshot:
    return CardSnapshot(
        id=card.id,
        user_id=card.user_id,
        set_id=card.set_id,
        front=card.front,
        back=card.back,
        created_at=ensure_utc(card.created_at),
        status=CardStatus(card.status),
        interval_days=card.interval_days,
        ease_factor=card.ease_factor,
        repetitions=card.repetitions,
        due_at=ensure_utc(card.due_at),
    )


def _where(card_filter: CardFilter) -> list:
    conditions = [Card.user_id == card_filter.user_id]
    if card_filter.set_id is not None:
        conditions.append(Card.set_id == card_filter.set_id)
    if card_filter.status is not None:
        conditions.append(Card.status == card_filter.status.value)
    if card_filter.due_before is not None:
        due = and_(
            Card.status != CardStatus.NEW.value,
            Card.due_at <= ensure_utc(card_filter.due_before),
        )
        if card_filter.include_new:
            due = or_(Card.status == CardStatus.NEW.value, due)
        conditions.append(due)
    return conditions


def _order_by(order: CardOrder) -> list:
    if order is CardOrder.CREATED_AT:
        return [Card.created_at.asc(), Card.id.asc()]
    if order is CardOrder.DUE_AT:
        return [Card.due_at.asc().nulls_last(), Card.id.asc()]
    return [Card.due_at.asc().nulls_last(), Card.created_at.asc(), Card.id.asc()]


class SqlAlchemyCardStore:
    """Concrete CardStore backed by SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_card(self, card_id: str, user_id: str) -> Optional[CardSnapshot]:
        try:
            card = await self._fetch(card_id, user_id)
        except SQLAlchemyError as e:
            raise StoreUnavailable("get_card", str(e)) from e
        return _to_snapshot(card) if card else None

    async def update_card_scheduling(
        self, card_id: str, user_id: str, state: SchedulingState
    ) -> Optional[CardSnapshot]:
        try:
            card = await self._fetch(card_id, user_id)
            if card is None:
                return None
            card.status = state.status.value
            card.interval_days = state.interval_days
            card.ease_factor = state.ease_factor
            card.repetitions = state.repetitions
            card.due_at = ensure_utc(state.due_at)
            await self._session.flush()
            snapshot = _to_snapshot(card)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error(f"Failed to update scheduling for card {card_id}: {e}")
            raise StoreUnavailable("update_card_scheduling", str(e)) from e
        return snapshot

    async def list_cards(
        self, card_filter: CardFilter, order: CardOrder, limit: int
    ) -> List[CardSnapshot]:
        if limit <= 0:
            return []
        try:
            result = await self._session.execute(
                select(Card)
                .where(*_where(card_filter))
                .order_by(*_order_by(order))
                .limit(limit)
            )
        except SQLAlchemyError as e:
            raise StoreUnavailable("list_cards", str(e)) from e
        return [_to_snapshot(card) for card in result.scalars().all()]

    async def count_cards(self, card_filter: CardFilter) -> int:
        try:
            result = await self._session.execute(
                select(func.count()).select_from(Card).where(*_where(card_filter))
            )
        except SQLAlchemyError as e:
            raise StoreUnavailable("count_cards", str(e)) from e
        return int(result.scalar_one())

    async def _fetch(self, card_id: str, user_id: str) -> Optional[Card]:
        result = await self._session.execute(
            select(Card).where(Card.id == card_id, Card.user_id == user_id)
        )
        return result.scalar_one_or_none()
