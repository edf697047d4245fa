"""
Tests for the due-card query.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.domain.errors import StoreUnavailable
from src.models.daily_progress import ProgressKind
from src.models.scheduling import CardStatus, SchedulingState
from src.services.daily_limit_service import DailyLimitTracker
from src.services.due_cards_service import DueCardsService


def _studied(clock, days_from_now, status=CardStatus.REVIEW):
    return SchedulingState(
        status=status,
        interval_days=6,
        ease_factor=2.5,
        repetitions=2,
        due_at=clock() + timedelta(days=days_from_now),
    )


@pytest.fixture
def service(card_store, tracker, clock):
    return DueCardsService(card_store, tracker, clock=clock)


class TestDueCards:
    @pytest.mark.asyncio
    async def test_empty_collection(self, service):
        result = await service.get_due_cards("user-1")

        assert result.cards == []
        assert result.new_cards_available == 0
        assert result.review_cards_available == 0
        assert result.daily_limits.new_cards_remaining == 20

    @pytest.mark.asyncio
    async def test_counts_new_and_due_cards(self, service, card_store, clock):
        card_store.add_card("user-1", "set-1", created_at=clock())
        card_store.add_card("user-1", "set-1", created_at=clock())
        card_store.add_card("user-1", "set-1", state=_studied(clock, -1))
        card_store.add_card("user-1", "set-1", state=_studied(clock, 3))

        result = await service.get_due_cards("user-1")

        assert result.new_cards_available == 2
        assert result.review_cards_available == 1
        assert len(result.cards) == 3

    @pytest.mark.asyncio
    async def test_due_reviews_come_before_new_cards(self, service, card_store, clock):
        new_card = card_store.add_card(
            "user-1", "set-1", created_at=clock() - timedelta(days=30)
        )
        late = card_store.add_card("user-1", "set-1", state=_studied(clock, -1))
        later = card_store.add_card("user-1", "set-1", state=_studied(clock, -5))

        result = await service.get_due_cards("user-1")

        assert [c.id for c in result.cards] == [later.id, late.id, new_card.id]

    @pytest.mark.asyncio
    async def test_new_cards_ordered_by_creation(self, service, card_store, clock):
        second = card_store.add_card("user-1", "set-1", created_at=clock())
        first = card_store.add_card(
            "user-1", "set-1", created_at=clock() - timedelta(hours=1)
        )

        result = await service.get_due_cards("user-1")

        assert [c.id for c in result.cards] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_card_due_exactly_now_is_due(self, service, card_store, clock):
        card_store.add_card("user-1", "set-1", state=_studied(clock, 0))

        result = await service.get_due_cards("user-1")
        assert result.review_cards_available == 1

    @pytest.mark.asyncio
    async def test_filters_by_set(self, service, card_store, clock):
        card_store.add_card("user-1", "set-1", created_at=clock())
        other = card_store.add_card("user-1", "set-2", created_at=clock())

        result = await service.get_due_cards("user-1", set_id="set-2")

        assert [c.id for c in result.cards] == [other.id]
        assert result.cards[0].set_id == "set-2"

    @pytest.mark.asyncio
    async def test_other_users_cards_invisible(self, service, card_store, clock):
        card_store.add_card("user-2", "set-9", created_at=clock())

        result = await service.get_due_cards("user-1")
        assert result.cards == []
        assert result.new_cards_available == 0

    @pytest.mark.asyncio
    async def test_list_is_capped_by_larger_remaining_allowance(
        self, card_store, progress_repository, clock
    ):
        tracker = DailyLimitTracker(
            progress_repository, new_cards_cap=2, reviews_cap=3, clock=clock
        )
        service = DueCardsService(card_store, tracker, clock=clock)
        for _ in range(5):
            card_store.add_card("user-1", "set-1", created_at=clock())
        await tracker.increment("user-1", ProgressKind.REVIEW)

        result = await service.get_due_cards("user-1")

        assert len(result.cards) == 2
        assert result.new_cards_available == 5
        assert result.daily_limits.reviews_remaining == 2

    @pytest.mark.asyncio
    async def test_card_fields_exposed(self, service, card_store, clock):
        card_store.add_card("user-1", "set-1", front="hola", back="hello", created_at=clock())

        card = (await service.get_due_cards("user-1")).cards[0]

        assert card.front == "hola"
        assert card.back == "hello"
        assert card.status == CardStatus.NEW
        assert card.due_at is None


class TestStoreFailures:
    @pytest.mark.asyncio
    async def test_read_is_retried(self, tracker, clock):
        store = MagicMock()
        store.count_cards = AsyncMock(side_effect=[ConnectionError("reset"), 0, 0])
        store.list_cards = AsyncMock(return_value=[])
        service = DueCardsService(
            store, tracker, read_attempts=2, retry_base_delay=0, clock=clock
        )

        result = await service.get_due_cards("user-1")

        assert result.cards == []
        assert store.count_cards.await_count == 3

    @pytest.mark.asyncio
    async def test_persistent_failure_surfaces_store_unavailable(self, tracker, clock):
        store = MagicMock()
        store.count_cards = AsyncMock(side_effect=ConnectionError("down"))
        service = DueCardsService(
            store, tracker, read_attempts=2, retry_base_delay=0, clock=clock
        )

        with pytest.raises(StoreUnavailable) as exc_info:
            await service.get_due_cards("user-1")

        assert exc_info.value.operation == "count_cards"
        assert exc_info.value.retryable is True
