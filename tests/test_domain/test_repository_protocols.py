"""Tests for repository protocol definitions.

Verifies that the Protocol classes exist and that structural subtyping works
(classes implementing the right methods are accepted as instances of the
protocol), including the shipped implementations.
"""

import pytest


class TestCardStoreProtocol:
    def test_protocol_is_runtime_checkable(self):
        from src.domain.repositories import CardStore

        assert getattr(CardStore, "_is_runtime_protocol", False)

    @pytest.mark.parametrize(
        "method", ["get_card", "update_card_scheduling", "list_cards", "count_cards"]
    )
    def test_protocol_defines_method(self, method):
        from src.domain.repositories import CardStore

        assert hasattr(CardStore, method)

    def test_structural_subtyping_accepts_conforming_class(self):
        from src.domain.repositories import CardStore

        class FakeCardStore:
            async def get_card(self, card_id, user_id):
                return None

            async def update_card_scheduling(self, card_id, user_id, state):
                return None

            async def list_cards(self, card_filter, order, limit):
                return []

            async def count_cards(self, card_filter):
                return 0

        assert isinstance(FakeCardStore(), CardStore)

    def test_structural_subtyping_rejects_non_conforming_class(self):
        from src.domain.repositories import CardStore

        class BadStore:
            async def get_card(self, card_id, user_id):
                return None

        assert not isinstance(BadStore(), CardStore)


class TestSetStoreProtocol:
    def test_structural_subtyping(self):
        from src.domain.repositories import SetStore

        class FakeSetStore:
            async def verify_ownership(self, set_id, user_id):
                return True

        class BadRepo:
            pass

        assert isinstance(FakeSetStore(), SetStore)
        assert not isinstance(BadRepo(), SetStore)


class TestImplementationsConform:
    """Shipped implementations satisfy their protocols."""

    def test_in_memory_stores(self):
        from src.domain.repositories import (
            CardStore,
            DailyProgressRepository,
            SessionRepository,
            SetStore,
        )
        from src.infrastructure.repositories import (
            InMemoryCardStore,
            InMemoryDailyProgressRepository,
            InMemorySessionRepository,
            InMemorySetStore,
        )

        assert isinstance(InMemoryCardStore(), CardStore)
        assert isinstance(InMemorySetStore(), SetStore)
        assert isinstance(InMemorySessionRepository(), SessionRepository)
        assert isinstance(InMemoryDailyProgressRepository(), DailyProgressRepository)

    def test_sqlalchemy_stores(self):
        from unittest.mock import MagicMock

        from src.domain.repositories import CardStore, SetStore
        from src.infrastructure.repositories import SqlAlchemyCardStore, SqlAlchemySetStore

        assert isinstance(SqlAlchemyCardStore(MagicMock()), CardStore)
        assert isinstance(SqlAlchemySetStore(MagicMock()), SetStore)
