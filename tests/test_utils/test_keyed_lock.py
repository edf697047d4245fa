"""
Tests for per-key asyncio locks.
"""

import asyncio

import pytest

from src.utils.keyed_lock import KeyedLock


class TestKeyedLock:
    @pytest.mark.asyncio
    async def test_same_key_is_serialized(self):
        locks = KeyedLock()
        order = []

        async def worker(name):
            async with locks.hold("user-1"):
                order.append(f"{name}-start")
                await asyncio.sleep(0.01)
                order.append(f"{name}-end")

        await asyncio.gather(worker("a"), worker("b"))

        assert order == ["a-start", "a-end", "b-start", "b-end"]

    @pytest.mark.asyncio
    async def test_different_keys_run_concurrently(self):
        locks = KeyedLock()
        inside = asyncio.Event()

        async def holder():
            async with locks.hold("user-1"):
                await asyncio.wait_for(inside.wait(), timeout=1)

        async def other():
            async with locks.hold("user-2"):
                inside.set()

        await asyncio.gather(holder(), other())

    @pytest.mark.asyncio
    async def test_locked_reports_state(self):
        locks = KeyedLock()

        async with locks.hold("k"):
            assert locks.locked("k")
            assert not locks.locked("other")

        assert not locks.locked("k")

    @pytest.mark.asyncio
    async def test_unused_locks_are_dropped(self):
        locks = KeyedLock()

        async with locks.hold("k"):
            assert len(locks) == 1

        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_lock_released_on_error(self):
        locks = KeyedLock()

        with pytest.raises(RuntimeError):
            async with locks.hold("k"):
                raise RuntimeError("boom")

        assert len(locks) == 0
        async with locks.hold("k"):
            pass
