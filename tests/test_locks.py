"""Tests for InMemoryLockManager."""

from __future__ import annotations

import asyncio

from smsbridge.core.locks import InMemoryLockManager, _held_keys, owner_key, room_key


class TestKeys:
    def test_namespaced(self) -> None:
        assert room_key("!a:x") == "room:!a:x"
        assert owner_key("@a:x") == "owner:@a:x"
        assert room_key("x") != owner_key("x")


class TestInMemoryLockManager:
    async def test_same_key_same_lock(self) -> None:
        mgr = InMemoryLockManager()
        assert mgr._get_lock("k1") is mgr._get_lock("k1")

    async def test_different_keys_different_locks(self) -> None:
        mgr = InMemoryLockManager()
        assert mgr._get_lock("k1") is not mgr._get_lock("k2")

    async def test_serialization(self) -> None:
        mgr = InMemoryLockManager()
        inside = 0
        peak = 0

        async def task() -> None:
            nonlocal inside, peak
            async with mgr.locked("k1"):
                inside += 1
                peak = max(peak, inside)
                await asyncio.sleep(0.01)
                inside -= 1

        await asyncio.gather(task(), task(), task())
        assert peak == 1

    async def test_lru_eviction(self) -> None:
        mgr = InMemoryLockManager(max_locks=2)
        for key in ("k1", "k2", "k3"):
            async with mgr.locked(key):
                pass
        assert mgr.size == 2
        assert "k1" not in mgr._locks

    async def test_held_lock_not_evicted(self) -> None:
        mgr = InMemoryLockManager(max_locks=2)
        lock1 = mgr._get_lock("k1")
        await lock1.acquire()
        try:
            mgr._get_lock("k2")
            mgr._get_lock("k3")
            assert "k1" in mgr._locks
        finally:
            lock1.release()

    async def test_reentrant_same_context(self) -> None:
        mgr = InMemoryLockManager()
        async with mgr.locked("k1"):
            async with mgr.locked("k1"):
                assert "k1" in _held_keys.get()
            assert "k1" in _held_keys.get()
        assert "k1" not in _held_keys.get()

    async def test_reentrant_via_gather(self) -> None:
        mgr = InMemoryLockManager()
        acquired_in_child = False

        async def child() -> None:
            nonlocal acquired_in_child
            async with mgr.locked("k1"):
                acquired_in_child = True

        async with mgr.locked("k1"):
            await asyncio.gather(child())

        assert acquired_in_child
