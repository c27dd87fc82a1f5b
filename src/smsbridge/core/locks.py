"""Keyed async locking with LRU eviction."""

from __future__ import annotations

import asyncio
import contextvars
from abc import ABC, abstractmethod
from collections import OrderedDict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

# ContextVar tracking which keys the current execution context holds.
# asyncio.gather() copies the parent context to child tasks, so children
# see the parent's held set and can re-enter without deadlocking.
_held_keys: contextvars.ContextVar[frozenset[str]] = contextvars.ContextVar(
    "_bridge_locks_held", default=frozenset()
)


def room_key(room_id: str) -> str:
    """Lock key serialising classification of one room."""
    return f"room:{room_id}"


def owner_key(user_id: str) -> str:
    """Lock key serialising admin-room creation for one owner."""
    return f"owner:{user_id}"


class KeyedLockManager(ABC):
    """Abstract base for per-key locking.

    The bridge locks on :func:`room_key` while classifying a room and on
    :func:`owner_key` while creating an admin room. Implementations must be
    **reentrant** within the same execution context (including child tasks
    spawned by ``asyncio.gather``).
    """

    @abstractmethod
    @asynccontextmanager
    async def locked(self, key: str) -> AsyncIterator[None]:
        """Acquire an exclusive lock for *key*."""
        yield  # pragma: no cover


class InMemoryLockManager(KeyedLockManager):
    """In-process asyncio locks with LRU eviction of idle keys.

    Suitable for single-process deployments, which is how the bridge runs:
    the directory it protects lives in process memory too.
    """

    def __init__(self, max_locks: int = 1024) -> None:
        self._locks: OrderedDict[str, asyncio.Lock] = OrderedDict()
        self._refcounts: dict[str, int] = {}
        self._max_locks = max_locks

    def _get_lock(self, key: str) -> asyncio.Lock:
        if key in self._locks:
            self._locks.move_to_end(key)
            self._refcounts[key] = self._refcounts.get(key, 0) + 1
            return self._locks[key]

        lock = asyncio.Lock()
        self._locks[key] = lock
        self._refcounts[key] = 1
        self._evict()
        return lock

    def _release_ref(self, key: str) -> None:
        count = self._refcounts.get(key, 0) - 1
        if count <= 0:
            self._refcounts.pop(key, None)
        else:
            self._refcounts[key] = count

    def _evict(self) -> None:
        if len(self._locks) <= self._max_locks:
            return
        to_remove: list[str] = []
        for key, lock in self._locks.items():
            if len(self._locks) - len(to_remove) <= self._max_locks:
                break
            if not lock.locked() and self._refcounts.get(key, 0) <= 0:
                to_remove.append(key)
        for key in to_remove:
            self._locks.pop(key)
            self._refcounts.pop(key, None)

    @asynccontextmanager
    async def locked(self, key: str) -> AsyncIterator[None]:
        """Acquire the lock for *key* (reentrant via ContextVar)."""
        held = _held_keys.get()
        if key in held:
            yield
            return

        lock = self._get_lock(key)
        try:
            async with lock:
                token = _held_keys.set(held | frozenset({key}))
                try:
                    yield
                finally:
                    _held_keys.reset(token)
        finally:
            self._release_ref(key)

    @property
    def size(self) -> int:
        """Number of locks currently cached."""
        return len(self._locks)
