"""In-process keyed mutexes.

Storage guards (row locks, conditional updates) keep separate processes from
double-booking. Within one process the check-and-flip sequence for a key is
also serialized here, which is the only exclusion available when the backing
store has no row-level locking (SQLite).
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


class KeyedLock:
    """Hand out one ``asyncio.Lock`` per key for as long as someone holds it."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._locks: "weakref.WeakValueDictionary[Hashable, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._lock_for(key)
        if lock.locked():
            logger.debug("Waiting for %s lock on %s", self.name, key)
        async with lock:
            yield


slot_locks = KeyedLock("slot")
booking_locks = KeyedLock("booking")

__all__ = ["KeyedLock", "booking_locks", "slot_locks"]
