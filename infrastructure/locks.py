"""Per-key mutual exclusion for check-then-commit sequences"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable

logger = logging.getLogger(__name__)


class KeyedLock:
    """
    Lock table mapping a key (a room id) to its own asyncio.Lock.

    Work on different keys never waits on each other. Entries are reference
    counted and removed once nobody holds or waits for them, so the table
    only grows with the number of rooms being booked at the same moment.
    """

    def __init__(self) -> None:
        self._locks: Dict[Hashable, asyncio.Lock] = {}
        self._users: Dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        try:
            if lock.locked():
                logger.debug("Waiting for lock on %s", key)
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)
