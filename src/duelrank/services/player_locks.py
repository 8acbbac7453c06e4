# src/duelrank/services/player_locks.py

"""Per-player mutual exclusion for match recording within one process."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


class PlayerLockRegistry:
    """Hands out one asyncio.Lock per player id.

    Locks are always acquired in ascending id order so two submissions
    sharing players can never wait on each other in a cycle. A lock is
    discarded once no task holds or waits on it.
    """

    def __init__(self) -> None:
        self._locks: dict[int, asyncio.Lock] = {}
        self._users: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def _checkout(self, player_id: int) -> asyncio.Lock:
        lock = self._locks.get(player_id)
        if lock is None:
            lock = self._locks[player_id] = asyncio.Lock()
        self._users[player_id] = self._users.get(player_id, 0) + 1
        return lock

    def _checkin(self, player_id: int) -> None:
        remaining = self._users[player_id] - 1
        if remaining:
            self._users[player_id] = remaining
        else:
            del self._users[player_id]
            del self._locks[player_id]

    @asynccontextmanager
    async def hold(self, *player_ids: int) -> AsyncIterator[None]:
        """Hold the locks of every given player for the duration of the block."""
        ordered = sorted(set(player_ids))
        locks = [self._checkout(pid) for pid in ordered]
        acquired: list[asyncio.Lock] = []
        try:
            for lock in locks:
                await lock.acquire()
                acquired.append(lock)
            logger.debug("Acquired player locks", extra={"player_ids": ordered})
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for pid in ordered:
                self._checkin(pid)


# Shared by every request served by this process
player_locks = PlayerLockRegistry()
