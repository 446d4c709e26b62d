"""
Per-session write serialization.

Hands out one asyncio.Lock per session ID so read-modify-write cycles on a
session's history cannot interleave within this process.

Dependencies: asyncio
System role: Concurrency guard for session mutations
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID
from weakref import WeakValueDictionary


class SessionLockRegistry:
    """Registry of per-session locks; idle locks are garbage collected."""

    def __init__(self) -> None:
        self._locks: WeakValueDictionary[UUID, asyncio.Lock] = WeakValueDictionary()

    def get(self, session_id: UUID) -> asyncio.Lock:
        """Return the lock guarding a session, creating it on first use."""
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, session_id: UUID) -> AsyncIterator[None]:
        """Hold the session's lock for the duration of the block."""
        lock = self.get(session_id)
        async with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)


session_locks = SessionLockRegistry()
