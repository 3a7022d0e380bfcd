# ABOUTME: Per-session asyncio lock registry serializing protocol turns for the same session id.
# ABOUTME: Turns for one session run one at a time in submission order; idle locks are discarded.

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class SessionTurnLock:
    """
    Serializes turns per session identifier within one process.

    asyncio.Lock wakes waiters in FIFO order, so turns for a session are
    processed in the order they were submitted. Different sessions never
    block each other.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, session_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(session_id, asyncio.Lock())
        self._waiters[session_id] = self._waiters.get(session_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[session_id] -= 1
            if self._waiters[session_id] == 0:
                del self._waiters[session_id]
                del self._locks[session_id]

    def active_sessions(self) -> int:
        return len(self._locks)
