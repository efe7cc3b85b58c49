"""Per-session serialization of read-modify-write updates."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field


@dataclass
class _Entry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    # Holders plus waiters
    users: int = 0


class SessionLocks:
    """One asyncio.Lock per (user_id, session_id).

    Telemetry appends and risk recomputation for the same session hold the
    same lock, so neither overwrites the other's update within a process.
    An entry lives only while some coroutine holds or waits for it.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], _Entry] = {}

    @asynccontextmanager
    async def hold(self, user_id: str, session_id: str) -> AsyncIterator[None]:
        key = (user_id, session_id)
        entry = self._entries.setdefault(key, _Entry())
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._entries[key]

    def locked(self, user_id: str, session_id: str) -> bool:
        entry = self._entries.get((user_id, session_id))
        return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        return len(self._entries)


# Shared by the session store and the recompute worker
session_locks = SessionLocks()
