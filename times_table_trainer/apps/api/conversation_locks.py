"""One asyncio lock per conversation.

A turn loads the conversation's session, handles it and writes the result
back. Two turns of one conversation must not interleave inside that bracket,
so the routes hold the conversation's lock around it. Locks of conversations
that have gone quiet are pruned periodically.
"""

from __future__ import annotations

import asyncio
import time
from typing import Optional

from times_table_trainer.core.logging import get_logger

logger = get_logger(__name__)

IDLE_TTL_SECONDS = 600.0
PRUNE_INTERVAL_SECONDS = 300.0


class ConversationLocks:
    """Registry of per-conversation locks with idle pruning.

    Only touched from the event loop thread, so the registry itself needs no
    guarding.
    """

    def __init__(self, idle_ttl: float = IDLE_TTL_SECONDS) -> None:
        self.idle_ttl = idle_ttl
        self._locks: dict[str, asyncio.Lock] = {}
        self._last_used: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def lock_for(self, conversation_id: str, now: Optional[float] = None) -> asyncio.Lock:
        """Return the conversation's lock, creating it on first use."""
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = self._locks[conversation_id] = asyncio.Lock()
        self._last_used[conversation_id] = time.monotonic() if now is None else now
        return lock

    def prune(self, now: Optional[float] = None) -> int:
        """Drop idle locks that nobody holds; return how many were dropped."""
        current = time.monotonic() if now is None else now
        idle = [
            conversation_id
            for conversation_id, last_used in self._last_used.items()
            if current - last_used > self.idle_ttl and not self._locks[conversation_id].locked()
        ]
        for conversation_id in idle:
            del self._locks[conversation_id]
            del self._last_used[conversation_id]
        return len(idle)

    def stats(self) -> dict[str, int]:
        """Counts reported by the health endpoint."""
        return {
            "conversations": len(self._locks),
            "busy": sum(1 for lock in self._locks.values() if lock.locked()),
        }

    def clear(self) -> None:
        self._locks.clear()
        self._last_used.clear()


async def prune_periodically(
    locks: ConversationLocks, interval: float = PRUNE_INTERVAL_SECONDS
) -> None:
    """Prune ``locks`` every ``interval`` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        dropped = locks.prune()
        if dropped:
            logger.info("Pruned %d idle conversation locks", dropped)


__all__ = [
    "ConversationLocks",
    "prune_periodically",
    "IDLE_TTL_SECONDS",
    "PRUNE_INTERVAL_SECONDS",
]
