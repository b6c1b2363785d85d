"""Tests for the per-conversation lock registry."""
# pylint: disable=missing-function-docstring

import asyncio

import pytest

from times_table_trainer.apps.api.conversation_locks import (
    ConversationLocks,
    prune_periodically,
)


def test_same_conversation_shares_one_lock():
    locks = ConversationLocks()

    first = locks.lock_for("conv-1")
    second = locks.lock_for("conv-1")
    other = locks.lock_for("conv-2")

    assert first is second
    assert first is not other
    assert len(locks) == 2
    assert locks.stats() == {"conversations": 2, "busy": 0}


def test_turns_of_one_conversation_run_one_at_a_time():
    locks = ConversationLocks()
    order: list[str] = []

    async def turn(name: str) -> None:
        async with locks.lock_for("conv-1"):
            order.append(f"{name}-start")
            await asyncio.sleep(0.01)
            order.append(f"{name}-end")

    async def _exercise() -> None:
        await asyncio.gather(turn("a"), turn("b"))

    asyncio.run(_exercise())

    assert order == ["a-start", "a-end", "b-start", "b-end"]


def test_prune_drops_only_idle_unheld_locks():
    locks = ConversationLocks(idle_ttl=10.0)

    async def _exercise() -> tuple[int, dict[str, int]]:
        busy = locks.lock_for("busy", now=0.0)
        locks.lock_for("idle", now=0.0)
        locks.lock_for("fresh", now=15.0)
        async with busy:
            assert locks.stats()["busy"] == 1
            dropped = locks.prune(now=20.0)
        return dropped, locks.stats()

    dropped, stats = asyncio.run(_exercise())

    assert dropped == 1
    assert stats == {"conversations": 2, "busy": 0}


def test_lock_use_refreshes_idle_clock():
    locks = ConversationLocks(idle_ttl=10.0)
    locks.lock_for("conv-1", now=0.0)
    locks.lock_for("conv-1", now=8.0)

    assert locks.prune(now=15.0) == 0
    assert locks.prune(now=19.0) == 1
    assert len(locks) == 0


def test_clear_forgets_everything():
    locks = ConversationLocks()
    locks.lock_for("conv-1")
    locks.clear()

    assert len(locks) == 0


def test_prune_periodically_runs_until_cancelled():
    locks = ConversationLocks(idle_ttl=-1.0)
    locks.lock_for("conv-1")

    async def _exercise() -> None:
        task = asyncio.create_task(prune_periodically(locks, interval=0.01))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(_exercise())

    assert len(locks) == 0
