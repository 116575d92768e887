"""Keyed in-process mutex tests."""

from __future__ import annotations

import asyncio

import pytest

from app.core.locks import KeyedLock

pytestmark = pytest.mark.asyncio


async def test_same_key_is_serialized_and_other_keys_are_not() -> None:
    locks = KeyedLock("test")
    events: list[str] = []
    first_inside = asyncio.Event()

    async def holder(name: str, key: str) -> None:
        async with locks.hold(key):
            events.append(f"{name} in")
            first_inside.set()
            await asyncio.sleep(0.01)
            events.append(f"{name} out")

    first = asyncio.create_task(holder("a", "slot-1"))
    await first_inside.wait()
    await asyncio.gather(holder("b", "slot-1"), holder("c", "slot-2"), first)

    # c never waits for a; b only enters after a has left
    assert events.index("c in") < events.index("a out")
    assert events.index("a out") < events.index("b in")
