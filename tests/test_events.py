"""Tests for log update broadcasting."""

import asyncio
from uuid import uuid4

from nutrivision.services.events import FoodLogUpdated, LogUpdateBroadcaster


def test_publish_reaches_each_subscriber_once() -> None:
    broadcaster = LogUpdateBroadcaster()
    received: list[FoodLogUpdated] = []

    async def handler(event: FoodLogUpdated) -> None:
        received.append(event)

    broadcaster.subscribe(handler)
    event = FoodLogUpdated(user_id=uuid4(), entry_count=2)
    asyncio.run(broadcaster.publish(event))

    assert received == [event]


def test_failing_handler_does_not_block_others() -> None:
    broadcaster = LogUpdateBroadcaster()
    received: list[int] = []

    async def broken(event: FoodLogUpdated) -> None:
        raise RuntimeError("boom")

    async def healthy(event: FoodLogUpdated) -> None:
        received.append(event.entry_count)

    broadcaster.subscribe(broken)
    broadcaster.subscribe(healthy)
    asyncio.run(broadcaster.publish(FoodLogUpdated(user_id=uuid4(), entry_count=1)))

    assert received == [1]


def test_unsubscribed_handler_is_not_called() -> None:
    broadcaster = LogUpdateBroadcaster()
    received: list[int] = []

    async def handler(event: FoodLogUpdated) -> None:
        received.append(event.entry_count)

    broadcaster.subscribe(handler)
    assert broadcaster.unsubscribe(handler) is True
    assert broadcaster.unsubscribe(handler) is False
    asyncio.run(broadcaster.publish(FoodLogUpdated(user_id=uuid4(), entry_count=1)))

    assert received == []
