"""Tests for the in-process event bus."""

import asyncio

import pytest

from sipsense.kernel.event_bus import EventBus


@pytest.mark.asyncio
async def test_fan_out_to_every_listener():
    bus = EventBus()
    a = bus.listen("notifications")
    b = bus.listen("notifications")

    await bus.publish("notifications", {"id": 1})

    assert a.get_nowait() == {"id": 1}
    assert b.get_nowait() == {"id": 1}


@pytest.mark.asyncio
async def test_topics_are_isolated():
    bus = EventBus()
    q = bus.listen("snapshot")
    bus.publish_nowait("notifications", {"id": 1})
    assert q.empty()


@pytest.mark.asyncio
async def test_unlisten_stops_delivery():
    bus = EventBus()
    q = bus.listen("snapshot")
    bus.unlisten("snapshot", q)
    bus.unlisten("snapshot", q)
    bus.publish_nowait("snapshot", {"steps": 1})
    assert q.empty()


@pytest.mark.asyncio
async def test_undrained_listener_keeps_newest_events():
    bus = EventBus(maxsize=2)
    slow = bus.listen("snapshot")
    fast = bus.listen("snapshot")

    for steps in (1, 2, 3):
        await bus.publish("snapshot", {"steps": steps})
        fast.get_nowait()

    assert slow.qsize() == 2
    assert [slow.get_nowait()["steps"] for _ in range(2)] == [2, 3]
    assert bus.dropped == 1


@pytest.mark.asyncio
async def test_subscribe_iterates_events():
    bus = EventBus()
    received = []

    async def consume():
        async for event in bus.subscribe("notifications"):
            received.append(event)
            if len(received) == 2:
                break

    task = asyncio.create_task(consume())
    await asyncio.sleep(0)
    await bus.publish("notifications", {"id": 1})
    await bus.publish("notifications", {"id": 2})
    await asyncio.wait_for(task, timeout=1.0)

    assert [e["id"] for e in received] == [1, 2]
