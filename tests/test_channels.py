from __future__ import annotations

import asyncio

import pytest

from hunt_tracker.engine.channels import BroadcastChannel, ReplayChannel


def test_replay_subscriber_gets_current_value_then_updates() -> None:
    async def scenario() -> list[str | None]:
        channel: ReplayChannel[str | None] = ReplayChannel(None)
        channel.publish("bundle-1")
        channel.publish("bundle-2")

        subscription = channel.subscribe()
        channel.publish("bundle-3")

        values = [await subscription.get(), await subscription.get()]
        assert subscription.pending() == 0
        return values

    assert asyncio.run(scenario()) == ["bundle-2", "bundle-3"]


def test_replay_subscriber_sees_none_before_first_bundle() -> None:
    async def scenario():
        channel: ReplayChannel[str | None] = ReplayChannel(None)
        subscription = channel.subscribe()
        return await subscription.get()

    assert asyncio.run(scenario()) is None


def test_broadcast_is_live_only() -> None:
    async def scenario() -> list[str]:
        channel: BroadcastChannel[str] = BroadcastChannel()
        channel.publish("creek/early")
        subscription = channel.subscribe()
        channel.publish("creek/swamp")
        channel.close()
        return [value async for value in subscription]

    assert asyncio.run(scenario()) == ["creek/swamp"]


def test_closed_subscription_stops_receiving() -> None:
    async def scenario() -> None:
        channel: BroadcastChannel[int] = BroadcastChannel()
        with channel.subscribe() as subscription:
            channel.publish(1)
            assert await subscription.get() == 1
        assert channel.subscriber_count == 0
        channel.publish(2)
        with pytest.raises(StopAsyncIteration):
            await subscription.get()

    asyncio.run(scenario())


def test_each_subscriber_gets_every_value() -> None:
    async def scenario() -> None:
        channel: ReplayChannel[int] = ReplayChannel(0)
        first = channel.subscribe()
        channel.publish(1)
        second = channel.subscribe()
        channel.publish(2)

        assert [first.get_nowait() for _ in range(3)] == [0, 1, 2]
        assert [second.get_nowait() for _ in range(2)] == [1, 2]

    asyncio.run(scenario())
