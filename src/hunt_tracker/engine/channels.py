"""In-process broadcast channels for bundles and map changes."""

from __future__ import annotations

import asyncio
from typing import Generic, TypeVar

T = TypeVar("T")

_CLOSED = object()


class Subscription(Generic[T]):
    """Ordered stream of values published after (and, for replay, at) subscription."""

    def __init__(self, channel: "BroadcastChannel[T]") -> None:
        self._channel = channel
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _push(self, value: object) -> None:
        if not self._closed:
            self._queue.put_nowait(value)

    def pending(self) -> int:
        return self._queue.qsize()

    async def get(self) -> T:
        """Wait for the next value; raises StopAsyncIteration once closed."""

        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        value = await self._queue.get()
        if value is _CLOSED:
            self._closed = True
            raise StopAsyncIteration
        return value  # type: ignore[return-value]

    def get_nowait(self) -> T:
        value = self._queue.get_nowait()
        if value is _CLOSED:
            self._closed = True
            raise StopAsyncIteration
        return value  # type: ignore[return-value]

    def close(self) -> None:
        if self._closed:
            return
        self._channel._unsubscribe(self)
        self._queue.put_nowait(_CLOSED)
        self._closed = True

    def __aiter__(self) -> "Subscription[T]":
        return self

    async def __anext__(self) -> T:
        return await self.get()

    def __enter__(self) -> "Subscription[T]":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class BroadcastChannel(Generic[T]):
    """Live-only fan-out: subscribers see values published after they join."""

    def __init__(self) -> None:
        self._subscribers: list[Subscription[T]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> Subscription[T]:
        subscription: Subscription[T] = Subscription(self)
        self._subscribers.append(subscription)
        return subscription

    def publish(self, value: T) -> None:
        for subscription in list(self._subscribers):
            subscription._push(value)

    def close(self) -> None:
        for subscription in list(self._subscribers):
            subscription.close()

    def _unsubscribe(self, subscription: Subscription[T]) -> None:
        if subscription in self._subscribers:
            self._subscribers.remove(subscription)


class ReplayChannel(BroadcastChannel[T]):
    """Fan-out that hands every new subscriber the current value first."""

    def __init__(self, initial: T) -> None:
        super().__init__()
        self._value = initial

    @property
    def value(self) -> T:
        return self._value

    def subscribe(self) -> Subscription[T]:
        subscription = super().subscribe()
        subscription._push(self._value)
        return subscription

    def publish(self, value: T) -> None:
        self._value = value
        super().publish(value)


__all__ = ["BroadcastChannel", "ReplayChannel", "Subscription"]
