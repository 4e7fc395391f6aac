"""Timer-driven loop that never runs two ticks at once."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Run ``tick`` every ``interval`` seconds, one tick at a time.

    The timer keeps firing while a tick is in flight. Any number of firings
    during a slow tick collapse into a single follow-up run once it finishes.
    Exceptions raised by a tick are logged and the loop carries on.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        tick: Callable[[], Awaitable[None]],
    ) -> None:
        self._name = name
        self._interval = interval
        self._tick = tick
        self._due = asyncio.Event()
        self._timer: asyncio.Task[None] | None = None
        self._runner: asyncio.Task[None] | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def running(self) -> bool:
        return self._runner is not None and not self._runner.done()

    def start(self) -> None:
        if self.running:
            return
        self._due.clear()
        self._timer = asyncio.create_task(self._fire(), name=f"{self._name}-timer")
        self._runner = asyncio.create_task(self._run(), name=f"{self._name}-runner")

    def stop(self) -> None:
        """Cancel the loop; an in-flight tick is abandoned, not awaited."""

        for task in (self._timer, self._runner):
            if task is not None:
                task.cancel()
        self._timer = None
        self._runner = None

    async def _fire(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self._due.set()

    async def _run(self) -> None:
        while True:
            await self._due.wait()
            self._due.clear()
            try:
                await self._tick()
            except Exception:
                logger.exception("Periodic tick failed", extra={"loop": self._name})


__all__ = ["PeriodicTask"]
