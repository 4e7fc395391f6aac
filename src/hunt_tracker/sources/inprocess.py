"""Event sources running the poller and tailer on the caller's event loop."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol

from .events import EventSink, SourceFound
from .locator import AttributesLocator, game_log_path
from .periodic import PeriodicTask
from .poller import AttributesPoller
from .snapshot import SnapshotParser
from .tailer import LogTailer

logger = logging.getLogger(__name__)


class EventSource(Protocol):
    """Produces detected events into a sink until stopped."""

    def start(self, sink: EventSink) -> None:
        ...

    def stop(self) -> None:
        ...


async def start_loops(
    attributes: Path,
    parser: SnapshotParser,
    sink: EventSink,
    *,
    poll_interval: float,
    tail_interval: float,
    read_timeout: float,
    log_path: Path | None,
) -> list[PeriodicTask]:
    """Create and start the poller loop and, when ``log_path`` is set, the tailer loop."""

    poller = AttributesPoller(attributes, parser, read_timeout=read_timeout)
    loops = [PeriodicTask("attributes-poller", poll_interval, lambda: poller.tick(sink))]

    if log_path is not None:
        tailer = LogTailer(log_path, read_timeout=read_timeout)
        await tailer.prime()
        loops.append(PeriodicTask("log-tailer", tail_interval, lambda: tailer.tick(sink)))

    for loop in loops:
        loop.start()
    return loops


class InProcessEventSource:
    """Runs detection as lightweight tasks sharing the engine's event loop."""

    def __init__(
        self,
        locator: AttributesLocator,
        parser: SnapshotParser,
        *,
        poll_interval: float = 30.0,
        tail_interval: float = 1.0,
        read_timeout: float = 10.0,
        listen_game_log: bool = True,
        log_file_name: str = "game.log",
        retry_interval: float = 5.0,
    ) -> None:
        self._locator = locator
        self._parser = parser
        self._poll_interval = poll_interval
        self._tail_interval = tail_interval
        self._read_timeout = read_timeout
        self._listen_game_log = listen_game_log
        self._log_file_name = log_file_name
        self._retry_interval = retry_interval
        self._task: asyncio.Task[None] | None = None
        self._loops: list[PeriodicTask] = []

    @property
    def loops(self) -> list[PeriodicTask]:
        return list(self._loops)

    def start(self, sink: EventSink) -> None:
        self._task = asyncio.create_task(self._run(sink), name="in-process-source")

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
        for loop in self._loops:
            loop.stop()
        self._loops = []

    async def _run(self, sink: EventSink) -> None:
        while True:
            try:
                await self._launch(sink)
            except Exception:
                logger.exception(
                    "Event source failed to start, retrying",
                    extra={"retry_in": self._retry_interval},
                )
                await asyncio.sleep(self._retry_interval)
            else:
                return

    async def _launch(self, sink: EventSink) -> None:
        attributes = await self._locator.locate()
        logger.info("Attributes file found", extra={"path": str(attributes)})
        sink(SourceFound(attributes))

        log_path = (
            game_log_path(attributes, self._log_file_name) if self._listen_game_log else None
        )
        self._loops = await start_loops(
            attributes,
            self._parser,
            sink,
            poll_interval=self._poll_interval,
            tail_interval=self._tail_interval,
            read_timeout=self._read_timeout,
            log_path=log_path,
        )


__all__ = ["EventSource", "InProcessEventSource", "start_loops"]
