"""Event source that runs detection inside a separate worker process."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from .events import EventDecodeError, EventSink, SourceFound, decode_event
from .locator import AttributesLocator, game_log_path
from .utils import worker_environment

logger = logging.getLogger(__name__)

_LINE_LIMIT = 4 * 1024 * 1024


class IsolatedEventSource:
    """Spawn ``python -m hunt_tracker.worker`` and relay its events.

    The worker writes one JSON event per line on stdout. Stopping the source
    kills the process outright, so a read wedged inside the worker cannot hold
    up a restart.
    """

    def __init__(
        self,
        locator: AttributesLocator,
        *,
        parser_path: str,
        poll_interval: float = 30.0,
        tail_interval: float = 1.0,
        read_timeout: float = 10.0,
        listen_game_log: bool = True,
        log_file_name: str = "game.log",
        log_level: str = "WARNING",
        retry_interval: float = 5.0,
        executable: Path | None = None,
    ) -> None:
        self._locator = locator
        self._parser_path = parser_path
        self._poll_interval = poll_interval
        self._tail_interval = tail_interval
        self._read_timeout = read_timeout
        self._listen_game_log = listen_game_log
        self._log_file_name = log_file_name
        self._log_level = log_level
        self._retry_interval = retry_interval
        self._executable = Path(executable) if executable is not None else Path(sys.executable)
        self._task: asyncio.Task[None] | None = None
        self._process: asyncio.subprocess.Process | None = None

    @property
    def process(self) -> asyncio.subprocess.Process | None:
        return self._process

    def build_args(self, attributes: Path) -> list[str]:
        args = [
            str(self._executable),
            "-m",
            "hunt_tracker.worker",
            "--attributes",
            str(attributes),
            "--parser",
            self._parser_path,
            "--poll-interval",
            str(self._poll_interval),
            "--tail-interval",
            str(self._tail_interval),
            "--read-timeout",
            str(self._read_timeout),
            "--log-level",
            self._log_level,
        ]
        if self._listen_game_log:
            args.extend(["--log", str(game_log_path(attributes, self._log_file_name))])
        return args

    def start(self, sink: EventSink) -> None:
        self._task = asyncio.create_task(self._run(sink), name="isolated-source")

    def stop(self) -> None:
        self._kill()
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _kill(self) -> None:
        process, self._process = self._process, None
        if process is not None and process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:  # pragma: no cover - exited concurrently
                pass

    async def _run(self, sink: EventSink) -> None:
        while True:
            try:
                await self._relay(sink)
            except Exception:
                logger.exception(
                    "Tracking worker failed, retrying",
                    extra={"retry_in": self._retry_interval},
                )
                self._kill()
                await asyncio.sleep(self._retry_interval)
            else:
                return

    async def _relay(self, sink: EventSink) -> None:
        attributes = await self._locator.locate()
        logger.info("Attributes file found", extra={"path": str(attributes)})
        sink(SourceFound(attributes))

        process = await asyncio.create_subprocess_exec(
            *self.build_args(attributes),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            env=worker_environment(),
            limit=_LINE_LIMIT,
        )
        self._process = process
        logger.info("Tracking worker started", extra={"pid": process.pid})

        assert process.stdout is not None
        async for raw in process.stdout:
            line = raw.decode("utf-8", errors="replace").strip()
            if not line:
                continue
            try:
                event = decode_event(line)
            except EventDecodeError as exc:
                logger.warning("Discarding worker output", extra={"error": str(exc)})
                continue
            sink(event)

        returncode = await process.wait()
        logger.warning("Tracking worker exited", extra={"returncode": returncode})


__all__ = ["IsolatedEventSource"]
