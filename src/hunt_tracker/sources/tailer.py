"""Incremental reader for the game log that spots map loads."""

from __future__ import annotations

import asyncio
import codecs
import logging
import re
from pathlib import Path

from .events import EventSink, MapChanged

logger = logging.getLogger(__name__)

MAP_MARKER = re.compile(r"(?<!\S)PrepareLevel\s+(\S+)")


def scan_map_markers(text: str) -> list[str]:
    """Return the level token following every ``PrepareLevel`` marker, in order."""

    return [match.group(1) for match in MAP_MARKER.finditer(text)]


def _decode_appended(data: bytes) -> tuple[str, int]:
    # A multi-byte character split across reads stays unconsumed until the next tick.
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    text = decoder.decode(data, final=False)
    pending, _ = decoder.getstate()
    return text, len(data) - len(pending)


class LogTailer:
    """Follows a growing log file from a byte cursor."""

    def __init__(self, path: Path, *, read_timeout: float = 10.0) -> None:
        self._path = Path(path)
        self._read_timeout = read_timeout
        self._cursor = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def cursor(self) -> int:
        return self._cursor

    async def prime(self) -> None:
        """Skip everything already in the file."""

        try:
            self._cursor = await self._run(self._length)
        except (OSError, asyncio.TimeoutError):
            self._cursor = 0
        logger.debug("Log tailer primed", extra={"path": str(self._path), "cursor": self._cursor})

    async def poll(self) -> list[MapChanged]:
        try:
            length = await self._run(self._length)
        except (OSError, asyncio.TimeoutError) as exc:
            logger.debug("Log length unavailable", extra={"path": str(self._path), "error": str(exc)})
            return []

        if length == self._cursor:
            return []
        if length < self._cursor:
            logger.info(
                "Log file truncated, rewinding",
                extra={"path": str(self._path), "cursor": self._cursor, "length": length},
            )
            self._cursor = 0
            return []

        start = self._cursor
        try:
            data = await self._run(self._read_range, start, length)
        except (OSError, asyncio.TimeoutError) as exc:
            logger.debug("Log read skipped", extra={"path": str(self._path), "error": str(exc)})
            return []

        text, consumed = _decode_appended(data)
        self._cursor = start + consumed
        return [MapChanged(level) for level in scan_map_markers(text)]

    async def tick(self, sink: EventSink) -> None:
        for event in await self.poll():
            logger.info("Map loading", extra={"level_name": event.level_name})
            sink(event)

    async def _run(self, func, *args):
        return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=self._read_timeout)

    def _length(self) -> int:
        return self._path.stat().st_size

    def _read_range(self, start: int, end: int) -> bytes:
        with self._path.open("rb") as handle:
            handle.seek(start)
            return handle.read(end - start)


__all__ = ["LogTailer", "MAP_MARKER", "scan_map_markers"]
