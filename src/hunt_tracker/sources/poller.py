"""Attributes file poller."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .dedup import Deduplicator
from .events import EventSink, NewMatch, NoNewMatch
from .snapshot import ParsedSnapshot, SnapshotParser

logger = logging.getLogger(__name__)


class AttributesPoller:
    """Re-reads the attributes file and reports whether it holds a new match."""

    def __init__(
        self,
        path: Path,
        parser: SnapshotParser,
        *,
        read_timeout: float = 10.0,
        deduplicator: Deduplicator | None = None,
    ) -> None:
        self._path = Path(path)
        self._parser = parser
        self._read_timeout = read_timeout
        self._dedup = deduplicator or Deduplicator()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def deduplicator(self) -> Deduplicator:
        return self._dedup

    async def poll(self) -> NewMatch | NoNewMatch | None:
        """Read and classify the current file; None when this tick failed."""

        snapshot = await self._read_snapshot()
        if snapshot is None:
            return None
        if self._dedup.is_new(snapshot.signature):
            logger.info(
                "New match detected",
                extra={"signature": snapshot.signature, "team_id": snapshot.header.team_id},
            )
            return NewMatch(snapshot)
        return NoNewMatch()

    async def tick(self, sink: EventSink) -> None:
        event = await self.poll()
        if event is not None:
            sink(event)

    async def _read_snapshot(self) -> ParsedSnapshot | None:
        try:
            data = await asyncio.wait_for(
                asyncio.to_thread(self._path.read_bytes), timeout=self._read_timeout
            )
        except (OSError, asyncio.TimeoutError) as exc:
            logger.debug("Attributes read skipped", extra={"path": str(self._path), "error": str(exc)})
            return None

        try:
            return await asyncio.to_thread(self._parser.parse, data)
        except Exception as exc:  # partial writes surface as arbitrary parser errors
            logger.debug("Attributes parse skipped", extra={"path": str(self._path), "error": str(exc)})
            return None


__all__ = ["AttributesPoller"]
