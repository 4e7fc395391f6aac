"""Single intake for detected events."""

from __future__ import annotations

import asyncio
import logging

from ..cues import CuePlayer, CueTable
from ..sources.events import DetectedEvent, MapChanged, NewMatch, NoNewMatch, SourceFound
from ..sources.snapshot import EntityConverter
from ..storage import StatsStore
from .activity import ActivityClock
from .assembler import BundleAssembler
from .channels import BroadcastChannel

logger = logging.getLogger(__name__)


class EventRouter:
    """Consumes the intake queue in order and dispatches each event."""

    def __init__(
        self,
        *,
        store: StatsStore,
        converter: EntityConverter,
        assembler: BundleAssembler,
        activity: ActivityClock,
        map_channel: BroadcastChannel[str],
        cues: CueTable,
        cue_player: CuePlayer | None = None,
    ) -> None:
        self._store = store
        self._converter = converter
        self._assembler = assembler
        self._activity = activity
        self._map_channel = map_channel
        self._cues = cues
        self._cue_player = cue_player
        self._intake: asyncio.Queue[DetectedEvent] = asyncio.Queue()

    def submit(self, event: DetectedEvent) -> None:
        """Sink handed to event sources."""

        self._intake.put_nowait(event)

    def pending(self) -> int:
        return self._intake.qsize()

    async def run(self) -> None:
        while True:
            event = await self._intake.get()
            try:
                await self.dispatch(event)
            except Exception:
                logger.exception("Failed to handle event", extra={"event": type(event).__name__})
            finally:
                self._intake.task_done()

    async def drain(self) -> None:
        """Wait until every submitted event has been handled."""

        await self._intake.join()

    async def dispatch(self, event: DetectedEvent) -> None:
        match event:
            case SourceFound(path=path):
                self._activity.mark_found(path)
            case NewMatch(snapshot=snapshot):
                self._activity.touch()
                record = await self._converter.to_entity(
                    snapshot, self._store, outdated=False, team_outdated=False
                )
                await self._assembler.save_match(record)
            case NoNewMatch():
                self._activity.touch()
            case MapChanged(level_name=level_name):
                self._map_channel.publish(level_name)
                self._play_cue(level_name)
            case _:
                raise TypeError(f"Unsupported event type: {type(event).__name__}")

    def _play_cue(self, level_name: str) -> None:
        if self._cue_player is None:
            return
        asset = self._cues.resolve(level_name)
        if asset is None:
            return
        try:
            self._cue_player.play(asset)
        except Exception as exc:  # playback must not stall the intake
            logger.warning("Map cue failed", extra={"asset": asset, "error": str(exc)})


__all__ = ["EventRouter"]
