"""Tracker engine: wires sources, router, assembler and channels together."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Callable

from ..config import TrackerConfigError, TrackerSettings, load_component
from ..cues import CuePlayer, CueTable, load_cues
from ..sources import (
    EntityConverter,
    EventSource,
    FileLocator,
    InProcessEventSource,
    IsolatedEventSource,
    SnapshotConverter,
    SnapshotParser,
)
from ..sources.locator import AttributesLocator
from ..storage import MatchRecord, StatsStore
from .activity import ActivityClock
from .assembler import BundleAssembler, StatsBundle
from .channels import BroadcastChannel, ReplayChannel, Subscription
from .router import EventRouter
from .session import TrackingSession
from .watchdog import Watchdog

logger = logging.getLogger(__name__)


class TrackerEngine:
    """Keeps the current stats bundle fresh while the game is running.

    ``source_factory`` builds a fresh event source for every session start.
    The watchdog only runs when ``watchdog`` is enabled, which is the case for
    isolated sources built from settings.
    """

    def __init__(
        self,
        store: StatsStore,
        source_factory: Callable[[], EventSource],
        *,
        converter: EntityConverter | None = None,
        cues: CueTable | None = None,
        cue_player: CuePlayer | None = None,
        watchdog: bool = False,
        watchdog_interval: float = 15.0,
        stall_threshold: float = 60.0,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._store = store
        self._bundle_channel: ReplayChannel[StatsBundle | None] = ReplayChannel(None)
        self._map_channel: BroadcastChannel[str] = BroadcastChannel()
        self._activity = ActivityClock(clock)
        self._assembler = BundleAssembler(store, self._bundle_channel)
        self._router = EventRouter(
            store=store,
            converter=converter or SnapshotConverter(),
            assembler=self._assembler,
            activity=self._activity,
            map_channel=self._map_channel,
            cues=cues if cues is not None else CueTable.default(),
            cue_player=cue_player,
        )
        self._session = TrackingSession(source_factory, self._router.submit)
        self._watchdog = (
            Watchdog(
                self._session,
                self._activity,
                interval=watchdog_interval,
                stall_threshold=stall_threshold,
            )
            if watchdog
            else None
        )
        self._router_task: asyncio.Task[None] | None = None

    @classmethod
    def from_settings(
        cls,
        settings: TrackerSettings,
        store: StatsStore,
        *,
        locator: AttributesLocator | None = None,
        parser: SnapshotParser | None = None,
        converter: EntityConverter | None = None,
        cue_player: CuePlayer | None = None,
    ) -> "TrackerEngine":
        if locator is None:
            if settings.attributes_path is None:
                raise TrackerConfigError("HUNT_ATTRIBUTES_PATH is required without a custom locator")
            locator = FileLocator(settings.attributes_path, retry_interval=settings.locate_interval)
        if converter is None:
            converter = load_component(settings.converter, setting="HUNT_CONVERTER")

        source_factory = build_source_factory(settings, locator, parser=parser)
        return cls(
            store,
            source_factory,
            converter=converter,
            cues=load_cues(settings.cue_paths),
            cue_player=cue_player,
            watchdog=settings.isolated,
            watchdog_interval=settings.watchdog_interval,
            stall_threshold=settings.stall_threshold,
        )

    @property
    def last_bundle(self) -> StatsBundle | None:
        return self._assembler.current

    @property
    def activity(self) -> ActivityClock:
        return self._activity

    @property
    def session(self) -> TrackingSession:
        return self._session

    @property
    def watchdog(self) -> Watchdog | None:
        return self._watchdog

    @property
    def router(self) -> EventRouter:
        return self._router

    def bundles(self) -> Subscription[StatsBundle | None]:
        """Current bundle (None when nothing is stored yet) followed by live updates."""

        return self._bundle_channel.subscribe()

    def maps(self) -> Subscription[str]:
        """Level names of maps loading from now on."""

        return self._map_channel.subscribe()

    async def start(self) -> None:
        await self._assembler.refresh()
        self._router_task = asyncio.create_task(self._router.run(), name="event-router")
        self._session.start()
        if self._watchdog is not None:
            self._watchdog.start()
        logger.info("Tracker engine started", extra={"watchdog": self._watchdog is not None})

    async def stop(self) -> None:
        if self._watchdog is not None:
            self._watchdog.stop()
        self._session.stop()
        if self._router_task is not None:
            self._router_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._router_task
            self._router_task = None
        self._bundle_channel.close()
        self._map_channel.close()
        logger.info("Tracker engine stopped")

    async def save_match(self, record: MatchRecord) -> StatsBundle | None:
        return await self._assembler.save_match(record)

    async def invalidate_matches(self) -> StatsBundle | None:
        return await self._assembler.invalidate_all()

    async def invalidate_team(self, team_id: str) -> StatsBundle | None:
        return await self._assembler.invalidate_team(team_id)


def build_source_factory(
    settings: TrackerSettings,
    locator: AttributesLocator,
    *,
    parser: SnapshotParser | None = None,
) -> Callable[[], EventSource]:
    """Return a factory for the event source selected by ``settings.isolated``."""

    if settings.isolated:
        if parser is not None:
            logger.warning("Custom parser ignored in isolated mode; the worker loads HUNT_PARSER")

        def isolated() -> EventSource:
            return IsolatedEventSource(
                locator,
                parser_path=settings.parser,
                poll_interval=settings.poll_interval,
                tail_interval=settings.tail_interval,
                read_timeout=settings.read_timeout,
                listen_game_log=settings.listen_game_log,
                log_file_name=settings.log_file_name,
                log_level=settings.log_level,
                retry_interval=settings.locate_interval,
            )

        return isolated

    resolved = parser or load_component(settings.parser, setting="HUNT_PARSER")

    def in_process() -> EventSource:
        return InProcessEventSource(
            locator,
            resolved,
            poll_interval=settings.poll_interval,
            tail_interval=settings.tail_interval,
            read_timeout=settings.read_timeout,
            listen_game_log=settings.listen_game_log,
            log_file_name=settings.log_file_name,
            retry_interval=settings.locate_interval,
        )

    return in_process


__all__ = ["TrackerEngine", "build_source_factory"]
