"""Lifecycle of the running event source."""

from __future__ import annotations

import enum
import logging
from typing import Callable

from ..sources.events import EventSink
from ..sources.inprocess import EventSource

logger = logging.getLogger(__name__)


class SessionState(str, enum.Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    RESTARTING = "restarting"


class TrackingSession:
    """Binds one event source to the engine sink and can replace it wholesale.

    Every start builds a fresh source from ``factory`` so dedup and cursor
    state never survive a restart.
    """

    def __init__(self, factory: Callable[[], EventSource], sink: EventSink) -> None:
        self._factory = factory
        self._sink = sink
        self._source: EventSource | None = None
        self._state = SessionState.NOT_STARTED
        self._restarts = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def source(self) -> EventSource | None:
        return self._source

    @property
    def restarts(self) -> int:
        return self._restarts

    def start(self) -> None:
        if self._state is SessionState.RUNNING:
            return
        self._source = self._factory()
        self._source.start(self._sink)
        self._state = SessionState.RUNNING

    def restart(self) -> None:
        """Abandon the current source without draining it and launch a new one."""

        self._state = SessionState.RESTARTING
        self._restarts += 1
        logger.warning("Restarting tracking session", extra={"restarts": self._restarts})
        self._teardown()
        self.start()

    def stop(self) -> None:
        self._teardown()
        self._state = SessionState.NOT_STARTED

    def _teardown(self) -> None:
        source, self._source = self._source, None
        if source is not None:
            source.stop()


__all__ = ["SessionState", "TrackingSession"]
