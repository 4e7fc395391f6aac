"""Stall detection for the tracking session."""

from __future__ import annotations

import logging

from ..sources.periodic import PeriodicTask
from .activity import ActivityClock
from .session import TrackingSession

logger = logging.getLogger(__name__)


class Watchdog:
    """Restarts the session when no detection cycle has completed for too long."""

    def __init__(
        self,
        session: TrackingSession,
        activity: ActivityClock,
        *,
        interval: float = 15.0,
        stall_threshold: float = 60.0,
    ) -> None:
        self._session = session
        self._activity = activity
        self._stall_threshold = stall_threshold
        self._loop = PeriodicTask("watchdog", interval, self._tick)

    @property
    def running(self) -> bool:
        return self._loop.running

    def start(self) -> None:
        self._loop.start()

    def stop(self) -> None:
        self._loop.stop()

    def check(self) -> bool:
        """Restart the session if it has stalled; return whether it did."""

        if not self._activity.found:
            return False
        idle = self._activity.idle_for()
        if idle <= self._stall_threshold:
            return False

        self._activity.touch()
        logger.warning(
            "Tracking stalled",
            extra={"idle_seconds": round(idle, 1), "threshold": self._stall_threshold},
        )
        self._session.restart()
        return True

    async def _tick(self) -> None:
        self.check()


__all__ = ["Watchdog"]
