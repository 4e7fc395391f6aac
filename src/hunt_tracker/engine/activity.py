"""Last-activity bookkeeping shared by the router and the watchdog."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable


class ActivityClock:
    """Timestamp of the last successful detection cycle.

    ``found`` turns true once the attributes file has been located and stays
    true across session restarts.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.monotonic
        self._last = self._clock()
        self._found_path: Path | None = None

    @property
    def found(self) -> bool:
        return self._found_path is not None

    @property
    def found_path(self) -> Path | None:
        return self._found_path

    @property
    def last_activity(self) -> float:
        return self._last

    def mark_found(self, path: Path) -> None:
        self._found_path = Path(path)
        self.touch()

    def touch(self) -> None:
        self._last = self._clock()

    def idle_for(self) -> float:
        return self._clock() - self._last


__all__ = ["ActivityClock"]
