"""Cue playback collaborators."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class CuePlayer(Protocol):
    def play(self, asset: str) -> None:
        ...


class LoggingCuePlayer:
    """Stand-in player for headless runs; records what would have played."""

    def __init__(self) -> None:
        self.played: list[str] = []

    def play(self, asset: str) -> None:
        self.played.append(asset)
        logger.info("Map cue", extra={"asset": asset})


__all__ = ["CuePlayer", "LoggingCuePlayer"]
