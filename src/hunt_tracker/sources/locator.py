"""Locating the attributes file and its companion log."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class AttributesLocator(Protocol):
    async def locate(self) -> Path:
        ...


class FileLocator:
    """Waits for an explicitly configured attributes file to exist."""

    def __init__(self, path: Path, *, retry_interval: float = 5.0) -> None:
        self._path = Path(path)
        self._retry_interval = retry_interval

    @property
    def path(self) -> Path:
        return self._path

    async def locate(self) -> Path:
        warned = False
        while not await asyncio.to_thread(self._path.is_file):
            if not warned:
                logger.info("Waiting for attributes file", extra={"path": str(self._path)})
                warned = True
            await asyncio.sleep(self._retry_interval)
        return self._path


def game_log_path(attributes: Path, log_file_name: str = "game.log") -> Path:
    """Return the log file that lives three directories above ``attributes``."""

    return Path(attributes).parent.parent.parent / log_file_name


__all__ = ["AttributesLocator", "FileLocator", "game_log_path"]
