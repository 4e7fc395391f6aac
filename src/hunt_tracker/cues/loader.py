"""Reading map cue overrides from YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

import yaml
from pydantic import ValidationError

from .models import CueTable


class CueLoadError(RuntimeError):
    """Raised when a cue override file is not valid YAML or not a cue table."""


def _cue_files(directory: Path) -> Iterator[Path]:
    for pattern in ("*.yml", "*.yaml"):
        yield from sorted(directory.glob(pattern))


class CueLoader:
    """Overlays ``cues:`` tables found in cue directories onto the built-in sounds.

    A file looks like::

        cues:
          creek: sounds/creek.ogg
          lawson: sounds/lawson.ogg
    """

    def __init__(self, search_paths: Iterable[Path] | None = None) -> None:
        directories = (Path(path) for path in (search_paths or []))
        self._search_paths: list[Path] = [path for path in directories if path.exists()]

    @property
    def search_paths(self) -> list[Path]:
        return list(self._search_paths)

    def _read(self, path: Path) -> CueTable | None:
        try:
            document = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise CueLoadError(f"{path} is not valid YAML: {exc}") from exc
        if document is None:
            return None
        try:
            return CueTable.model_validate(document)
        except ValidationError as exc:
            raise CueLoadError(f"{path} does not describe a cue table: {exc}") from exc

    def load(self) -> CueTable:
        # a map named in several files takes the sound from the last one read
        table = CueTable.default()
        problems: list[str] = []

        for directory in self._search_paths:
            for path in _cue_files(directory):
                try:
                    overrides = self._read(path)
                except CueLoadError as exc:
                    problems.append(str(exc))
                    continue
                if overrides is not None:
                    table = table.merged(overrides)

        if problems:
            raise CueLoadError("; ".join(problems))
        return table


def load_cues(search_paths: Iterable[Path] | None = None) -> CueTable:
    """Built-in map sounds, overridden by any cue files under ``search_paths``."""

    return CueLoader(search_paths).load()


__all__ = ["CueLoadError", "CueLoader", "load_cues"]
