"""Events produced by the attribute poller and log tailer."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Union

from pydantic import ValidationError

from .snapshot import ParsedSnapshot


class EventDecodeError(ValueError):
    """Raised when a worker line is not a valid encoded event."""


@dataclass(frozen=True, slots=True)
class SourceFound:
    path: Path


@dataclass(frozen=True, slots=True)
class NewMatch:
    snapshot: ParsedSnapshot


@dataclass(frozen=True, slots=True)
class NoNewMatch:
    pass


@dataclass(frozen=True, slots=True)
class MapChanged:
    level_name: str


DetectedEvent = Union[SourceFound, NewMatch, NoNewMatch, MapChanged]

EventSink = Callable[[DetectedEvent], None]


def encode_event(event: DetectedEvent) -> str:
    """Serialize an event as a single JSON line for the worker channel."""

    if isinstance(event, SourceFound):
        payload = {"type": "source_found", "path": str(event.path)}
    elif isinstance(event, NewMatch):
        payload = {"type": "new_match", "snapshot": event.snapshot.model_dump(mode="json")}
    elif isinstance(event, NoNewMatch):
        payload = {"type": "no_new_match"}
    elif isinstance(event, MapChanged):
        payload = {"type": "map_changed", "level_name": event.level_name}
    else:
        raise TypeError(f"Unsupported event type: {type(event).__name__}")
    return json.dumps(payload)


def decode_event(line: str | bytes) -> DetectedEvent:
    """Parse one worker line back into an event."""

    try:
        payload = json.loads(line)
    except json.JSONDecodeError as exc:
        raise EventDecodeError(f"Malformed event line: {exc}") from exc
    if not isinstance(payload, dict):
        raise EventDecodeError("Event line must be a JSON object")

    kind = payload.get("type")
    try:
        if kind == "source_found":
            return SourceFound(Path(payload["path"]))
        if kind == "new_match":
            return NewMatch(ParsedSnapshot.model_validate(payload["snapshot"]))
        if kind == "no_new_match":
            return NoNewMatch()
        if kind == "map_changed":
            return MapChanged(str(payload["level_name"]))
    except (KeyError, ValidationError) as exc:
        raise EventDecodeError(f"Incomplete '{kind}' event: {exc}") from exc
    raise EventDecodeError(f"Unknown event type '{kind}'")


__all__ = [
    "DetectedEvent",
    "EventDecodeError",
    "EventSink",
    "MapChanged",
    "NewMatch",
    "NoNewMatch",
    "SourceFound",
    "decode_event",
    "encode_event",
]
