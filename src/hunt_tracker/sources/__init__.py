"""Detection of new matches and map loads from the game's files."""

from .dedup import Deduplicator
from .events import (
    DetectedEvent,
    EventDecodeError,
    EventSink,
    MapChanged,
    NewMatch,
    NoNewMatch,
    SourceFound,
    decode_event,
    encode_event,
)
from .inprocess import EventSource, InProcessEventSource
from .isolated import IsolatedEventSource
from .locator import AttributesLocator, FileLocator, game_log_path
from .periodic import PeriodicTask
from .poller import AttributesPoller
from .snapshot import (
    EntityConverter,
    JsonSnapshotParser,
    ParsedSnapshot,
    SnapshotConverter,
    SnapshotParseError,
    SnapshotParser,
)
from .tailer import LogTailer

__all__ = [
    "AttributesLocator",
    "AttributesPoller",
    "Deduplicator",
    "DetectedEvent",
    "EntityConverter",
    "EventDecodeError",
    "EventSink",
    "EventSource",
    "FileLocator",
    "InProcessEventSource",
    "IsolatedEventSource",
    "JsonSnapshotParser",
    "LogTailer",
    "MapChanged",
    "NewMatch",
    "NoNewMatch",
    "ParsedSnapshot",
    "PeriodicTask",
    "SnapshotConverter",
    "SnapshotParseError",
    "SnapshotParser",
    "SourceFound",
    "decode_event",
    "encode_event",
    "game_log_path",
]
