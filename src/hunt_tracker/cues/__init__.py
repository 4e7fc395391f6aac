"""Map cue tables and playback."""

from .loader import CueLoadError, CueLoader, load_cues
from .models import CueTable, DEFAULT_CUES, map_key
from .players import CuePlayer, LoggingCuePlayer

__all__ = [
    "CueLoadError",
    "CueLoader",
    "CuePlayer",
    "CueTable",
    "DEFAULT_CUES",
    "LoggingCuePlayer",
    "load_cues",
    "map_key",
]
