"""Storage abstractions for the hunt tracker."""

from .models import MatchHeader, MatchRecord, PlayerRecord
from .protocol import StatsStore

__all__ = [
    "MatchHeader",
    "MatchRecord",
    "PlayerRecord",
    "StatsStore",
]
