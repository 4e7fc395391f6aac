"""Data models for persisted matches and player rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class MatchHeader:
    signature: str
    team_id: str
    id: int = 0
    outdated: bool = False
    team_outdated: bool = False
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class PlayerRecord:
    profile_id: int
    teammate: bool
    name: str = ""
    killed_by_me: int = 0
    killed_me: int = 0
    downed_by_me: int = 0
    downed_me: int = 0
    match_id: int = 0
    team_id: str = ""

    @property
    def has_mutual_kill_downs(self) -> bool:
        return (
            self.killed_by_me > 0
            or self.killed_me > 0
            or self.downed_by_me > 0
            or self.downed_me > 0
        )


@dataclass(slots=True)
class MatchRecord:
    """A match header together with its ordered player rows."""

    header: MatchHeader
    players: list[PlayerRecord] = field(default_factory=list)

    @property
    def team_id(self) -> str:
        return self.header.team_id


__all__ = ["MatchHeader", "MatchRecord", "PlayerRecord"]
