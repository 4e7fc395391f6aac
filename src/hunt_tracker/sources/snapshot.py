"""Parsed attribute snapshots and the collaborators that produce and convert them."""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..storage import MatchHeader, MatchRecord, PlayerRecord, StatsStore


class SnapshotParseError(RuntimeError):
    """Raised when attribute bytes cannot be turned into a snapshot."""


class SnapshotHeader(BaseModel):
    """Identity of one attributes snapshot."""

    model_config = ConfigDict(extra="allow")

    signature: str = Field(..., description="Opaque identifier used for deduplication.")
    team_id: str = Field(..., description="Identity of the local team in this match.")

    @field_validator("signature")
    @classmethod
    def _require_signature(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Snapshot signature must not be empty")
        return value


class SnapshotPlayer(BaseModel):
    model_config = ConfigDict(extra="allow")

    profile_id: int
    teammate: bool = False
    name: str = ""
    killed_by_me: int = 0
    killed_me: int = 0
    downed_by_me: int = 0
    downed_me: int = 0


class ParsedSnapshot(BaseModel):
    """Structured match header and players extracted from the attributes file."""

    header: SnapshotHeader
    players: list[SnapshotPlayer] = Field(default_factory=list)

    @property
    def signature(self) -> str:
        return self.header.signature


class SnapshotParser(Protocol):
    def parse(self, data: bytes) -> ParsedSnapshot:
        ...


class EntityConverter(Protocol):
    async def to_entity(
        self,
        snapshot: ParsedSnapshot,
        store: StatsStore,
        *,
        outdated: bool,
        team_outdated: bool,
    ) -> MatchRecord:
        ...


class JsonSnapshotParser:
    """Reads snapshots stored as JSON documents.

    The game's own attribute format is handled by a dedicated parser; this one
    serves fixtures and replayed captures.
    """

    def parse(self, data: bytes) -> ParsedSnapshot:
        try:
            return ParsedSnapshot.model_validate_json(data)
        except ValidationError as exc:
            raise SnapshotParseError(f"Invalid attributes snapshot: {exc}") from exc


class SnapshotConverter:
    """Maps snapshot fields one-to-one onto storage records."""

    async def to_entity(
        self,
        snapshot: ParsedSnapshot,
        store: StatsStore,
        *,
        outdated: bool,
        team_outdated: bool,
    ) -> MatchRecord:
        extra: dict[str, Any] = dict(snapshot.header.model_extra or {})
        header = MatchHeader(
            signature=snapshot.header.signature,
            team_id=snapshot.header.team_id,
            outdated=outdated,
            team_outdated=team_outdated,
            extra=extra,
        )
        players = [
            PlayerRecord(
                profile_id=player.profile_id,
                teammate=player.teammate,
                name=player.name,
                killed_by_me=player.killed_by_me,
                killed_me=player.killed_me,
                downed_by_me=player.downed_by_me,
                downed_me=player.downed_me,
                team_id=header.team_id,
            )
            for player in snapshot.players
        ]
        return MatchRecord(header=header, players=players)


__all__ = [
    "EntityConverter",
    "JsonSnapshotParser",
    "ParsedSnapshot",
    "SnapshotConverter",
    "SnapshotHeader",
    "SnapshotParseError",
    "SnapshotParser",
    "SnapshotPlayer",
]
