from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, Mapping

import pytest

from hunt_tracker.sources.snapshot import ParsedSnapshot
from hunt_tracker.storage import MatchHeader, MatchRecord, PlayerRecord


class StubStore:
    """In-memory stats store that records every call."""

    def __init__(self) -> None:
        self.matches: list[MatchHeader] = []
        self.players: list[PlayerRecord] = []
        self.calls: list[tuple[str, Any]] = []
        self.reject = False
        self.me: int | None = None
        self.me_error: Exception | None = None

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    async def get_last_match(self) -> MatchHeader | None:
        self.calls.append(("get_last_match", None))
        return self.matches[-1] if self.matches else None

    async def get_match_players(self, match_id: int) -> list[PlayerRecord]:
        self.calls.append(("get_match_players", match_id))
        return [replace(player) for player in self.players if player.match_id == match_id]

    async def get_own_stats(self) -> dict[str, Any]:
        self.calls.append(("get_own_stats", None))
        return {"matches": len(self.matches)}

    async def get_team_stats(self, team_id: str) -> dict[str, Any]:
        self.calls.append(("get_team_stats", team_id))
        played = sum(1 for header in self.matches if header.team_id == team_id)
        return {"team_id": team_id, "matches": played}

    async def get_enemies_stats(self, enemies: Mapping[int, PlayerRecord]) -> dict[int, Any]:
        self.calls.append(("get_enemies_stats", sorted(enemies)))
        return {profile_id: {"profile_id": profile_id} for profile_id in enemies}

    async def calculate_most_played_teammate(self, profile_ids: Iterable[int]) -> int | None:
        ids = list(profile_ids)
        self.calls.append(("calculate_most_played_teammate", ids))
        if self.me_error is not None:
            raise self.me_error
        return self.me if self.me in ids else None

    async def insert_match(self, header: MatchHeader) -> int:
        self.calls.append(("insert_match", header.signature))
        if self.reject:
            return 0
        stored = replace(header, id=len(self.matches) + 1)
        self.matches.append(stored)
        return stored.id

    async def insert_players(self, players: list[PlayerRecord]) -> None:
        self.calls.append(("insert_players", len(players)))
        self.players.extend(replace(player) for player in players)

    async def outdate_all(self) -> None:
        self.calls.append(("outdate_all", None))
        for header in self.matches:
            header.outdated = True

    async def outdate_team(self, team_id: str) -> None:
        self.calls.append(("outdate_team", team_id))
        for header in self.matches:
            if header.team_id == team_id:
                header.team_outdated = True


def make_players() -> list[PlayerRecord]:
    return [
        PlayerRecord(profile_id=1, teammate=True, name="me"),
        PlayerRecord(profile_id=2, teammate=True, name="buddy", killed_me=1),
        PlayerRecord(profile_id=10, teammate=False, name="hunter", killed_by_me=1),
        PlayerRecord(profile_id=11, teammate=False, name="bystander"),
        PlayerRecord(profile_id=12, teammate=False, name="sniper", downed_me=2),
    ]


def make_record(signature: str = "sig-1", team_id: str = "team-a") -> MatchRecord:
    return MatchRecord(header=MatchHeader(signature=signature, team_id=team_id), players=make_players())


def make_snapshot(signature: str = "sig-1", team_id: str = "team-a") -> ParsedSnapshot:
    return ParsedSnapshot.model_validate(
        {
            "header": {"signature": signature, "team_id": team_id, "map": "creek"},
            "players": [
                {"profile_id": 1, "teammate": True, "name": "me"},
                {"profile_id": 10, "teammate": False, "name": "hunter", "killed_by_me": 1},
            ],
        }
    )


@pytest.fixture
def store() -> StubStore:
    return StubStore()


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def snapshot_factory():
    return make_snapshot
