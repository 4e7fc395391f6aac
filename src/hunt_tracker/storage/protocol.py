"""Protocol for the statistics store the tracker persists into."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol

from .models import MatchHeader, PlayerRecord


class StatsStore(Protocol):
    """Minimal storage API used by the bundle assembler.

    Stats values are opaque to the tracker; whatever the store returns is
    handed to subscribers untouched.
    """

    async def get_last_match(self) -> MatchHeader | None:
        ...

    async def get_match_players(self, match_id: int) -> list[PlayerRecord]:
        ...

    async def get_own_stats(self) -> Any:
        ...

    async def get_team_stats(self, team_id: str) -> Any:
        ...

    async def get_enemies_stats(self, enemies: Mapping[int, PlayerRecord]) -> Mapping[int, Any]:
        ...

    async def calculate_most_played_teammate(self, profile_ids: Iterable[int]) -> int | None:
        ...

    async def insert_match(self, header: MatchHeader) -> int:
        """Persist ``header`` and return its id, or 0 when the store rejects it."""
        ...

    async def insert_players(self, players: list[PlayerRecord]) -> None:
        ...

    async def outdate_all(self) -> None:
        ...

    async def outdate_team(self, team_id: str) -> None:
        ...


__all__ = ["StatsStore"]
