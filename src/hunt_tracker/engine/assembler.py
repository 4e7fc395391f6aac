"""Builds and publishes the current stats bundle."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from ..storage import MatchRecord, PlayerRecord, StatsStore
from .channels import ReplayChannel

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StatsBundle:
    """Latest match with rolling aggregates and the snapshot it replaced."""

    match: MatchRecord
    me: PlayerRecord | None
    team_stats: Any
    own_stats: Any
    enemy_stats: list[Any] = field(default_factory=list)
    previous_team_stats: Any = None
    previous_own_stats: Any = None
    previous_match: MatchRecord | None = None

    @property
    def team_id(self) -> str:
        return self.match.header.team_id


def select_enemies(players: Iterable[PlayerRecord]) -> dict[int, PlayerRecord]:
    """Non-teammates who killed or downed us, or were killed or downed by us.

    Keyed by profile id; a repeated profile keeps its last row.
    """

    return {
        player.profile_id: player
        for player in players
        if not player.teammate and player.has_mutual_kill_downs
    }


class BundleAssembler:
    """Owns the current bundle; every update is serialized behind one lock."""

    def __init__(self, store: StatsStore, channel: ReplayChannel[StatsBundle | None]) -> None:
        self._store = store
        self._channel = channel
        self._lock = asyncio.Lock()
        self._current: StatsBundle | None = None

    @property
    def current(self) -> StatsBundle | None:
        return self._current

    async def save_match(self, record: MatchRecord) -> StatsBundle | None:
        """Persist a freshly detected match and publish the resulting bundle.

        Returns None, leaving the current bundle alone, when the store rejects
        the match.
        """

        async with self._lock:
            last = self._current
            team_id = record.header.team_id

            if last is not None and last.team_id == team_id:
                previous_team_stats = last.team_stats
            else:
                previous_team_stats = await self._store.get_team_stats(team_id)

            match_id = await self._store.insert_match(record.header)
            if match_id == 0:
                logger.debug(
                    "Match rejected by store",
                    extra={"signature": record.header.signature, "team_id": team_id},
                )
                return None
            record.header.id = match_id

            for player in record.players:
                player.match_id = match_id
                player.team_id = team_id
            await self._store.insert_players(record.players)

            bundle = await self._build(
                record,
                previous_team_stats=previous_team_stats,
                previous_own_stats=last.own_stats if last is not None else None,
                previous_match=last.match if last is not None else None,
            )
            self._swap(bundle)
            logger.info(
                "Match saved",
                extra={"match_id": match_id, "team_id": team_id, "players": len(record.players)},
            )
            return bundle

    async def refresh(self) -> StatsBundle | None:
        """Rebuild the bundle from the latest stored match, dropping previous-* state."""

        async with self._lock:
            return await self._refresh()

    async def invalidate_all(self) -> StatsBundle | None:
        async with self._lock:
            await self._store.outdate_all()
            return await self._refresh()

    async def invalidate_team(self, team_id: str) -> StatsBundle | None:
        async with self._lock:
            await self._store.outdate_team(team_id)
            return await self._refresh()

    async def _refresh(self) -> StatsBundle | None:
        header = await self._store.get_last_match()
        if header is None:
            self._swap(None)
            return None

        players = await self._store.get_match_players(header.id)
        bundle = await self._build(MatchRecord(header=header, players=list(players)))
        self._swap(bundle)
        return bundle

    async def _build(
        self,
        record: MatchRecord,
        *,
        previous_team_stats: Any = None,
        previous_own_stats: Any = None,
        previous_match: MatchRecord | None = None,
    ) -> StatsBundle:
        enemies_stats = await self._store.get_enemies_stats(select_enemies(record.players))
        me = await self._resolve_me(record.players)
        own_stats = await self._store.get_own_stats()
        team_stats = await self._store.get_team_stats(record.header.team_id)

        return StatsBundle(
            match=record,
            me=me,
            team_stats=team_stats,
            own_stats=own_stats,
            enemy_stats=list(enemies_stats.values()),
            previous_team_stats=previous_team_stats,
            previous_own_stats=previous_own_stats,
            previous_match=previous_match,
        )

    async def _resolve_me(self, players: list[PlayerRecord]) -> PlayerRecord | None:
        teammates = [player.profile_id for player in players if player.teammate]
        try:
            profile_id = await self._store.calculate_most_played_teammate(teammates)
        except Exception as exc:  # identity is best-effort
            logger.warning("Could not resolve local player", extra={"error": str(exc)})
            return None
        if profile_id is None:
            return None
        return next((player for player in players if player.profile_id == profile_id), None)

    def _swap(self, bundle: StatsBundle | None) -> None:
        self._current = bundle
        self._channel.publish(bundle)


__all__ = ["BundleAssembler", "StatsBundle", "select_enemies"]
