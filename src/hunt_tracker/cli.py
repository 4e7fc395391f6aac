"""Command-line bootstrap for the hunt tracker."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import IO

from . import __version__
from .config import TrackerConfigError, TrackerSettings, get_settings, load_component
from .cues import LoggingCuePlayer
from .engine import StatsBundle, Subscription, TrackerEngine

logger = logging.getLogger(__name__)


def configure_logging(level: str, stream: IO[str] | None = None) -> None:
    """Configure root logging for the tracker."""

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        stream=stream,
    )


def create_engine(settings: TrackerSettings) -> TrackerEngine:
    """Instantiate the engine with collaborators named in the settings."""

    if not settings.store:
        raise TrackerConfigError("HUNT_STORE must name a stats store factory (module:attr)")
    store = load_component(settings.store, setting="HUNT_STORE")
    return TrackerEngine.from_settings(settings, store, cue_player=LoggingCuePlayer())


async def _log_bundles(subscription: Subscription[StatsBundle | None]) -> None:
    async for bundle in subscription:
        if bundle is None:
            logger.info("No match recorded yet")
            continue
        logger.info(
            "Bundle published",
            extra={
                "match_id": bundle.match.header.id,
                "team_id": bundle.team_id,
                "me": bundle.me.profile_id if bundle.me is not None else None,
                "enemies": len(bundle.enemy_stats),
            },
        )


async def _log_maps(subscription: Subscription[str]) -> None:
    async for level_name in subscription:
        logger.info("Map changed", extra={"level_name": level_name})


async def run(engine: TrackerEngine) -> None:
    await engine.start()
    try:
        await asyncio.gather(_log_bundles(engine.bundles()), _log_maps(engine.maps()))
    finally:
        await engine.stop()


def main() -> None:
    """Entry point for running the tracker via CLI."""

    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        engine = create_engine(settings)
    except TrackerConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        raise SystemExit(2)

    logger.info(
        "Launching hunt tracker",
        extra={
            "version": __version__,
            "log_level": settings.log_level,
            "isolated": settings.isolated,
            "listen_game_log": settings.listen_game_log,
        },
    )
    try:
        asyncio.run(run(engine))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
