"""Tracking worker process: polls files and prints events as JSON lines."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .cli import configure_logging
from .config import load_component
from .sources.events import DetectedEvent, encode_event
from .sources.inprocess import start_loops
from .sources.snapshot import SnapshotParser

logger = logging.getLogger(__name__)


def write_event(event: DetectedEvent) -> None:
    sys.stdout.write(encode_event(event) + "\n")
    sys.stdout.flush()


async def run_worker(args: argparse.Namespace) -> None:
    parser: SnapshotParser = load_component(args.parser, setting="--parser")
    loops = await start_loops(
        Path(args.attributes),
        parser,
        write_event,
        poll_interval=args.poll_interval,
        tail_interval=args.tail_interval,
        read_timeout=args.read_timeout,
        log_path=Path(args.log) if args.log else None,
    )
    logger.info(
        "Worker loops running",
        extra={"attributes": args.attributes, "log": args.log, "loops": [loop.name for loop in loops]},
    )
    try:
        await asyncio.Event().wait()
    finally:
        for loop in loops:
            loop.stop()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Watch the attributes file and game log, emitting events on stdout."
    )
    parser.add_argument("--attributes", required=True, help="Path to the attributes file")
    parser.add_argument("--log", default=None, help="Game log to tail for map loads")
    parser.add_argument(
        "--parser",
        default="hunt_tracker.sources.snapshot:JsonSnapshotParser",
        help="Import path of the snapshot parser factory (module:attr)",
    )
    parser.add_argument("--poll-interval", type=float, default=30.0)
    parser.add_argument("--tail-interval", type=float, default=1.0)
    parser.add_argument("--read-timeout", type=float, default=10.0)
    parser.add_argument("--log-level", default="WARNING")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level.upper(), stream=sys.stderr)
    try:
        asyncio.run(run_worker(args))
    except KeyboardInterrupt:  # pragma: no cover - interactive use
        pass


if __name__ == "__main__":
    main()
