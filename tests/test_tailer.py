from __future__ import annotations

import asyncio
from pathlib import Path

from hunt_tracker.sources.events import MapChanged
from hunt_tracker.sources.tailer import LogTailer, scan_map_markers


def _append(path: Path, data: bytes) -> None:
    with path.open("ab") as handle:
        handle.write(data)


def test_prime_skips_existing_content(tmp_path: Path) -> None:
    log = tmp_path / "game.log"
    log.write_bytes(b"old PrepareLevel creek/old\n")
    tailer = LogTailer(log)

    asyncio.run(tailer.prime())

    assert tailer.cursor == log.stat().st_size
    assert asyncio.run(tailer.poll()) == []


def test_appended_marker_emits_map_change_and_advances_cursor(tmp_path: Path) -> None:
    log = tmp_path / "game.log"
    log.write_bytes(b"x" * 100)
    tailer = LogTailer(log)
    asyncio.run(tailer.prime())

    chunk = b"... PrepareLevel creek/swamp ...".ljust(50, b" ")
    assert len(chunk) == 50
    _append(log, chunk)

    events = asyncio.run(tailer.poll())

    assert events == [MapChanged("creek/swamp")]
    assert tailer.cursor == 150


def test_multiple_markers_emit_in_order(tmp_path: Path) -> None:
    log = tmp_path / "game.log"
    log.write_bytes(b"")
    tailer = LogTailer(log)
    asyncio.run(tailer.prime())

    _append(
        log,
        b"[1] PrepareLevel levels/cemetery\n[2] noise\n[3] PrepareLevel levels/civilwar\n",
    )

    events = asyncio.run(tailer.poll())

    assert [event.level_name for event in events] == ["levels/cemetery", "levels/civilwar"]


def test_truncation_rewinds_without_raising(tmp_path: Path) -> None:
    log = tmp_path / "game.log"
    log.write_bytes(b"a" * 500)
    tailer = LogTailer(log)
    asyncio.run(tailer.prime())
    assert tailer.cursor == 500

    log.write_bytes(b"PrepareLevel creek/new ".ljust(80, b"b"))

    assert asyncio.run(tailer.poll()) == []
    assert tailer.cursor == 0

    events = asyncio.run(tailer.poll())
    assert events == [MapChanged("creek/new")]
    assert tailer.cursor == 80


def test_unchanged_length_is_a_no_op(tmp_path: Path) -> None:
    log = tmp_path / "game.log"
    log.write_bytes(b"steady")
    tailer = LogTailer(log)
    asyncio.run(tailer.prime())

    assert asyncio.run(tailer.poll()) == []
    assert tailer.cursor == 6


def test_split_multibyte_character_waits_for_next_read(tmp_path: Path) -> None:
    log = tmp_path / "game.log"
    log.write_bytes(b"")
    tailer = LogTailer(log)
    asyncio.run(tailer.prime())

    encoded = "PrepareLevel creek/dépôt ".encode("utf-8")
    split_at = encoded.index("ô".encode("utf-8")) + 1
    _append(log, encoded[:split_at])

    asyncio.run(tailer.poll())
    assert tailer.cursor == split_at - 1

    _append(log, encoded[split_at:])
    asyncio.run(tailer.poll())
    assert tailer.cursor == len(encoded)


def test_missing_file_keeps_cursor(tmp_path: Path) -> None:
    tailer = LogTailer(tmp_path / "absent.log")
    asyncio.run(tailer.prime())

    assert tailer.cursor == 0
    assert asyncio.run(tailer.poll()) == []
    assert tailer.cursor == 0


def test_tick_forwards_events_to_sink(tmp_path: Path) -> None:
    log = tmp_path / "game.log"
    log.write_bytes(b"")
    tailer = LogTailer(log)
    asyncio.run(tailer.prime())
    _append(log, b"PrepareLevel creek/creek\n")
    received: list[object] = []

    asyncio.run(tailer.tick(received.append))

    assert received == [MapChanged("creek/creek")]


def test_scan_requires_whitespace_delimited_marker() -> None:
    assert scan_map_markers("NotPrepareLevel x/y PrepareLevel a/b") == ["a/b"]
    assert scan_map_markers("PrepareLevel") == []
