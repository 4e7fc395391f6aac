from __future__ import annotations

import asyncio
from pathlib import Path

from hunt_tracker.engine.activity import ActivityClock
from hunt_tracker.engine.session import SessionState, TrackingSession
from hunt_tracker.engine.watchdog import Watchdog
from hunt_tracker.sources.dedup import Deduplicator
from hunt_tracker.sources.events import NewMatch, NoNewMatch, SourceFound


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class FakeSource:
    """Emits NewMatch/NoNewMatch for signatures fed through ``observe``."""

    instances: list["FakeSource"] = []

    def __init__(self) -> None:
        self.dedup = Deduplicator()
        self.sink = None
        self.stopped = False
        FakeSource.instances.append(self)

    def start(self, sink) -> None:
        self.sink = sink
        sink(SourceFound(Path("/game/attributes.xml")))

    def stop(self) -> None:
        self.stopped = True

    def observe(self, snapshot) -> None:
        if self.dedup.is_new(snapshot.signature):
            self.sink(NewMatch(snapshot))
        else:
            self.sink(NoNewMatch())


def new_session(received: list[object]) -> TrackingSession:
    FakeSource.instances = []
    return TrackingSession(FakeSource, received.append)


def test_session_lifecycle_states() -> None:
    received: list[object] = []
    session = new_session(received)
    assert session.state is SessionState.NOT_STARTED

    session.start()
    assert session.state is SessionState.RUNNING
    assert received == [SourceFound(Path("/game/attributes.xml"))]

    session.stop()
    assert session.state is SessionState.NOT_STARTED
    assert FakeSource.instances[0].stopped


def test_restart_discards_dedup_state(snapshot_factory) -> None:
    received: list[object] = []
    session = new_session(received)
    session.start()
    first = session.source
    first.observe(snapshot_factory("sig-1"))
    first.observe(snapshot_factory("sig-1"))

    session.restart()
    second = session.source
    second.observe(snapshot_factory("sig-1"))

    assert first is not second
    assert first.stopped
    assert session.restarts == 1
    assert session.state is SessionState.RUNNING
    kinds = [type(event).__name__ for event in received]
    assert kinds == ["SourceFound", "NewMatch", "NoNewMatch", "SourceFound", "NewMatch"]


def test_watchdog_waits_for_source_found() -> None:
    clock = FakeClock()
    activity = ActivityClock(clock)
    session = new_session([])
    session.start()
    watchdog = Watchdog(session, activity, stall_threshold=60.0)

    clock.now = 500.0

    assert watchdog.check() is False
    assert session.restarts == 0


def test_watchdog_restarts_once_per_stall_window() -> None:
    clock = FakeClock()
    activity = ActivityClock(clock)
    session = new_session([])
    session.start()
    activity.mark_found(Path("/game/attributes.xml"))
    watchdog = Watchdog(session, activity, stall_threshold=60.0)

    clock.now = 60.0
    assert watchdog.check() is False

    clock.now = 61.0
    assert watchdog.check() is True
    assert session.restarts == 1
    assert activity.last_activity == 61.0

    clock.now = 100.0
    assert watchdog.check() is False

    clock.now = 121.5
    assert watchdog.check() is True
    assert session.restarts == 2


def test_activity_postpones_restart() -> None:
    clock = FakeClock()
    activity = ActivityClock(clock)
    session = new_session([])
    session.start()
    activity.mark_found(Path("/game/attributes.xml"))
    watchdog = Watchdog(session, activity, stall_threshold=60.0)

    clock.now = 50.0
    activity.touch()
    clock.now = 100.0

    assert watchdog.check() is False


def test_watchdog_loop_triggers_restart(caplog) -> None:
    clock = FakeClock()
    activity = ActivityClock(clock)
    session = new_session([])
    caplog.set_level("WARNING", logger="hunt_tracker.engine.watchdog")

    async def scenario() -> None:
        session.start()
        activity.mark_found(Path("/game/attributes.xml"))
        clock.now = 1000.0
        watchdog = Watchdog(session, activity, interval=0.01, stall_threshold=60.0)
        watchdog.start()
        await asyncio.sleep(0.05)
        watchdog.stop()

    asyncio.run(scenario())

    assert session.restarts == 1
    assert any("Tracking stalled" in record.getMessage() for record in caplog.records)
