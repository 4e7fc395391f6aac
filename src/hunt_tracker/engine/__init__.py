"""Tracking engine: routing, bundle assembly, publication and recovery."""

from .activity import ActivityClock
from .assembler import BundleAssembler, StatsBundle, select_enemies
from .channels import BroadcastChannel, ReplayChannel, Subscription
from .router import EventRouter
from .session import SessionState, TrackingSession
from .tracker import TrackerEngine, build_source_factory
from .watchdog import Watchdog

__all__ = [
    "ActivityClock",
    "BroadcastChannel",
    "BundleAssembler",
    "EventRouter",
    "ReplayChannel",
    "SessionState",
    "StatsBundle",
    "Subscription",
    "TrackerEngine",
    "TrackingSession",
    "Watchdog",
    "build_source_factory",
    "select_enemies",
]
