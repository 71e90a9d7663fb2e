"""
Workout session tracking module.

Usage:
    from workout_tracker.features.tracking import SessionTracker, GeoFix
    from workout_tracker.features.tracking import QueueFixSource, track

Components:
- SessionTracker: Active session state and metrics
- FixSource: Location stream sources (callback bridge, GPX replay)
- track / TrackingRunner: Stream consumption
- SessionArchive: Hand-off for finished sessions
"""

from .models import Coordinate, GeoFix, WorkoutSession, SessionState
from .exceptions import (
    TrackingError,
    SessionAlreadyActiveError,
    SourceUnavailableError,
    StreamInterruptedError,
)
from .tracker import SessionTracker, StartPolicy, wall_clock_ms
from .sources import FixRequest, FixSource, QueueFixSource, GPXReplaySource
from .stream import track, current_fix, TrackingRunner
from .archive import SessionArchive, InMemorySessionArchive
from .schemas import (
    StartSessionRequest,
    FixIn,
    SessionOut,
    SessionSummary,
    ReplayStarted,
    summarize,
)

__all__ = [
    # Models
    "Coordinate",
    "GeoFix",
    "WorkoutSession",
    "SessionState",
    # Errors
    "TrackingError",
    "SessionAlreadyActiveError",
    "SourceUnavailableError",
    "StreamInterruptedError",
    # Tracker
    "SessionTracker",
    "StartPolicy",
    "wall_clock_ms",
    # Sources
    "FixRequest",
    "FixSource",
    "QueueFixSource",
    "GPXReplaySource",
    # Stream
    "track",
    "current_fix",
    "TrackingRunner",
    # Archive
    "SessionArchive",
    "InMemorySessionArchive",
    # Schemas
    "StartSessionRequest",
    "FixIn",
    "SessionOut",
    "SessionSummary",
    "ReplayStarted",
    "summarize",
]
