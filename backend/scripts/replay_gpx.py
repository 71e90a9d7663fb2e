#!/usr/bin/env python3
"""Replay a GPX recording through a workout session and print the stats.

Usage:
    # Replay 60x faster than recorded
    python backend/scripts/replay_gpx.py --file morning_run.gpx --speedup 60

    # As a hike, with per-fix debug logging
    python backend/scripts/replay_gpx.py --file hike.gpx --type hiking --verbose
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")

sys.path.insert(0, str(Path(__file__).parent.parent))

from workout_tracker.config import settings
from workout_tracker.features.tracking import (
    FixRequest,
    GPXReplaySource,
    SessionTracker,
    TrackingError,
    summarize,
    track,
    wall_clock_ms,
)
from workout_tracker.shared.constants import WorkoutType


class ScaledClock:
    """Wall clock running `speedup` times faster, so pace matches the recording."""

    def __init__(self, speedup: float):
        self.speedup = speedup
        self._origin = wall_clock_ms()

    def __call__(self) -> int:
        return self._origin + int((wall_clock_ms() - self._origin) * self.speedup)


async def replay(path: Path, workout_type: WorkoutType, speedup: float) -> int:
    source = GPXReplaySource(
        path.read_bytes(),
        request=FixRequest.from_settings(settings),
        speedup=speedup,
    )
    tracker = SessionTracker(clock=ScaledClock(speedup))

    print(f"Replaying {len(source.points)} points from {path.name} ({speedup:g}x)")
    tracker.start_session(workout_type)

    try:
        await track(tracker, source)
    except TrackingError as e:
        print(f"Replay stopped: {e}", file=sys.stderr)

    session = tracker.end_session()
    summary = summarize(session, tracker.now())

    print(f"\n{'=' * 40}")
    print(f"Workout:  {session.workout_type.value}")
    print(f"Distance: {summary.distance}")
    print(f"Duration: {summary.duration}")
    print(f"Pace:     {summary.pace}")
    print(f"Calories: {summary.calories}")
    print(f"Points:   {summary.points_count}")
    print(f"{'=' * 40}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Replay a GPX file as a workout session")
    parser.add_argument("--file", required=True, help="GPX file to replay")
    parser.add_argument(
        "--type",
        default=WorkoutType.RUNNING.value,
        choices=[t.value for t in WorkoutType],
        help="Workout type (default: running)",
    )
    parser.add_argument(
        "--speedup",
        type=float,
        default=settings.replay_speedup,
        help="Replay speed factor (default from REPLAY_SPEEDUP)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every fix")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    path = Path(args.file)
    if not path.is_file():
        print(f"File not found: {path}", file=sys.stderr)
        return 1
    if args.speedup <= 0:
        print("--speedup must be positive", file=sys.stderr)
        return 1

    try:
        return asyncio.run(replay(path, WorkoutType(args.type), args.speedup))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
