"""
Session Tracker

Owns the active workout session and turns location fixes into
distance, pace and calorie metrics.

Two states:
    Idle   - no active session; add_fix/end_session are no-ops
    Active - one session accumulating fixes

All operations are serialized by one lock, so fixes may arrive from a
location callback thread while API handlers read snapshots.
"""

import logging
import math
import threading
import time
import uuid
from enum import Enum
from typing import Callable, Optional

from workout_tracker.shared.constants import METERS_PER_CALORIE, MILLIS_PER_SECOND, WorkoutType
from workout_tracker.shared.geo import distance_meters

from .exceptions import SessionAlreadyActiveError
from .models import GeoFix, SessionState, WorkoutSession

logger = logging.getLogger(__name__)


class StartPolicy(str, Enum):
    """What start_session does while a session is already active."""
    REPLACE = "replace"  # discard the active session without finalizing it
    REJECT = "reject"  # raise SessionAlreadyActiveError


def wall_clock_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class SessionTracker:
    """
    Tracks one workout session at a time.

    Usage:
        tracker = SessionTracker()
        tracker.start_session(WorkoutType.RUNNING)
        tracker.add_fix(fix)
        snapshot = tracker.current_session()
        finished = tracker.end_session()
    """

    def __init__(
        self,
        policy: StartPolicy = StartPolicy.REPLACE,
        clock: Callable[[], int] = wall_clock_ms,
    ):
        self.policy = StartPolicy(policy)
        self._clock = clock
        self._lock = threading.Lock()
        self._state: Optional[SessionState] = None

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._state is not None

    def now(self) -> int:
        """Current time on the tracker clock (epoch ms)."""
        return self._clock()

    def start_session(self, workout_type: WorkoutType = WorkoutType.RUNNING) -> WorkoutSession:
        """
        Start a new session and make it the active one.

        Raises:
            SessionAlreadyActiveError: If a session is active and the
                policy is REJECT
        """
        workout_type = WorkoutType(workout_type)

        with self._lock:
            if self._state is not None:
                if self.policy is StartPolicy.REJECT:
                    raise SessionAlreadyActiveError(self._state.id)
                logger.warning(
                    f"Discarding unfinished workout session {self._state.id} "
                    f"({len(self._state.path)} points)"
                )

            self._state = SessionState(
                id=uuid.uuid4().hex,
                start_time=self._clock(),
                workout_type=workout_type,
            )
            session = self._state.snapshot()

        logger.info(f"Started workout session: {session.id} ({workout_type.value})")
        return session

    def add_fix(self, fix: GeoFix) -> None:
        """
        Append a fix to the active session and recompute its metrics.

        Dropped silently when no session is active.
        """
        with self._lock:
            state = self._state
            if state is None:
                logger.debug("No active workout session, fix dropped")
                return

            point = fix.coordinate
            if state.path:
                state.total_distance += distance_meters(state.path[-1], point)
            state.path.append(point)

            elapsed_s = (self._clock() - state.start_time) / MILLIS_PER_SECOND
            state.average_pace = state.total_distance / elapsed_s if elapsed_s > 0 else 0.0
            state.calories_burned = math.floor(state.total_distance / METERS_PER_CALORIE)

            logger.debug(
                f"Updated workout: distance={state.total_distance:.1f}m, "
                f"pace={state.average_pace:.2f}m/s, calories={state.calories_burned}"
            )

    def current_session(self) -> Optional[WorkoutSession]:
        """Snapshot of the active session, or None when idle."""
        with self._lock:
            if self._state is None:
                return None
            return self._state.snapshot()

    def end_session(self) -> Optional[WorkoutSession]:
        """
        Finish the active session.

        Returns:
            The terminal session, or None when idle. The tracker keeps
            no reference to it afterwards.
        """
        with self._lock:
            state = self._state
            if state is None:
                return None
            state.end_time = self._clock()
            self._state = None
            session = state.snapshot()

        logger.info(
            f"Ended workout session: {session.id} "
            f"(distance={session.total_distance:.1f}m, points={session.points_count})"
        )
        return session
