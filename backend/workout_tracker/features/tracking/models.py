"""
Workout tracking records.

GeoFix and WorkoutSession are immutable values handed to callers.
SessionState is the tracker's private mutable record.
"""

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple

from workout_tracker.shared.constants import WorkoutType


class Coordinate(NamedTuple):
    """Latitude/longitude in degrees. Range is not validated."""
    lat: float
    lon: float


@dataclass(frozen=True)
class GeoFix:
    """A single position reading from a location source."""
    coordinate: Coordinate
    timestamp_ms: int
    accuracy_m: Optional[float] = None  # passed through, not used in metrics

    @classmethod
    def at(
        cls,
        lat: float,
        lon: float,
        timestamp_ms: int,
        accuracy_m: Optional[float] = None
    ) -> "GeoFix":
        return cls(Coordinate(lat, lon), timestamp_ms, accuracy_m)


@dataclass(frozen=True)
class WorkoutSession:
    """Snapshot of a workout session at one point in time."""
    id: str
    start_time: int  # epoch ms
    workout_type: WorkoutType
    end_time: Optional[int] = None
    path: Tuple[Coordinate, ...] = ()
    total_distance: float = 0.0  # meters
    average_pace: float = 0.0  # m/s
    calories_burned: int = 0

    @property
    def is_active(self) -> bool:
        return self.end_time is None

    @property
    def points_count(self) -> int:
        return len(self.path)

    def duration_ms(self, now_ms: int) -> int:
        """Elapsed time: up to end_time when finished, up to now_ms otherwise."""
        end = self.end_time if self.end_time is not None else now_ms
        return max(0, end - self.start_time)


@dataclass
class SessionState:
    """
    Mutable record of the session a tracker is working on.

    Only SessionTracker mutates it, under its lock.
    """
    id: str
    start_time: int
    workout_type: WorkoutType
    end_time: Optional[int] = None
    path: List[Coordinate] = field(default_factory=list)
    total_distance: float = 0.0
    average_pace: float = 0.0
    calories_burned: int = 0

    def snapshot(self) -> WorkoutSession:
        return WorkoutSession(
            id=self.id,
            start_time=self.start_time,
            workout_type=self.workout_type,
            end_time=self.end_time,
            path=tuple(self.path),
            total_distance=self.total_distance,
            average_pace=self.average_pace,
            calories_burned=self.calories_burned,
        )
