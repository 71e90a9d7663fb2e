"""
Workout tracking schemas.

Pydantic models for the sessions API.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from workout_tracker.shared.constants import WorkoutType
from workout_tracker.shared.formatters import (
    format_calories,
    format_distance,
    format_duration,
    format_pace,
)

from .models import GeoFix, WorkoutSession


class StartSessionRequest(BaseModel):
    """Request to start tracking a workout."""

    workout_type: WorkoutType = WorkoutType.RUNNING


class FixIn(BaseModel):
    """Single location reading."""

    lat: float
    lon: float
    timestamp_ms: int
    accuracy_m: Optional[float] = Field(default=None, ge=0)

    def to_fix(self) -> GeoFix:
        return GeoFix.at(self.lat, self.lon, self.timestamp_ms, self.accuracy_m)


class PointOut(BaseModel):
    lat: float
    lon: float


class SessionSummary(BaseModel):
    """Display values for the workout stats card."""

    distance: str
    duration: str
    pace: str
    calories: str
    points_count: int


class SessionOut(BaseModel):
    """Workout session with raw metrics and display summary."""

    id: str
    workout_type: WorkoutType
    start_time: int
    end_time: Optional[int] = None
    active: bool

    # Metrics
    total_distance_m: float
    average_pace_mps: float
    calories_burned: int

    path: List[PointOut]
    summary: SessionSummary

    @classmethod
    def from_session(cls, session: WorkoutSession, now_ms: int) -> "SessionOut":
        return cls(
            id=session.id,
            workout_type=session.workout_type,
            start_time=session.start_time,
            end_time=session.end_time,
            active=session.is_active,
            total_distance_m=session.total_distance,
            average_pace_mps=session.average_pace,
            calories_burned=session.calories_burned,
            path=[PointOut(lat=p.lat, lon=p.lon) for p in session.path],
            summary=summarize(session, now_ms),
        )


class ReplayStarted(BaseModel):
    """Response for a GPX replay upload."""

    session_id: str
    points_count: int
    speedup: float
    # Set when speedup != 1: pace is measured on the wall clock
    pace_note: Optional[str] = None


def summarize(session: WorkoutSession, now_ms: int) -> SessionSummary:
    """
    Format a session for display.

    Duration runs to end_time for finished sessions and to `now_ms`
    while the session is active.
    """
    return SessionSummary(
        distance=format_distance(session.total_distance),
        duration=format_duration(session.duration_ms(now_ms)),
        pace=format_pace(session.average_pace),
        calories=format_calories(session.calories_burned),
        points_count=session.points_count,
    )
