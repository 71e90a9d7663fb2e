"""
Shared utilities (NOT business logic).

Usage:
    from workout_tracker.shared import path_distance, format_pace
    from workout_tracker.shared.constants import WorkoutType
"""
from .geo import (
    haversine,
    distance_meters,
    path_distance,
    EARTH_RADIUS_KM,
    EARTH_RADIUS_M,
)
from .formatters import (
    format_distance,
    format_pace,
    format_duration,
    format_calories,
)
from .constants import (
    WorkoutType,
    METERS_PER_CALORIE,
)

__all__ = [
    # geo
    "haversine",
    "distance_meters",
    "path_distance",
    "EARTH_RADIUS_KM",
    "EARTH_RADIUS_M",
    # formatters
    "format_distance",
    "format_pace",
    "format_duration",
    "format_calories",
    # constants
    "WorkoutType",
    "METERS_PER_CALORIE",
]
