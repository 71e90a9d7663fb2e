"""
Workout constants.

Single source of truth for workout type naming and metric constants.
"""

from enum import Enum


class WorkoutType(str, Enum):
    """
    Kind of workout being tracked.

    Informational only: no metric depends on it.
    """
    RUNNING = "running"
    WALKING = "walking"
    CYCLING = "cycling"
    HIKING = "hiking"


# Rough estimate: 1 kcal per 10 meters, same for every workout type
METERS_PER_CALORIE = 10

METERS_PER_KM = 1000
MILLIS_PER_SECOND = 1000
SECONDS_PER_HOUR = 3600
