"""
Formatting utilities for display.

Pure functions over already-computed metrics. Used by the API
responses and the replay script.
"""

from .constants import METERS_PER_KM, MILLIS_PER_SECOND, SECONDS_PER_HOUR


def format_distance(meters: float) -> str:
    """
    Format distance.

    Args:
        meters: Distance in meters

    Returns:
        Formatted string (e.g., '500 m' or '1.50 km')
    """
    if meters < METERS_PER_KM:
        return f"{meters:.0f} m"
    return f"{meters / METERS_PER_KM:.2f} km"


def format_pace(meters_per_second: float) -> str:
    """
    Format speed as pace 'M:SS /km'.

    Seconds are truncated from the fractional minute, not rounded.

    Args:
        meters_per_second: Average speed in m/s

    Returns:
        Formatted string (e.g., '5:59 /km')
    """
    if meters_per_second <= 0:
        return "0:00 /km"

    pace_min_km = METERS_PER_KM / (meters_per_second * 60)
    minutes = int(pace_min_km)
    seconds = int((pace_min_km - minutes) * 60)

    return f"{minutes}:{seconds:02d} /km"


def format_duration(millis: int) -> str:
    """
    Format duration as 'H:MM:SS' (one hour or more) or 'M:SS'.

    Always floors to whole seconds. Negative input reads as zero.

    Args:
        millis: Duration in milliseconds

    Returns:
        Formatted string (e.g., '1:02:05' or '1:05')
    """
    total_seconds = max(0, int(millis)) // MILLIS_PER_SECOND
    hours = total_seconds // SECONDS_PER_HOUR
    minutes = (total_seconds % SECONDS_PER_HOUR) // 60
    seconds = total_seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def format_calories(calories: int) -> str:
    """Format calories as 'N kcal'."""
    return f"{calories} kcal"
