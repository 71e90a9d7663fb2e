"""
Geographic utility functions.

This is the SINGLE SOURCE OF TRUTH for distance calculations.
DO NOT duplicate these functions elsewhere.
"""
import math
from typing import Sequence, Tuple

# Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_M = EARTH_RADIUS_KM * 1000


def haversine(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate great-circle distance between two points.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) *
        math.sin(delta_lon / 2) ** 2
    )
    # Out-of-range input can push `a` just past 1.0
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_meters(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """
    Great-circle distance between two (lat, lon) pairs.

    Returns:
        Distance in meters
    """
    return haversine(a[0], a[1], b[0], b[1]) * 1000


def path_distance(points: Sequence[Tuple[float, float]]) -> float:
    """
    Sum of leg distances along a path, in order.

    Args:
        points: Sequence of (lat, lon) pairs

    Returns:
        Total distance in meters (0 for fewer than two points)
    """
    total = 0.0

    for i in range(1, len(points)):
        total += distance_meters(points[i - 1], points[i])

    return total

