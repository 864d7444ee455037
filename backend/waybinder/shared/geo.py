"""
Geographic utility functions.

This is the SINGLE SOURCE OF TRUTH for geographic calculations.
DO NOT duplicate these functions elsewhere.

Coordinates follow the GeoJSON convention: (longitude, latitude[, elevation]).
"""
import math
from typing import Optional, Sequence

from .constants import FIT_SEMICIRCLE_TO_DEGREES

# Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0


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
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def coordinate_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Distance in km between two (lon, lat, ...) coordinates."""
    return haversine(a[1], a[0], b[1], b[0])


def calculate_total_distance(coordinates: Sequence[Sequence[float]]) -> float:
    """
    Calculate total distance for a path.

    Args:
        coordinates: Sequence of (lon, lat[, elevation]) tuples

    Returns:
        Total distance in kilometers
    """
    total = 0.0

    for i in range(1, len(coordinates)):
        total += coordinate_distance(coordinates[i - 1], coordinates[i])

    return total


def semicircles_to_degrees(value: Optional[int]) -> Optional[float]:
    """Convert a FIT semicircle value to decimal degrees."""
    if value is None:
        return None
    return value * FIT_SEMICIRCLE_TO_DEGREES


def is_valid_position(latitude: float, longitude: float) -> bool:
    """Check that a lat/lon pair is finite and inside WGS84 bounds."""
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        return False
    return -90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0


def perpendicular_distance(
    point: Sequence[float],
    start: Sequence[float],
    end: Sequence[float]
) -> float:
    """
    Planar distance from point to the segment start-end.

    Works on raw (lon, lat) degrees, which is good enough for
    simplification tolerances.
    """
    px, py = point[0], point[1]
    x1, y1 = start[0], start[1]
    x2, y2 = end[0], end[1]

    dx = x2 - x1
    dy = y2 - y1
    if dx == 0 and dy == 0:
        return math.hypot(px - x1, py - y1)

    t = ((px - x1) * dx + (py - y1) * dy) / (dx * dx + dy * dy)
    t = max(0.0, min(1.0, t))
    return math.hypot(px - (x1 + t * dx), py - (y1 + t * dy))
