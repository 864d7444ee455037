"""
Shared utilities (NOT business logic).

Usage:
    from waybinder.shared import haversine, calculate_elevation_changes
    from waybinder.shared.constants import TrackFormat
"""
from .geo import (
    haversine,
    coordinate_distance,
    calculate_total_distance,
    semicircles_to_degrees,
    is_valid_position,
    perpendicular_distance,
    EARTH_RADIUS_KM,
)
from .elevation import (
    calculate_elevation_changes,
    elevation_range,
)
from .timestamps import (
    ensure_utc,
    to_iso8601,
    parse_timestamp,
    normalize_timestamp,
)
from .constants import (
    TrackFormat,
    SimplificationLevel,
    SIMPLIFICATION_TOLERANCES,
    DEFAULT_SIMPLIFY_TOLERANCE,
    DEFAULT_MOVING_SPEED_THRESHOLD_KMH,
    FIT_SEMICIRCLE_TO_DEGREES,
    KML_TIME_KEYS,
)

__all__ = [
    # geo
    "haversine",
    "coordinate_distance",
    "calculate_total_distance",
    "semicircles_to_degrees",
    "is_valid_position",
    "perpendicular_distance",
    "EARTH_RADIUS_KM",
    # elevation
    "calculate_elevation_changes",
    "elevation_range",
    # timestamps
    "ensure_utc",
    "to_iso8601",
    "parse_timestamp",
    "normalize_timestamp",
    # constants
    "TrackFormat",
    "SimplificationLevel",
    "SIMPLIFICATION_TOLERANCES",
    "DEFAULT_SIMPLIFY_TOLERANCE",
    "DEFAULT_MOVING_SPEED_THRESHOLD_KMH",
    "FIT_SEMICIRCLE_TO_DEGREES",
    "KML_TIME_KEYS",
]
