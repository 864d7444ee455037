"""
Unified constants for GPS track ingestion.

This module provides a single source of truth for supported file
formats, simplification levels and the tuning defaults of the pipeline.
"""

from enum import Enum
from typing import Optional


class TrackFormat(str, Enum):
    """
    Supported GPS track file formats.

    Values match the lowercase file extension.
    """
    GPX = "gpx"
    KML = "kml"
    FIT = "fit"
    TCX = "tcx"


class SimplificationLevel(str, Enum):
    """How aggressively a geometry is simplified for rendering."""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Tolerance (degrees) per simplification level; None disables simplification
SIMPLIFICATION_TOLERANCES: dict[SimplificationLevel, Optional[float]] = {
    SimplificationLevel.NONE: None,
    SimplificationLevel.LOW: 0.00001,
    SimplificationLevel.MEDIUM: 0.0001,
    SimplificationLevel.HIGH: 0.001,
}

# Default simplification tolerance in degrees (~11 m at the equator)
DEFAULT_SIMPLIFY_TOLERANCE = SIMPLIFICATION_TOLERANCES[SimplificationLevel.MEDIUM]

# Segments slower than this are treated as GPS jitter while stopped
DEFAULT_MOVING_SPEED_THRESHOLD_KMH = 0.5

# FIT stores lat/lon as 32-bit semicircles
FIT_SEMICIRCLE_TO_DEGREES = 180.0 / 2 ** 31

# KML has no standard per-point time; these property keys are recognized
KML_TIME_KEYS: tuple[str, ...] = ("timeStamp", "Time", "when")
