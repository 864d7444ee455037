"""
GPS track ingestion module.

Usage:
    from waybinder.features.gps import GPSPipelineService
    result = GPSPipelineService.process(content, "gpx")

Components:
- Parsers (GPX, KML, FIT, TCX): raw bytes -> ordered track points
- build_geometry: track points -> GeoJSON feature collection
- compute_statistics: geometry -> TrackStatistics
- simplify_geometry: geometry -> reduced geometry for rendering
- GPSPipelineService: runs the whole pipeline, returns ParseResult
- extract_trackpoints / to_activity_columns: helpers for API and storage
"""

from .builder import build_geometry
from .exceptions import (
    GPSProcessingError,
    MalformedInput,
    PartialDataWarning,
    UnsupportedFormat,
)
from .mapper import ActivityGPSColumns, to_activity_columns
from .models import ParsedTrack, PointCandidate, TrackPoint
from .parsers import extension_from_filename, get_parser, resolve_format
from .schemas import (
    Feature,
    FeatureCollection,
    FeatureProperties,
    LineString,
    MultiLineString,
    ParsedData,
    ParseResult,
    Point,
    SourceMetadata,
    Trackpoint,
    TrackpointPage,
    TrackpointQuery,
    TrackStatistics,
)
from .service import GPSPipelineService
from .simplifier import simplify_for_level, simplify_geometry, simplify_with_report
from .statistics import compute_statistics
from .trackpoints import extract_trackpoints

__all__ = [
    # Services
    "GPSPipelineService",
    "build_geometry",
    "compute_statistics",
    "simplify_geometry",
    "simplify_with_report",
    "simplify_for_level",
    "extract_trackpoints",
    "to_activity_columns",
    "ActivityGPSColumns",
    # Parsers
    "get_parser",
    "resolve_format",
    "extension_from_filename",
    # Models
    "TrackPoint",
    "PointCandidate",
    "ParsedTrack",
    # Schemas
    "Point",
    "LineString",
    "MultiLineString",
    "Feature",
    "FeatureProperties",
    "FeatureCollection",
    "TrackStatistics",
    "SourceMetadata",
    "ParsedData",
    "ParseResult",
    "Trackpoint",
    "TrackpointPage",
    "TrackpointQuery",
    # Errors
    "GPSProcessingError",
    "UnsupportedFormat",
    "MalformedInput",
    "PartialDataWarning",
]
