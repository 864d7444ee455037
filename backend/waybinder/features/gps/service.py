"""
GPS Pipeline Service

Orchestrates GPS track ingestion for a single uploaded file:
- Dispatch by file extension to a format parser
- Parse raw bytes into ordered track points
- Build the GeoJSON geometry
- Compute track statistics
- Simplify the geometry for rendering
- Assemble the ParseResult

This is the boundary of the core: process() never raises, every
failure becomes a ParseResult with success=False.
"""

import logging
from datetime import datetime
from typing import List, Optional

from waybinder.shared.constants import (
    DEFAULT_MOVING_SPEED_THRESHOLD_KMH,
    DEFAULT_SIMPLIFY_TOLERANCE,
    TrackFormat,
)

from .builder import build_geometry
from .exceptions import GPSProcessingError, PartialDataWarning
from .parsers import get_parser
from .schemas import ParsedData, ParseResult
from .simplifier import simplify_with_report
from .statistics import compute_statistics

logger = logging.getLogger(__name__)


class GPSPipelineService:
    """Service for turning GPS files into geometry and statistics."""

    @staticmethod
    def process(
        content: bytes,
        extension: str,
        simplify_tolerance: Optional[float] = DEFAULT_SIMPLIFY_TOLERANCE,
        moving_speed_threshold_kmh: float = DEFAULT_MOVING_SPEED_THRESHOLD_KMH,
        now: Optional[datetime] = None
    ) -> ParseResult:
        """
        Process one GPS file.

        Args:
            content: Raw file bytes
            extension: File extension hint (gpx, kml, fit, tcx)
            simplify_tolerance: Simplification tolerance in degrees;
                None skips simplification
            moving_speed_threshold_kmh: Minimum speed counted as moving
            now: Fallback time for tracks without timestamps

        Returns:
            ParseResult; data.geometry is always full resolution and
            data.statistics.simplifiedGeometry holds the simplified copy
        """
        stage = "dispatch"
        warnings: List[str] = []
        try:
            parser = get_parser(extension)

            stage = "parse"
            track = parser.parse(content)

            stage = "build"
            geometry = build_geometry(track.points, name=track.metadata.name)

            stage = "statistics"
            statistics = compute_statistics(
                geometry,
                moving_speed_threshold_kmh=moving_speed_threshold_kmh,
                now=now,
            )
            if not statistics.has_time_data:
                warnings.append(
                    "Track has no timestamps; time and speed statistics are unavailable"
                )
            if not statistics.has_elevation_data:
                warnings.append("Track has no elevation data")

            stage = "simplify"
            if simplify_tolerance is not None:
                simplified, failures = simplify_with_report(geometry, simplify_tolerance)
                warnings.extend(failures)
                statistics = statistics.model_copy(
                    update={"simplified_geometry": simplified}
                )

            for message in warnings:
                logger.warning(f"{PartialDataWarning.__name__}: {message}")

            logger.info(
                f"Processed {parser.label} file: {len(track)} points, "
                f"{statistics.total_distance:.2f} km"
            )
            return ParseResult.ok(
                ParsedData(
                    geometry=geometry,
                    statistics=statistics,
                    metadata=track.metadata,
                ),
                warnings=warnings,
            )

        except GPSProcessingError as e:
            logger.warning(f"GPS processing failed at {stage}: {e}")
            return ParseResult.fail(str(e))
        except Exception as e:
            logger.exception(f"Unexpected error processing GPS file at {stage}")
            return ParseResult.fail(f"Failed to process GPS file ({stage}): {e}")

    @staticmethod
    def supported_formats() -> List[str]:
        """Extensions accepted by process()."""
        return [f.value for f in TrackFormat]
