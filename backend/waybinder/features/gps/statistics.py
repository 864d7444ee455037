"""
Track Statistics Engine

Computes distance, elevation and motion statistics from a geometry.

compute_statistics() is a pure function of its arguments: spatial
statistics (distance, elevation) come from the coordinates alone,
temporal statistics from properties.coordTimes. A track without any
timestamp still gets its distance and elevation; all time/speed
fields are then 0 and start/end fall back to `now`.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from waybinder.shared.constants import DEFAULT_MOVING_SPEED_THRESHOLD_KMH
from waybinder.shared.elevation import calculate_elevation_changes, elevation_range
from waybinder.shared.geo import coordinate_distance
from waybinder.shared.timestamps import parse_timestamp, to_iso8601

from .schemas import Coordinate, Feature, FeatureCollection, TrackStatistics

logger = logging.getLogger(__name__)


@dataclass
class MotionSummary:
    """Time-based results of walking the timestamped segments."""
    moving_time_s: float = 0.0
    max_speed_kmh: float = 0.0
    segments_used: int = 0


def _paths_with_times(
    feature: Feature
) -> List[Tuple[Sequence[Coordinate], List[Optional[datetime]]]]:
    """Split coordTimes along the feature's paths (parsed, None if invalid)."""
    raw_times = feature.properties.coord_times or ()
    paths = feature.geometry.paths

    result = []
    offset = 0
    for path in paths:
        times = [
            parse_timestamp(raw_times[offset + i]) if offset + i < len(raw_times) else None
            for i in range(len(path))
        ]
        result.append((path, times))
        offset += len(path)
    return result


def _walk_motion(
    paths: List[Tuple[Sequence[Coordinate], List[Optional[datetime]]]],
    moving_speed_threshold_kmh: float
) -> MotionSummary:
    """Moving time and max speed over consecutive timestamped pairs."""
    summary = MotionSummary()

    for coords, times in paths:
        for i in range(1, len(coords)):
            t1, t2 = times[i - 1], times[i]
            if t1 is None or t2 is None:
                continue

            elapsed_s = (t2 - t1).total_seconds()
            if elapsed_s <= 0:
                continue

            distance_km = coordinate_distance(coords[i - 1], coords[i])
            speed_kmh = distance_km / (elapsed_s / 3600)

            summary.segments_used += 1
            if speed_kmh > summary.max_speed_kmh:
                summary.max_speed_kmh = speed_kmh
            if speed_kmh > moving_speed_threshold_kmh:
                summary.moving_time_s += elapsed_s

    return summary


def compute_statistics(
    geometry: FeatureCollection,
    moving_speed_threshold_kmh: float = DEFAULT_MOVING_SPEED_THRESHOLD_KMH,
    now: Optional[datetime] = None
) -> TrackStatistics:
    """
    Compute track statistics from the first line feature of a geometry.

    Args:
        geometry: Feature collection (LineString or MultiLineString track)
        moving_speed_threshold_kmh: Segments faster than this count as moving
        now: Fallback start/end time when the track has no timestamps
            (defaults to the current UTC time). Treat it as "unknown".

    Returns:
        TrackStatistics (without simplified geometry)
    """
    fallback_time = to_iso8601(now or datetime.now(timezone.utc))

    feature = geometry.first_line_feature()
    if feature is None:
        logger.warning("No line feature in geometry, returning empty statistics")
        return TrackStatistics(start_time=fallback_time, end_time=fallback_time)

    paths = _paths_with_times(feature)

    # === Spatial ===
    total_distance = 0.0
    gain = 0.0
    loss = 0.0
    all_elevations: List[Optional[float]] = []

    for coords, _ in paths:
        for i in range(1, len(coords)):
            total_distance += coordinate_distance(coords[i - 1], coords[i])
        elevations = [c[2] for c in coords]
        path_gain, path_loss = calculate_elevation_changes(elevations)
        gain += path_gain
        loss += path_loss
        all_elevations.extend(elevations)

    min_elevation, max_elevation = elevation_range(all_elevations)
    has_elevation = any(e is not None for e in all_elevations)

    # === Temporal ===
    timestamps = [t for _, times in paths for t in times if t is not None]
    has_time = bool(timestamps)

    if has_time:
        start, end = timestamps[0], timestamps[-1]
        start_time, end_time = to_iso8601(start), to_iso8601(end)
        total_time = (end - start).total_seconds()
    else:
        start_time = end_time = fallback_time
        total_time = 0.0

    motion = _walk_motion(paths, moving_speed_threshold_kmh)
    moving_time = motion.moving_time_s

    average_speed = total_distance / (moving_time / 3600) if moving_time > 0 else 0.0
    pace = moving_time / total_distance if moving_time > 0 and total_distance > 0 else 0.0

    return TrackStatistics(
        total_distance=total_distance,
        elevation_gain=gain,
        elevation_loss=loss,
        max_elevation=max_elevation,
        min_elevation=min_elevation,
        start_time=start_time,
        end_time=end_time,
        moving_time=moving_time,
        total_time=total_time,
        average_speed=average_speed,
        max_speed=motion.max_speed_kmh,
        pace=pace,
        has_time_data=has_time,
        has_elevation_data=has_elevation,
    )
