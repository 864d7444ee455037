"""
Geometry Simplifier

Ramer-Douglas-Peucker reduction of line features for cheap rendering.

Works on planar (lon, lat) degrees. Each line feature is simplified
independently; a feature that fails is passed through unchanged.
The input geometry is never modified: a new collection is returned,
with coordTimes filtered to the kept points.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from waybinder.shared.constants import (
    DEFAULT_SIMPLIFY_TOLERANCE,
    SIMPLIFICATION_TOLERANCES,
    SimplificationLevel,
)
from waybinder.shared.geo import perpendicular_distance

from .schemas import (
    Coordinate,
    Feature,
    FeatureCollection,
    LineString,
    MultiLineString,
)

logger = logging.getLogger(__name__)


def _normalize_tolerance(tolerance: float) -> float:
    """NaN/negative tolerance is treated as 0; +inf is allowed."""
    if tolerance is None or math.isnan(tolerance) or tolerance < 0:
        logger.warning(f"Invalid simplification tolerance {tolerance!r}, using 0")
        return 0.0
    return float(tolerance)


def rdp_keep_indexes(points: Sequence[Coordinate], tolerance: float) -> List[int]:
    """
    Indexes of the points kept by Ramer-Douglas-Peucker.

    Iterative with an explicit stack. Every split keeps one more point
    and pushes two ranges, so the loop is bounded by 2 * len(points).
    """
    n = len(points)
    if n <= 2:
        return list(range(n))

    keep = [False] * n
    keep[0] = keep[-1] = True

    stack: List[Tuple[int, int]] = [(0, n - 1)]
    max_iterations = 2 * n
    iterations = 0

    while stack:
        iterations += 1
        if iterations > max_iterations:
            raise RuntimeError("Simplification exceeded its iteration bound")

        start, end = stack.pop()
        if end - start < 2:
            continue

        max_dist = -1.0
        index = start
        for i in range(start + 1, end):
            dist = perpendicular_distance(points[i], points[start], points[end])
            if dist > max_dist:
                max_dist = dist
                index = i

        if max_dist > tolerance:
            keep[index] = True
            stack.append((start, index))
            stack.append((index, end))

    return [i for i, kept in enumerate(keep) if kept]


def _simplify_feature(feature: Feature, tolerance: float) -> Feature:
    """Simplify one line feature, keeping coordTimes aligned."""
    times = feature.properties.coord_times
    geometry = feature.geometry

    kept_paths = []
    kept_times: List[Optional[str]] = []
    offset = 0
    for path in geometry.paths:
        indexes = rdp_keep_indexes(path, tolerance)
        kept_paths.append([path[i] for i in indexes])
        if times is not None:
            kept_times.extend(
                times[offset + i] if offset + i < len(times) else None
                for i in indexes
            )
        offset += len(path)

    if isinstance(geometry, MultiLineString):
        new_geometry = MultiLineString(coordinates=kept_paths)
    else:
        new_geometry = LineString(coordinates=kept_paths[0])

    properties = feature.properties
    if times is not None:
        properties = properties.model_copy(update={"coord_times": tuple(kept_times)})

    return feature.model_copy(update={"geometry": new_geometry, "properties": properties})


def simplify_with_report(
    geometry: FeatureCollection,
    tolerance: float = DEFAULT_SIMPLIFY_TOLERANCE
) -> Tuple[FeatureCollection, List[str]]:
    """
    Simplify every line feature of a geometry.

    Args:
        geometry: Feature collection to simplify (left untouched)
        tolerance: Max deviation in degrees; 0 removes only collinear points

    Returns:
        Tuple of (new FeatureCollection, messages for features that
        could not be simplified and were passed through)
    """
    tolerance = _normalize_tolerance(tolerance)

    features = []
    failures: List[str] = []
    for i, feature in enumerate(geometry.features):
        if not feature.is_line:
            features.append(feature)
            continue
        try:
            features.append(_simplify_feature(feature, tolerance))
        except Exception as e:
            message = f"Failed to simplify feature {i}, keeping original: {e}"
            logger.warning(message)
            failures.append(message)
            features.append(feature)

    return geometry.model_copy(update={"features": tuple(features)}), failures


def simplify_geometry(
    geometry: FeatureCollection,
    tolerance: float = DEFAULT_SIMPLIFY_TOLERANCE
) -> FeatureCollection:
    """New geometry with every line feature simplified (best effort)."""
    simplified, _ = simplify_with_report(geometry, tolerance)
    return simplified


def simplify_for_level(
    geometry: FeatureCollection,
    level: SimplificationLevel
) -> FeatureCollection:
    """Geometry at the requested simplification level (NONE returns it as is)."""
    tolerance = SIMPLIFICATION_TOLERANCES[level]
    if tolerance is None:
        return geometry
    return simplify_geometry(geometry, tolerance)

