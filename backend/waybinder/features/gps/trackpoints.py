"""
Trackpoint listing.

Extracts paginated point rows from a stored geometry.
"""

import math
from datetime import datetime
from typing import List, Optional, Tuple

from waybinder.shared.timestamps import ensure_utc, parse_timestamp

from .schemas import FeatureCollection, Trackpoint, TrackpointPage


def extract_trackpoints(
    geometry: FeatureCollection,
    page: int = 1,
    limit: int = 100,
    time_range: Optional[Tuple[Optional[datetime], Optional[datetime]]] = None
) -> TrackpointPage:
    """
    List the points of the first line feature, one page at a time.

    Args:
        geometry: Stored track geometry
        page: 1-based page number
        limit: Page size
        time_range: Optional (start, end); either bound may be None for
            an open-ended range. Naive bounds are taken as UTC. Points
            without a time are always kept, timed points must fall
            inside the closed range

    Returns:
        TrackpointPage (empty when the geometry has no line feature)

    Raises:
        ValueError: If page or limit is below 1
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    rows: List[Trackpoint] = []
    feature = geometry.first_line_feature()
    if feature is not None:
        times = feature.properties.coord_times or ()
        for index, (lon, lat, ele) in enumerate(feature.flat_coordinates()):
            rows.append(Trackpoint(
                index=index,
                longitude=lon,
                latitude=lat,
                elevation=ele,
                time=times[index] if index < len(times) else None,
            ))

    if time_range is not None:
        start, end = (ensure_utc(t) if t is not None else None for t in time_range)
        rows = [r for r in rows if _in_range(r.time, start, end)]

    total = len(rows)
    offset = (page - 1) * limit
    return TrackpointPage(
        data=tuple(rows[offset:offset + limit]),
        total=total,
        page=page,
        limit=limit,
        pages=math.ceil(total / limit),
    )


def _in_range(
    raw_time: Optional[str],
    start: Optional[datetime],
    end: Optional[datetime]
) -> bool:
    if raw_time is None:
        return True
    parsed = parse_timestamp(raw_time)
    if parsed is None:
        return True
    if start is not None and parsed < start:
        return False
    if end is not None and parsed > end:
        return False
    return True
