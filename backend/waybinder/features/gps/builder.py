"""
Geometry Builder

Turns parsed track points into the GeoJSON feature collection used
for rendering, storage and API responses. Pure structural transform:
no reprojection, deduplication or reordering.
"""

from typing import Optional, Sequence

from waybinder.shared.timestamps import to_iso8601

from .exceptions import MalformedInput
from .models import TrackPoint
from .schemas import Feature, FeatureCollection, FeatureProperties, LineString


def build_geometry(
    points: Sequence[TrackPoint],
    name: Optional[str] = None
) -> FeatureCollection:
    """
    Build a single LineString feature from track points.

    Args:
        points: Track points in file order
        name: Optional feature name (track/activity name)

    Returns:
        FeatureCollection with one LineString feature whose
        properties.coordTimes runs parallel to its coordinates

    Raises:
        MalformedInput: If there are no points
    """
    if not points:
        raise MalformedInput("Cannot build geometry from an empty track")

    coordinates = [(p.longitude, p.latitude, p.elevation) for p in points]
    coord_times = [
        to_iso8601(p.timestamp) if p.timestamp is not None else None
        for p in points
    ]

    feature = Feature(
        properties=FeatureProperties(name=name, coord_times=tuple(coord_times)),
        geometry=LineString(coordinates=coordinates),
    )
    return FeatureCollection(features=(feature,))
