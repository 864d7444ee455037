"""
GPX Parser

Extracts track points from GPX files using gpxpy.
Distance and duration summaries embedded in the file are ignored;
statistics are always recomputed from the raw points.

gpxpy rejects a whole file when one point lacks lat/lon, so such
points are removed from the document before it is handed to gpxpy.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Iterable, List, Tuple

import gpxpy
import gpxpy.gpx

from waybinder.shared.constants import TrackFormat

from ..exceptions import MalformedInput
from ..models import PointCandidate
from ..schemas import SourceMetadata
from .base import TrackParser
from .xml_utils import local_name

logger = logging.getLogger(__name__)

POINT_TAGS = ("trkpt", "rtept", "wpt")


def drop_unpositioned_points(text: str) -> str:
    """
    Remove point elements without a lat or lon attribute.

    Returns the text unchanged when every point has a position or the
    document is not well-formed XML (gpxpy reports the syntax error).
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError:
        return text

    removed = 0
    for parent in root.iter():
        for element in list(parent):
            if local_name(element.tag) not in POINT_TAGS:
                continue
            if element.get("lat") is None or element.get("lon") is None:
                parent.remove(element)
                removed += 1

    if not removed:
        return text

    logger.warning(f"GPX: dropped {removed} points without lat/lon")

    # Serialize the default namespace as a plain xmlns attribute;
    # gpxpy strips it and expects unprefixed tags
    namespace = root.tag[1:].split("}", 1)[0] if root.tag.startswith("{") else None
    if namespace:
        prefix = f"{{{namespace}}}"
        for element in root.iter():
            if isinstance(element.tag, str) and element.tag.startswith(prefix):
                element.tag = element.tag[len(prefix):]
        root.set("xmlns", namespace)

    return ET.tostring(root, encoding="unicode")


class GPXTrackParser(TrackParser):
    """Parser for GPX 1.0/1.1 files."""

    format = TrackFormat.GPX

    def extract(
        self,
        content: bytes
    ) -> Tuple[Iterable[PointCandidate], SourceMetadata]:
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedInput(f"Invalid GPX file: not UTF-8 text ({e})") from e

        try:
            gpx = gpxpy.parse(drop_unpositioned_points(text))
        except (gpxpy.gpx.GPXException, ValueError) as e:
            logger.error(f"Failed to parse GPX: {e}")
            raise MalformedInput(f"Invalid GPX file: {e}") from e

        # Collect all points from tracks, segments flattened in file order
        candidates: List[PointCandidate] = []
        for track in gpx.tracks:
            for segment in track.segments:
                for point in segment.points:
                    candidates.append(self._candidate(point))

        # From routes (if no tracks)
        if not candidates:
            for route in gpx.routes:
                for point in route.points:
                    candidates.append(self._candidate(point))
            if candidates:
                logger.info("GPX has no track points, using route points")

        first_track = gpx.tracks[0] if gpx.tracks else None
        metadata = SourceMetadata(
            format=self.format,
            name=gpx.name or (first_track.name if first_track else None),
            description=gpx.description,
            creator=gpx.creator,
            sport=first_track.type if first_track else None,
            track_count=len(gpx.tracks),
        )
        return candidates, metadata

    @staticmethod
    def _candidate(point) -> PointCandidate:
        return PointCandidate(
            latitude=point.latitude,
            longitude=point.longitude,
            elevation=point.elevation,
            timestamp=point.time,
        )
