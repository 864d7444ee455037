"""
KML Parser

Extracts line geometry from KML placemarks.

KML has no standard per-point time. Times are recovered when
available:
- gx:Track elements pair each <gx:coord> with a <when>
- point placemarks carrying a time-like value (timeStamp, Time, when)
  are mapped positionally onto the line coordinates, but only when
  their count matches the number of line coordinates
Otherwise line coordinates have no time.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from waybinder.shared.constants import KML_TIME_KEYS, TrackFormat
from waybinder.shared.timestamps import parse_timestamp

from ..exceptions import MalformedInput
from ..models import PointCandidate
from ..schemas import SourceMetadata
from .base import TrackParser
from .xml_utils import (
    child,
    child_text,
    children,
    iter_named,
    local_name,
    parse_float,
    parse_xml,
)

logger = logging.getLogger(__name__)


@dataclass
class KmlPlacemark:
    """Decoded content of a single Placemark."""
    name: Optional[str] = None
    time: Optional[str] = None
    line_points: List[PointCandidate] = field(default_factory=list)
    track_points: List[PointCandidate] = field(default_factory=list)

    @property
    def has_line_geometry(self) -> bool:
        return bool(self.line_points or self.track_points)


class KMLTrackParser(TrackParser):
    """Parser for KML 2.x documents."""

    format = TrackFormat.KML

    def extract(
        self,
        content: bytes
    ) -> Tuple[Iterable[PointCandidate], SourceMetadata]:
        root = parse_xml(content, self.label)
        if local_name(root.tag) != "kml":
            raise MalformedInput(
                f"Invalid KML file: unexpected root element <{local_name(root.tag)}>"
            )

        placemarks = [
            self._decode_placemark(pm, i)
            for i, pm in enumerate(iter_named(root, "Placemark"))
        ]

        candidates: List[PointCandidate] = []
        line_indexes: List[int] = []
        for placemark in placemarks:
            for point in placemark.line_points:
                line_indexes.append(len(candidates))
                candidates.append(point)
            candidates.extend(placemark.track_points)

        point_times = [
            pm.time for pm in placemarks
            if pm.time and not pm.has_line_geometry
        ]
        if line_indexes and len(point_times) == len(line_indexes):
            logger.info(f"KML: mapped {len(point_times)} placemark times onto line")
            for idx, raw_time in zip(line_indexes, point_times):
                candidates[idx] = candidates[idx]._replace(
                    timestamp=parse_timestamp(raw_time)
                )

        document = next(iter_named(root, "Document"), None)
        doc_name = child_text(document, "name") if document is not None else None
        line_placemarks = [pm for pm in placemarks if pm.has_line_geometry]

        metadata = SourceMetadata(
            format=self.format,
            name=doc_name or (line_placemarks[0].name if line_placemarks else None),
            description=(
                child_text(document, "description") if document is not None else None
            ),
            track_count=len(line_placemarks),
        )
        return candidates, metadata

    def _decode_placemark(self, element: ET.Element, index: int) -> KmlPlacemark:
        placemark = KmlPlacemark(
            name=child_text(element, "name"),
            time=self._find_time_value(element),
        )
        context = f"placemark {index}"

        for line in iter_named(element, "LineString"):
            placemark.line_points.extend(
                self._parse_coordinates(child_text(line, "coordinates"), context)
            )

        for track in iter_named(element, "Track"):
            placemark.track_points.extend(self._parse_gx_track(track, context))

        return placemark

    @staticmethod
    def _find_time_value(element: ET.Element) -> Optional[str]:
        """First time-like value of a placemark, if any."""
        time_stamp = child(element, "TimeStamp")
        if time_stamp is not None:
            when = child_text(time_stamp, "when")
            if when:
                return when

        extended = child(element, "ExtendedData")
        if extended is None:
            return None

        for data in iter_named(extended, "Data"):
            if data.get("name") in KML_TIME_KEYS:
                value = child_text(data, "value")
                if value:
                    return value
        for data in iter_named(extended, "SimpleData"):
            if data.get("name") in KML_TIME_KEYS and data.text and data.text.strip():
                return data.text.strip()
        return None

    @staticmethod
    def _parse_coordinates(text: Optional[str], context: str) -> List[PointCandidate]:
        """Parse a <coordinates> body: whitespace separated lon,lat[,alt]."""
        if not text:
            return []

        points = []
        for i, token in enumerate(text.split()):
            parts = token.split(",")
            if len(parts) < 2 or not parts[0] or not parts[1]:
                # Kept as a position-less candidate so the base parser drops it
                logger.debug(f"KML: coordinate '{token}' in {context} has no position")
                points.append(PointCandidate(latitude=None, longitude=None))
                continue
            where = f"{context}, coordinate {i}"
            lon = parse_float(parts[0], "longitude", where)
            lat = parse_float(parts[1], "latitude", where)
            alt = parse_float(parts[2], "altitude", where) if len(parts) > 2 and parts[2] else None
            points.append(PointCandidate(latitude=lat, longitude=lon, elevation=alt))
        return points

    @staticmethod
    def _parse_gx_track(track: ET.Element, context: str) -> List[PointCandidate]:
        """Pair gx:coord ("lon lat alt") entries with <when> times."""
        whens: List[Optional[datetime]] = [
            parse_timestamp(w.text) for w in children(track, "when")
        ]
        coords = children(track, "coord")

        points = []
        for i, coord in enumerate(coords):
            parts = (coord.text or "").split()
            when = whens[i] if i < len(whens) else None
            if len(parts) < 2:
                points.append(PointCandidate(latitude=None, longitude=None, timestamp=when))
                continue
            where = f"{context}, gx:coord {i}"
            points.append(PointCandidate(
                latitude=parse_float(parts[1], "latitude", where),
                longitude=parse_float(parts[0], "longitude", where),
                elevation=parse_float(parts[2], "altitude", where) if len(parts) > 2 else None,
                timestamp=when,
            ))
        return points
