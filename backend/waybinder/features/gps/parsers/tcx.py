"""
TCX Parser

Walks Activities -> Activity -> Lap -> Track -> Trackpoint of a
Garmin Training Center file. Trackpoints without a Position are
dropped; altitude and time are optional.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from waybinder.shared.constants import TrackFormat
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
class TcxTrackpoint:
    """Fields of a <Trackpoint> element."""
    latitude: Optional[float]
    longitude: Optional[float]
    altitude: Optional[float]
    time: Optional[datetime]

    @classmethod
    def from_element(cls, element: ET.Element, context: str) -> "TcxTrackpoint":
        position = child(element, "Position")
        lat = lon = None
        if position is not None:
            lat = parse_float(child_text(position, "LatitudeDegrees"), "LatitudeDegrees", context)
            lon = parse_float(child_text(position, "LongitudeDegrees"), "LongitudeDegrees", context)

        return cls(
            latitude=lat,
            longitude=lon,
            altitude=parse_float(child_text(element, "AltitudeMeters"), "AltitudeMeters", context),
            time=parse_timestamp(child_text(element, "Time")),
        )

    def to_candidate(self) -> PointCandidate:
        return PointCandidate(
            latitude=self.latitude,
            longitude=self.longitude,
            elevation=self.altitude,
            timestamp=self.time,
        )


class TCXTrackParser(TrackParser):
    """Parser for TCX (TrainingCenterDatabase v2) files."""

    format = TrackFormat.TCX

    def extract(
        self,
        content: bytes
    ) -> Tuple[Iterable[PointCandidate], SourceMetadata]:
        root = parse_xml(content, self.label)
        if local_name(root.tag) != "TrainingCenterDatabase":
            raise MalformedInput(
                f"Invalid TCX file: unexpected root element <{local_name(root.tag)}>"
            )

        activities = list(iter_named(root, "Activity"))
        if not activities:
            raise MalformedInput("No activities found in TCX file")

        candidates: List[PointCandidate] = []
        track_count = 0
        index = 0
        for activity in activities:
            for lap in children(activity, "Lap"):
                for track in children(lap, "Track"):
                    track_count += 1
                    for element in children(track, "Trackpoint"):
                        point = TcxTrackpoint.from_element(element, f"trackpoint {index}")
                        candidates.append(point.to_candidate())
                        index += 1

        first = activities[0]
        metadata = SourceMetadata(
            format=self.format,
            name=first.get("Sport") or "Activity",
            sport=first.get("Sport"),
            creator=self._creator_name(first),
            track_count=track_count,
        )
        return candidates, metadata

    @staticmethod
    def _creator_name(activity: ET.Element) -> Optional[str]:
        creator = child(activity, "Creator")
        return child_text(creator, "Name") if creator is not None else None
