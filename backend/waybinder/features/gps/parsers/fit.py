"""
FIT File Parser

Decodes Garmin/ANT+ FIT files with the fitparse library.

Only `record` messages carrying both position_lat and position_long
become points. Positions are stored as semicircles and converted to
degrees; missing altitude/timestamp stay None, never zero.
"""

import io
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from fitparse import FitFile
from fitparse.utils import FitParseError

from waybinder.shared.constants import TrackFormat
from waybinder.shared.geo import semicircles_to_degrees

from ..exceptions import MalformedInput
from ..models import PointCandidate
from ..schemas import SourceMetadata
from .base import TrackParser

logger = logging.getLogger(__name__)


@dataclass
class FitRecord:
    """Fields of a FIT `record` message used for the track."""
    position_lat: Optional[int]
    position_long: Optional[int]
    altitude: Optional[float]
    timestamp: Optional[datetime]

    @classmethod
    def from_values(cls, values: Dict[str, Any]) -> "FitRecord":
        altitude = values.get("enhanced_altitude")
        if altitude is None:
            altitude = values.get("altitude")

        timestamp = values.get("timestamp")
        return cls(
            position_lat=values.get("position_lat"),
            position_long=values.get("position_long"),
            altitude=float(altitude) if altitude is not None else None,
            timestamp=timestamp if isinstance(timestamp, datetime) else None,
        )

    @property
    def has_position(self) -> bool:
        return self.position_lat is not None and self.position_long is not None

    def to_candidate(self) -> PointCandidate:
        return PointCandidate(
            latitude=semicircles_to_degrees(self.position_lat),
            longitude=semicircles_to_degrees(self.position_long),
            elevation=self.altitude,
            timestamp=self.timestamp,
        )


class FITTrackParser(TrackParser):
    """Parser for binary FIT activity files."""

    format = TrackFormat.FIT

    def extract(
        self,
        content: bytes
    ) -> Tuple[Iterable[PointCandidate], SourceMetadata]:
        records: List[FitRecord] = []
        sport: Optional[str] = None
        skipped = 0

        try:
            # Lenient decode: CRC mismatches are common in exported files
            fitfile = FitFile(io.BytesIO(content), check_crc=False)

            for message in fitfile.get_messages():
                if message.name == "record":
                    record = FitRecord.from_values(message.get_values())
                    if record.has_position:
                        records.append(record)
                    else:
                        skipped += 1
                elif message.name in ("session", "sport") and sport is None:
                    value = message.get_values().get("sport")
                    sport = str(value) if value is not None else None
        except FitParseError as e:
            logger.error(f"Failed to parse FIT: {e}")
            raise MalformedInput(f"Invalid FIT file: {e}") from e

        if skipped:
            logger.debug(f"FIT: skipped {skipped} records without position")

        metadata = SourceMetadata(
            format=self.format,
            name=sport or "Activity",
            sport=sport,
            track_count=1 if records else 0,
        )
        return [r.to_candidate() for r in records], metadata
