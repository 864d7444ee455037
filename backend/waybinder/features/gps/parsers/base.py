"""
Base Track Parser

Abstract base class for all GPS file format parsers.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple

from waybinder.shared.constants import TrackFormat
from waybinder.shared.geo import is_valid_position
from waybinder.shared.timestamps import ensure_utc

from ..exceptions import MalformedInput
from ..models import ParsedTrack, PointCandidate, TrackPoint
from ..schemas import SourceMetadata

logger = logging.getLogger(__name__)


class TrackParser(ABC):
    """
    Abstract base class for track parsers.

    Each parser decodes one file format into point candidates.
    The base class validates them, keeps file order and rejects
    files without a single usable point.
    """

    @property
    @abstractmethod
    def format(self) -> TrackFormat:
        """Format handled by this parser."""
        pass

    @abstractmethod
    def extract(
        self,
        content: bytes
    ) -> Tuple[Iterable[PointCandidate], SourceMetadata]:
        """
        Decode raw file content.

        Args:
            content: Raw file bytes

        Returns:
            Tuple of (point candidates in file order, source metadata)

        Raises:
            MalformedInput: If content is not valid for this format
        """
        pass

    @property
    def label(self) -> str:
        return self.format.value.upper()

    def parse(self, content: bytes) -> ParsedTrack:
        """
        Parse file content into an ordered track.

        Raises:
            MalformedInput: If the file is invalid or has no usable points
        """
        if not content:
            raise MalformedInput(f"{self.label} file is empty")

        candidates, metadata = self.extract(content)
        points = self._to_track_points(candidates)

        if not points:
            raise MalformedInput(f"No track points found in {self.label} file")

        logger.info(f"Parsed {self.label}: {len(points)} points")

        metadata = metadata.model_copy(update={"point_count": len(points)})
        return ParsedTrack(points=tuple(points), metadata=metadata)

    def _to_track_points(
        self,
        candidates: Iterable[PointCandidate]
    ) -> List[TrackPoint]:
        """Drop points without a usable position, number the rest."""
        points: List[TrackPoint] = []
        dropped = 0

        for candidate in candidates:
            lat, lon = candidate.latitude, candidate.longitude
            if lat is None or lon is None or not is_valid_position(lat, lon):
                dropped += 1
                continue

            timestamp = candidate.timestamp
            points.append(TrackPoint(
                longitude=lon,
                latitude=lat,
                elevation=_finite_or_none(candidate.elevation),
                timestamp=ensure_utc(timestamp) if timestamp else None,
                sequence_index=len(points),
            ))

        if dropped:
            logger.debug(f"{self.label}: dropped {dropped} points without position")

        return points


def _finite_or_none(value: Optional[float]) -> Optional[float]:
    """NaN/inf elevations (e.g. "nan" in a GPX <ele>) count as missing."""
    if value is None or not math.isfinite(value):
        return None
    return value
