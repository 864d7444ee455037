"""
Internal track models.

Parsers produce these; they never leave the pipeline.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple, Optional, Tuple

from .schemas import SourceMetadata


class PointCandidate(NamedTuple):
    """A decoded point before validation; position may be missing."""
    latitude: Optional[float]
    longitude: Optional[float]
    elevation: Optional[float] = None
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class TrackPoint:
    """A single validated point in original file order."""
    longitude: float
    latitude: float
    elevation: Optional[float]
    timestamp: Optional[datetime]
    sequence_index: int


@dataclass(frozen=True)
class ParsedTrack:
    """Output of a format parser."""
    points: Tuple[TrackPoint, ...]
    metadata: SourceMetadata

    def __len__(self) -> int:
        return len(self.points)

    @property
    def has_timestamps(self) -> bool:
        return any(p.timestamp is not None for p in self.points)

    @property
    def has_elevation(self) -> bool:
        return any(p.elevation is not None for p in self.points)
