"""
Activity column mapping.

Flattens track statistics into the scalar columns the persistence
layer stores next to the geometry blob.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from waybinder.shared.timestamps import parse_timestamp

from .schemas import TrackStatistics


@dataclass
class ActivityGPSColumns:
    """Typed activity columns derived from TrackStatistics."""
    distance_km: float
    elevation_gain_m: float
    elevation_loss_m: float
    moving_time_seconds: float
    start_time: Optional[datetime]
    end_time: Optional[datetime]

    def to_dict(self) -> dict:
        """Convert to dict for the persistence layer."""
        return {
            "distance_km": round(self.distance_km, 3),
            "elevation_gain_m": round(self.elevation_gain_m, 1),
            "elevation_loss_m": round(self.elevation_loss_m, 1),
            "moving_time_seconds": round(self.moving_time_seconds),
            "start_time": self.start_time,
            "end_time": self.end_time,
        }


def to_activity_columns(statistics: TrackStatistics) -> ActivityGPSColumns:
    """
    Map statistics to activity columns.

    Start/end are None when the statistics only hold the fallback
    "now" time (track without timestamps).
    """
    has_time = statistics.has_time_data
    return ActivityGPSColumns(
        distance_km=statistics.total_distance,
        elevation_gain_m=statistics.elevation_gain,
        elevation_loss_m=statistics.elevation_loss,
        moving_time_seconds=statistics.moving_time,
        start_time=parse_timestamp(statistics.start_time) if has_time else None,
        end_time=parse_timestamp(statistics.end_time) if has_time else None,
    )
