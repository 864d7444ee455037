"""
GPS-related schemas.

Pydantic models for the geometry contract, track statistics and the
parse result handed to API handlers and the persistence layer.
All models are frozen: transforms build new instances.
"""

from typing import Annotated, Any, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from waybinder.shared.constants import TrackFormat

# (longitude, latitude, elevation or None)
Coordinate = Tuple[float, float, Optional[float]]


def _pad_coordinate(value: Any) -> Any:
    """Accept [lon, lat] and [lon, lat, ele, ...] as a 3-tuple."""
    if isinstance(value, (list, tuple)):
        if len(value) == 2:
            return (value[0], value[1], None)
        if len(value) > 3:
            return tuple(value[:3])
    return value


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# Geometry (GeoJSON)
# =============================================================================

class Point(_FrozenModel):
    type: Literal["Point"] = "Point"
    coordinates: Coordinate

    @field_validator("coordinates", mode="before")
    @classmethod
    def pad_coordinates(cls, v):
        return _pad_coordinate(v)


class LineString(_FrozenModel):
    type: Literal["LineString"] = "LineString"
    coordinates: Tuple[Coordinate, ...]

    @field_validator("coordinates", mode="before")
    @classmethod
    def pad_coordinates(cls, v):
        return [_pad_coordinate(c) for c in v]

    @property
    def paths(self) -> Tuple[Tuple[Coordinate, ...], ...]:
        return (self.coordinates,)


class MultiLineString(_FrozenModel):
    type: Literal["MultiLineString"] = "MultiLineString"
    coordinates: Tuple[Tuple[Coordinate, ...], ...]

    @field_validator("coordinates", mode="before")
    @classmethod
    def pad_coordinates(cls, v):
        return [[_pad_coordinate(c) for c in line] for line in v]

    @property
    def paths(self) -> Tuple[Tuple[Coordinate, ...], ...]:
        return self.coordinates


Geometry = Annotated[
    Union[Point, LineString, MultiLineString],
    Field(discriminator="type"),
]

LINE_GEOMETRY_TYPES = ("LineString", "MultiLineString")


class FeatureProperties(BaseModel):
    """Feature properties; coordTimes runs parallel to the coordinates."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    name: Optional[str] = None
    coord_times: Optional[Tuple[Optional[str], ...]] = Field(
        default=None, alias="coordTimes"
    )


class Feature(_FrozenModel):
    type: Literal["Feature"] = "Feature"
    properties: FeatureProperties = Field(default_factory=FeatureProperties)
    geometry: Geometry

    @property
    def is_line(self) -> bool:
        return self.geometry.type in LINE_GEOMETRY_TYPES

    def flat_coordinates(self) -> Tuple[Coordinate, ...]:
        """All coordinates of a line feature, paths concatenated."""
        if not self.is_line:
            return ()
        return tuple(c for path in self.geometry.paths for c in path)


class FeatureCollection(_FrozenModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: Tuple[Feature, ...] = ()

    def first_line_feature(self) -> Optional[Feature]:
        for feature in self.features:
            if feature.is_line:
                return feature
        return None


# =============================================================================
# Statistics and results
# =============================================================================

class TrackStatistics(_CamelModel):
    """Motion statistics derived from a track geometry."""

    # Distance / elevation
    total_distance: float = 0.0       # km
    elevation_gain: float = 0.0       # m
    elevation_loss: float = 0.0       # m
    max_elevation: float = 0.0        # m
    min_elevation: float = 0.0        # m

    # Time
    start_time: str
    end_time: str
    moving_time: float = 0.0          # s
    total_time: float = 0.0           # s

    # Speed
    average_speed: float = 0.0        # km/h
    max_speed: float = 0.0            # km/h
    pace: float = 0.0                 # s/km over moving time

    # Data availability; start/end times are "now" when has_time_data is False
    has_time_data: bool = False
    has_elevation_data: bool = False

    simplified_geometry: Optional[FeatureCollection] = None


class SourceMetadata(_CamelModel):
    """Descriptive metadata read from the source file."""

    format: TrackFormat
    name: Optional[str] = None
    description: Optional[str] = None
    creator: Optional[str] = None
    sport: Optional[str] = None
    track_count: int = 0
    point_count: int = 0


class ParsedData(_CamelModel):
    geometry: FeatureCollection
    statistics: TrackStatistics
    metadata: SourceMetadata


class ParseResult(_CamelModel):
    """Outcome of processing one uploaded file."""

    success: bool
    data: Optional[ParsedData] = None
    error: Optional[str] = None
    warnings: Tuple[str, ...] = ()

    @classmethod
    def ok(cls, data: ParsedData, warnings=()) -> "ParseResult":
        return cls(success=True, data=data, warnings=tuple(warnings))

    @classmethod
    def fail(cls, error: str) -> "ParseResult":
        return cls(success=False, error=error)


# =============================================================================
# Trackpoint listing
# =============================================================================

class Trackpoint(_FrozenModel):
    """Single point in a trackpoint listing."""

    index: int
    longitude: float
    latitude: float
    elevation: Optional[float] = None
    time: Optional[str] = None


class TrackpointPage(_FrozenModel):
    data: Tuple[Trackpoint, ...]
    total: int
    page: int
    limit: int
    pages: int


class TrackpointQuery(BaseModel):
    """Request body for listing the trackpoints of a stored geometry."""

    geometry: FeatureCollection
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=100, ge=1, le=10000)
    start: Optional[str] = None
    end: Optional[str] = None
