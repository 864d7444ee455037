"""
Tests for build_geometry.
"""

import pytest

from waybinder.features.gps import MalformedInput, build_geometry
from waybinder.features.gps.models import TrackPoint
from conftest import utc


def _point(i, lat, lon, ele=None, time=None):
    return TrackPoint(
        longitude=lon, latitude=lat, elevation=ele, timestamp=time, sequence_index=i
    )


class TestBuildGeometry:

    def test_single_line_feature(self):
        geometry = build_geometry([
            _point(0, 46.5, 7.0, 1000.0, utc(2024, 6, 1, 8, 0, 0)),
            _point(1, 46.501, 7.0, 1050.0, utc(2024, 6, 1, 8, 1, 0)),
        ], name="Morning Trek")

        assert geometry.type == "FeatureCollection"
        assert len(geometry.features) == 1
        feature = geometry.features[0]
        assert feature.geometry.type == "LineString"
        assert feature.properties.name == "Morning Trek"

    def test_coordinates_are_lon_lat_ele(self):
        geometry = build_geometry([_point(0, 46.5, 7.0, 1000.0), _point(1, 46.6, 7.1)])

        assert geometry.features[0].geometry.coordinates == (
            (7.0, 46.5, 1000.0),
            (7.1, 46.6, None),
        )

    def test_coord_times_parallel_to_coordinates(self):
        geometry = build_geometry([
            _point(0, 46.5, 7.0, time=utc(2024, 6, 1, 8, 0, 0)),
            _point(1, 46.6, 7.1),
        ])

        assert geometry.features[0].properties.coord_times == (
            "2024-06-01T08:00:00Z",
            None,
        )

    def test_serialized_alias(self):
        geometry = build_geometry([_point(0, 46.5, 7.0)])
        dumped = geometry.model_dump(by_alias=True)

        assert dumped["features"][0]["properties"]["coordTimes"] == (None,)

    def test_empty(self):
        with pytest.raises(MalformedInput):
            build_geometry([])
