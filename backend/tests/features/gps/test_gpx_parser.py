"""
Tests for GPXTrackParser.
"""

from datetime import datetime, timezone

import pytest

from conftest import (
    EMPTY_TRACK_GPX,
    SAMPLE_GPX_ROUTE_ONLY,
    SAMPLE_GPX_TWO_TRACKS,
)
from waybinder.features.gps import MalformedInput
from waybinder.features.gps.parsers import GPXTrackParser
from waybinder.features.gps.parsers.gpx import drop_unpositioned_points
from waybinder.shared.constants import TrackFormat


@pytest.fixture
def parser():
    return GPXTrackParser()


class TestGPXParsing:
    """Happy path parsing."""

    def test_points_in_file_order(self, parser, gpx_bytes):
        track = parser.parse(gpx_bytes)

        assert len(track) == 3
        assert [(p.latitude, p.longitude) for p in track.points] == [
            (46.5, 7.0), (46.501, 7.0), (46.501, 7.0015),
        ]
        assert [p.sequence_index for p in track.points] == [0, 1, 2]

    def test_elevation_and_time(self, parser, gpx_bytes):
        first = parser.parse(gpx_bytes).points[0]

        assert first.elevation == 1000.0
        assert first.timestamp == datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc)

    def test_metadata(self, parser, gpx_bytes):
        metadata = parser.parse(gpx_bytes).metadata

        assert metadata.format == TrackFormat.GPX
        assert metadata.name == "Morning Trek"
        assert metadata.creator == "TestDevice"
        assert metadata.sport == "hiking"
        assert metadata.track_count == 1
        assert metadata.point_count == 3

    def test_multiple_tracks_flattened(self, parser):
        track = parser.parse(SAMPLE_GPX_TWO_TRACKS.encode())

        assert len(track) == 4
        assert track.metadata.track_count == 2
        assert track.metadata.name == "Day 1"
        assert [p.latitude for p in track.points] == [46.5, 46.501, 46.6, 46.601]

    def test_missing_elevation_and_time_are_none(self, parser):
        track = parser.parse(SAMPLE_GPX_TWO_TRACKS.encode())

        assert track.points[-1].elevation is None
        assert all(p.timestamp is None for p in track.points)
        assert not track.has_timestamps

    def test_route_fallback(self, parser):
        track = parser.parse(SAMPLE_GPX_ROUTE_ONLY.encode())

        assert len(track) == 2
        assert track.points[1].elevation == 600.0


class TestGPXErrors:
    """Malformed input is rejected with MalformedInput."""

    def test_empty_track(self, parser):
        with pytest.raises(MalformedInput, match="No track points"):
            parser.parse(EMPTY_TRACK_GPX.encode())

    def test_not_xml(self, parser):
        with pytest.raises(MalformedInput):
            parser.parse(b"this is not a gpx file")

    def test_empty_bytes(self, parser):
        with pytest.raises(MalformedInput, match="empty"):
            parser.parse(b"")

    def test_not_utf8(self, parser):
        with pytest.raises(MalformedInput):
            parser.parse(b"\xff\xfe\x00<gpx")


GPX_MISSING_LAT = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="TestDevice" xmlns="http://www.topografix.com/GPX/1/1">
  <trk>
    <name>Gappy</name>
    <trkseg>
      <trkpt lat="46.5000" lon="7.0000"><ele>1000</ele></trkpt>
      <trkpt lon="7.0005"><ele>1020</ele></trkpt>
      <trkpt lat="46.5010" lon="7.0010"><ele>1040</ele></trkpt>
    </trkseg>
  </trk>
</gpx>
"""


class TestGPXUnpositionedPoints:
    """Points without lat/lon are dropped instead of failing the file."""

    def test_point_without_lat_dropped(self, parser):
        track = parser.parse(GPX_MISSING_LAT.encode())

        assert len(track) == 2
        assert [p.elevation for p in track.points] == [1000.0, 1040.0]
        assert [p.sequence_index for p in track.points] == [0, 1]

    def test_metadata_survives_filtering(self, parser):
        metadata = parser.parse(GPX_MISSING_LAT.encode()).metadata

        assert metadata.name == "Gappy"
        assert metadata.creator == "TestDevice"

    def test_only_unpositioned_points(self, parser):
        content = GPX_MISSING_LAT.replace('lat="46.5000" ', "").replace('lat="46.5010" ', "")
        with pytest.raises(MalformedInput, match="No track points"):
            parser.parse(content.encode())

    def test_complete_document_left_untouched(self, gpx_bytes):
        text = gpx_bytes.decode()
        assert drop_unpositioned_points(text) is text
