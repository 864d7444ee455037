"""
Shared fixtures: sample track files for every supported format.
"""

import struct
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

import pytest

from waybinder.features.gps import (
    Feature,
    FeatureCollection,
    FeatureProperties,
    LineString,
)


# =============================================================================
# Sample documents
# =============================================================================

# Three points ~110 m apart, one minute between fixes
SAMPLE_GPX_POINTS = [
    # (lat, lon, ele, time)
    (46.5000, 7.0000, 1000.0, "2024-06-01T08:00:00Z"),
    (46.5010, 7.0000, 1050.0, "2024-06-01T08:01:00Z"),
    (46.5010, 7.0015, 1020.0, "2024-06-01T08:02:00Z"),
]

SAMPLE_GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="TestDevice" xmlns="http://www.topografix.com/GPX/1/1">
  <trk>
    <name>Morning Trek</name>
    <type>hiking</type>
    <trkseg>
      <trkpt lat="46.5000" lon="7.0000"><ele>1000</ele><time>2024-06-01T08:00:00Z</time></trkpt>
      <trkpt lat="46.5010" lon="7.0000"><ele>1050</ele><time>2024-06-01T08:01:00Z</time></trkpt>
      <trkpt lat="46.5010" lon="7.0015"><ele>1020</ele><time>2024-06-01T08:02:00Z</time></trkpt>
    </trkseg>
  </trk>
</gpx>
"""

SAMPLE_GPX_TWO_TRACKS = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="TestDevice" xmlns="http://www.topografix.com/GPX/1/1">
  <trk>
    <name>Day 1</name>
    <trkseg>
      <trkpt lat="46.5000" lon="7.0000"><ele>1000</ele></trkpt>
      <trkpt lat="46.5010" lon="7.0000"><ele>1010</ele></trkpt>
    </trkseg>
  </trk>
  <trk>
    <name>Day 2</name>
    <trkseg>
      <trkpt lat="46.6000" lon="7.1000"><ele>1200</ele></trkpt>
    </trkseg>
    <trkseg>
      <trkpt lat="46.6010" lon="7.1000"/>
    </trkseg>
  </trk>
</gpx>
"""

SAMPLE_GPX_ROUTE_ONLY = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="Planner" xmlns="http://www.topografix.com/GPX/1/1">
  <rte>
    <name>Planned</name>
    <rtept lat="45.0" lon="6.0"><ele>500</ele></rtept>
    <rtept lat="45.1" lon="6.0"><ele>600</ele></rtept>
  </rte>
</gpx>
"""

EMPTY_TRACK_GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="TestDevice" xmlns="http://www.topografix.com/GPX/1/1">
  <trk></trk>
</gpx>
"""

SAMPLE_KML = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <name>Ridge Walk</name>
    <Placemark>
      <name>Route</name>
      <LineString>
        <coordinates>
          7.0000,46.5000,1000 7.0000,46.5010,1050
          7.0015,46.5010,1020
        </coordinates>
      </LineString>
    </Placemark>
  </Document>
</kml>
"""

SAMPLE_KML_GX_TRACK = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2" xmlns:gx="http://www.google.com/kml/ext/2.2">
  <Document>
    <Placemark>
      <name>Recorded</name>
      <gx:Track>
        <when>2024-06-01T08:00:00Z</when>
        <when>2024-06-01T08:01:00Z</when>
        <gx:coord>7.0000 46.5000 1000</gx:coord>
        <gx:coord>7.0000 46.5010 1050</gx:coord>
      </gx:Track>
    </Placemark>
  </Document>
</kml>
"""

SAMPLE_KML_POINT_TIMES = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <Placemark>
      <LineString><coordinates>7.0,46.5 7.0,46.501</coordinates></LineString>
    </Placemark>
    <Placemark>
      <TimeStamp><when>2024-06-01T08:00:00Z</when></TimeStamp>
      <Point><coordinates>7.0,46.5</coordinates></Point>
    </Placemark>
    <Placemark>
      <ExtendedData><Data name="Time"><value>2024-06-01T08:01:00Z</value></Data></ExtendedData>
      <Point><coordinates>7.0,46.501</coordinates></Point>
    </Placemark>
  </Document>
</kml>
"""

SAMPLE_TCX = """<?xml version="1.0" encoding="UTF-8"?>
<TrainingCenterDatabase xmlns="http://www.garmin.com/xmlschemas/TrainingCenterDatabase/v2">
  <Activities>
    <Activity Sport="Biking">
      <Id>2024-06-01T08:00:00Z</Id>
      <Lap StartTime="2024-06-01T08:00:00Z">
        <Track>
          <Trackpoint>
            <Time>2024-06-01T08:00:00Z</Time>
            <Position><LatitudeDegrees>46.5000</LatitudeDegrees><LongitudeDegrees>7.0000</LongitudeDegrees></Position>
            <AltitudeMeters>1000</AltitudeMeters>
          </Trackpoint>
          <Trackpoint>
            <Time>2024-06-01T08:00:30Z</Time>
            <HeartRateBpm><Value>120</Value></HeartRateBpm>
          </Trackpoint>
          <Trackpoint>
            <Time>2024-06-01T08:01:00Z</Time>
            <Position><LatitudeDegrees>46.5010</LatitudeDegrees><LongitudeDegrees>7.0000</LongitudeDegrees></Position>
          </Trackpoint>
        </Track>
      </Lap>
      <Lap StartTime="2024-06-01T08:01:00Z">
        <Track>
          <Trackpoint>
            <Time>2024-06-01T08:02:00Z</Time>
            <Position><LatitudeDegrees>46.5010</LatitudeDegrees><LongitudeDegrees>7.0015</LongitudeDegrees></Position>
            <AltitudeMeters>1020</AltitudeMeters>
          </Trackpoint>
        </Track>
      </Lap>
      <Creator><Name>Edge 530</Name></Creator>
    </Activity>
  </Activities>
</TrainingCenterDatabase>
"""


# =============================================================================
# FIT builder
# =============================================================================

FIT_EPOCH_OFFSET = 631065600  # 1989-12-31T00:00:00Z as unix time

_FIT_CRC_TABLE = [
    0x0000, 0xCC01, 0xD801, 0x1400, 0xF001, 0x3C00, 0x2800, 0xE401,
    0xA001, 0x6C00, 0x7800, 0xB401, 0x5000, 0x9C01, 0x8801, 0x4400,
]


def _fit_crc(data: bytes) -> int:
    crc = 0
    for byte in data:
        tmp = _FIT_CRC_TABLE[crc & 0xF]
        crc = (crc >> 4) & 0x0FFF
        crc = crc ^ tmp ^ _FIT_CRC_TABLE[byte & 0xF]
        tmp = _FIT_CRC_TABLE[crc & 0xF]
        crc = (crc >> 4) & 0x0FFF
        crc = crc ^ tmp ^ _FIT_CRC_TABLE[(byte >> 4) & 0xF]
    return crc


def degrees_to_semicircles(value: float) -> int:
    return int(round(value * (2 ** 31) / 180.0))


FitPoint = Tuple[Optional[float], Optional[float], Optional[float], Optional[datetime]]


def build_fit_file(points: Sequence[FitPoint], sport: Optional[int] = 1) -> bytes:
    """
    Build a minimal FIT activity: one record message per point.

    Each point is (lat, lon, altitude_m, time); None writes the FIT
    "invalid" value for that field.
    """
    data = bytearray()

    # Definition: local 0 -> global 20 (record)
    data += struct.pack("<BBBHB", 0x40, 0, 0, 20, 4)
    data += bytes([253, 4, 0x86])   # timestamp, uint32
    data += bytes([0, 4, 0x85])     # position_lat, sint32
    data += bytes([1, 4, 0x85])     # position_long, sint32
    data += bytes([2, 2, 0x84])     # altitude, uint16 (scale 5, offset 500)

    for lat, lon, alt, time in points:
        ts = (
            int(time.timestamp()) - FIT_EPOCH_OFFSET if time is not None else 0xFFFFFFFF
        )
        lat_raw = degrees_to_semicircles(lat) if lat is not None else 0x7FFFFFFF
        lon_raw = degrees_to_semicircles(lon) if lon is not None else 0x7FFFFFFF
        alt_raw = int(round((alt + 500) * 5)) if alt is not None else 0xFFFF
        data += struct.pack("<BIiiH", 0x00, ts, lat_raw, lon_raw, alt_raw)

    if sport is not None:
        # Definition: local 1 -> global 18 (session), sport enum
        data += struct.pack("<BBBHB", 0x41, 0, 0, 18, 1)
        data += bytes([5, 1, 0x00])
        data += struct.pack("<BB", 0x01, sport)

    header = struct.pack("<BBHI4sH", 14, 0x10, 2093, len(data), b".FIT", 0)
    body = header + bytes(data)
    return body + struct.pack("<H", _fit_crc(body))


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


# =============================================================================
# Geometry helpers
# =============================================================================

def make_geometry(
    coordinates: List[Tuple[float, float, Optional[float]]],
    times: Optional[List[Optional[str]]] = None
) -> FeatureCollection:
    """Single LineString feature collection."""
    return FeatureCollection(features=(
        Feature(
            properties=FeatureProperties(
                coord_times=tuple(times) if times is not None else None
            ),
            geometry=LineString(coordinates=coordinates),
        ),
    ))


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def gpx_bytes() -> bytes:
    return SAMPLE_GPX.encode("utf-8")


@pytest.fixture
def kml_bytes() -> bytes:
    return SAMPLE_KML.encode("utf-8")


@pytest.fixture
def tcx_bytes() -> bytes:
    return SAMPLE_TCX.encode("utf-8")


@pytest.fixture
def fit_bytes() -> bytes:
    return build_fit_file([
        (46.5000, 7.0000, 1000.0, utc(2024, 6, 1, 8, 0, 0)),
        (None, None, 1010.0, utc(2024, 6, 1, 8, 0, 30)),
        (46.5010, 7.0000, None, utc(2024, 6, 1, 8, 1, 0)),
        (46.5010, 7.0015, 1020.0, None),
    ])


@pytest.fixture
def fixed_now() -> datetime:
    return utc(2030, 1, 1, 12, 0, 0)
