"""
Track format parsers.

One parser per supported format, selected by file extension.

Usage:
    from waybinder.features.gps.parsers import get_parser
    track = get_parser("gpx").parse(content)
"""

from typing import Dict, Optional, Union

from waybinder.shared.constants import TrackFormat

from ..exceptions import UnsupportedFormat
from .base import TrackParser
from .fit import FITTrackParser, FitRecord
from .gpx import GPXTrackParser
from .kml import KMLTrackParser
from .tcx import TCXTrackParser

PARSERS: Dict[TrackFormat, TrackParser] = {
    TrackFormat.GPX: GPXTrackParser(),
    TrackFormat.KML: KMLTrackParser(),
    TrackFormat.FIT: FITTrackParser(),
    TrackFormat.TCX: TCXTrackParser(),
}


def resolve_format(extension: Optional[Union[str, TrackFormat]]) -> TrackFormat:
    """
    Map a file extension hint to a TrackFormat.

    Case-insensitive; a leading dot is ignored.

    Raises:
        UnsupportedFormat: If the extension is not gpx/kml/fit/tcx
    """
    if isinstance(extension, TrackFormat):
        return extension

    normalized = (extension or "").strip().lower().lstrip(".")
    try:
        return TrackFormat(normalized)
    except ValueError:
        raise UnsupportedFormat(normalized)


def extension_from_filename(filename: Optional[str]) -> str:
    """Extension of an uploaded filename ('' when there is none)."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def get_parser(extension: Union[str, TrackFormat]) -> TrackParser:
    """Parser for the given extension or format."""
    return PARSERS[resolve_format(extension)]


__all__ = [
    "TrackParser",
    "GPXTrackParser",
    "KMLTrackParser",
    "FITTrackParser",
    "FitRecord",
    "TCXTrackParser",
    "PARSERS",
    "resolve_format",
    "extension_from_filename",
    "get_parser",
]
