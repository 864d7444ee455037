"""
GPS processing errors.

Hard errors (UnsupportedFormat, MalformedInput) fail a single upload.
PartialDataWarning marks soft problems that only degrade the result.
"""


class GPSProcessingError(Exception):
    """Base class for errors that fail a GPS upload."""


class UnsupportedFormat(GPSProcessingError):
    """File extension is not one of the supported track formats."""

    def __init__(self, extension: str):
        self.extension = extension
        shown = extension or "<none>"
        super().__init__(
            f"Unsupported file type: {shown}. "
            f"Please upload a GPX, KML, FIT, or TCX file"
        )


class MalformedInput(GPSProcessingError):
    """Bytes don't decode for the claimed format or hold no usable points."""


class PartialDataWarning(UserWarning):
    """Track data is incomplete but still usable (missing times, etc.)."""
