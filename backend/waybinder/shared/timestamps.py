"""Timestamp parsing and ISO-8601 formatting (always UTC)."""

from datetime import datetime, timezone
from typing import Optional


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso8601(value: datetime) -> str:
    """Format as ISO-8601 in UTC with a trailing Z."""
    return ensure_utc(value).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 string into an aware UTC datetime.

    Returns None for empty or unparseable values instead of raising,
    since per-point times are optional everywhere in a track.
    """
    if not value:
        return None

    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"

    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def normalize_timestamp(value: Optional[str]) -> Optional[str]:
    """Re-format a raw time string as UTC ISO-8601, or None if invalid."""
    parsed = parse_timestamp(value)
    return to_iso8601(parsed) if parsed else None
