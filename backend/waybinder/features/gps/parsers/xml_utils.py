"""Namespace-agnostic ElementTree helpers for the XML track formats."""

import math
import xml.etree.ElementTree as ET
from typing import Iterator, List, Optional

from ..exceptions import MalformedInput


def parse_xml(content: bytes, format_label: str) -> ET.Element:
    """Parse raw bytes into a root element or raise MalformedInput."""
    try:
        return ET.fromstring(content)
    except ET.ParseError as e:
        raise MalformedInput(f"Invalid {format_label} file: {e}") from e


def local_name(tag) -> str:
    """Tag name without its {namespace} prefix."""
    if not isinstance(tag, str):
        # Comments and processing instructions
        return ""
    return tag.rsplit("}", 1)[-1]


def children(element: ET.Element, name: str) -> List[ET.Element]:
    """Direct children with the given local name."""
    return [c for c in element if local_name(c.tag) == name]


def child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for c in element:
        if local_name(c.tag) == name:
            return c
    return None


def child_text(element: ET.Element, name: str) -> Optional[str]:
    found = child(element, name)
    if found is None or found.text is None:
        return None
    text = found.text.strip()
    return text or None


def iter_named(element: ET.Element, name: str) -> Iterator[ET.Element]:
    """All descendants (document order) with the given local name."""
    for e in element.iter():
        if local_name(e.tag) == name:
            yield e


def parse_float(
    value: Optional[str],
    field_name: str,
    context: str
) -> Optional[float]:
    """Decode an optional numeric field; invalid or non-finite text is a MalformedInput."""
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError as e:
        raise MalformedInput(
            f"Invalid {field_name} value '{value}' in {context}"
        ) from e
    if not math.isfinite(number):
        raise MalformedInput(
            f"Invalid {field_name} value '{value}' in {context}: not a finite number"
        )
    return number
