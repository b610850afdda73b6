"""Shared XML helpers for the SAML schema types."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

_INSTANT = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})"
    r"(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})"
)


class ParseError(ValueError):
    """Raised when a SAML document or one of its values cannot be read."""


def format_instant(value: datetime, millis: bool = False) -> str:
    """Render a timestamp as RFC 3339 in UTC with a trailing ``Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    if millis:
        text += f".{value.microsecond // 1000:03d}"
    return text + "Z"


def parse_instant(text: str) -> datetime:
    """Read an RFC 3339 timestamp and return it as an aware UTC datetime."""
    match = _INSTANT.fullmatch(text.strip())
    if match is None:
        raise ParseError(f"invalid timestamp: {text!r}")
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    micro = int((fraction or "")[:6].ljust(6, "0"))
    if offset in ("Z", "z"):
        delta = timedelta(0)
    else:
        sign = -1 if offset[0] == "-" else 1
        delta = sign * timedelta(hours=int(offset[1:3]), minutes=int(offset[4:6]))
    try:
        stamp = datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), micro,
            tzinfo=timezone(delta),
        )
    except ValueError as exc:
        raise ParseError(f"invalid timestamp: {text!r}") from exc
    return stamp.astimezone(timezone.utc)


def local_name(tag: str) -> str:
    """Strip a namespace URI or prefix from an element or attribute name."""
    if tag.startswith("{"):
        tag = tag.partition("}")[2]
    return tag.rpartition(":")[2]


def find_child(element: ET.Element, name: str) -> ET.Element | None:
    """Return the first direct child whose local name is ``name``."""
    return next((child for child in element if local_name(child.tag) == name), None)


def find_children(element: ET.Element, name: str) -> list[ET.Element]:
    """Return every direct child whose local name is ``name``, in order."""
    return [child for child in element if local_name(child.tag) == name]


def parse_xml(text: str | bytes) -> ET.Element:
    """Parse a document and return its root element."""
    try:
        return ET.fromstring(text)
    except ET.ParseError as exc:
        raise ParseError(f"malformed XML: {exc}") from exc


def _escape(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _attrs(attrs: Iterable[tuple[str, str | None]]) -> str:
    return "".join(f' {key}="{_escape(value)}"' for key, value in attrs if value is not None)


def _element(name: str, attrs: Iterable[tuple[str, str | None]] = (), content: str = "") -> str:
    return f"<{name}{_attrs(attrs)}>{content}</{name}>"


def _empty_element(name: str, attrs: Iterable[tuple[str, str | None]] = ()) -> str:
    return f"<{name}{_attrs(attrs)}/>"


def _text(element: ET.Element) -> str | None:
    text = (element.text or "").strip()
    return text or None


def _instant_attr(element: ET.Element, name: str) -> datetime | None:
    value = element.get(name)
    return None if value is None else parse_instant(value)