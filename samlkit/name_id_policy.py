"""The SAML protocol ``NameIDPolicy`` element."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass

from samlkit.xmlbase import ParseError, _empty_element

NAME = "saml2p:NameIDPolicy"


def _parse_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    text = value.strip()
    if text in ("true", "1"):
        return True
    if text in ("false", "0"):
        return False
    raise ParseError(f"invalid boolean: {value!r}")


@dataclass
class NameIdPolicy:
    """Constraints on the name identifier the identity provider returns."""

    format: str | None = None
    sp_name_qualifier: str | None = None
    allow_create: bool | None = None

    def to_xml(self) -> str:
        allow = None if self.allow_create is None else str(self.allow_create).lower()
        attrs = [
            ("Format", self.format),
            ("SPNameQualifier", self.sp_name_qualifier),
            ("AllowCreate", allow),
        ]
        return _empty_element(NAME, attrs)

    @classmethod
    def from_element(cls, element: ET.Element) -> NameIdPolicy:
        return cls(
            format=element.get("Format"),
            sp_name_qualifier=element.get("SPNameQualifier"),
            allow_create=_parse_bool(element.get("AllowCreate")),
        )