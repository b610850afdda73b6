"""The SAML ``Issuer`` element."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass

from samlkit.xmlbase import _element, _text

NAME = "saml2:Issuer"
SCHEMA = ("xmlns:saml2", "urn:oasis:names:tc:SAML:2.0:assertion")


@dataclass
class Issuer:
    """Names the entity that issued a message or assertion."""

    name_qualifier: str | None = None
    sp_name_qualifier: str | None = None
    format: str | None = None
    sp_provided_id: str | None = None
    value: str | None = None

    def to_xml(self) -> str:
        attrs = [
            SCHEMA,
            ("NameQualifier", self.name_qualifier),
            ("SPNameQualifier", self.sp_name_qualifier),
            ("Format", self.format),
            ("SPProvidedID", self.sp_provided_id),
        ]
        content = _escape_text(self.value)
        return _element(NAME, attrs, content)

    @classmethod
    def from_element(cls, element: ET.Element) -> Issuer:
        return cls(
            name_qualifier=element.get("NameQualifier"),
            sp_name_qualifier=element.get("SPNameQualifier"),
            format=element.get("Format"),
            sp_provided_id=element.get("SPProvidedID"),
            value=_text(element),
        )


def _escape_text(value: str | None) -> str:
    from samlkit.xmlbase import _escape

    return "" if value is None else _escape(value)