"""The SAML protocol ``Response`` message."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime

from samlkit.assertion import Assertion, Status
from samlkit.issuer import Issuer
from samlkit.signature import Signature
from samlkit.xmlbase import (
    ParseError,
    _element,
    find_child,
    format_instant,
    parse_instant,
    parse_xml,
)

NAME = "saml2p:Response"
SCHEMA = ("xmlns:saml2p", "urn:oasis:names:tc:SAML:2.0:protocol")
DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


def _required_attr(element: ET.Element, name: str) -> str:
    value = element.get(name)
    if value is None:
        raise ParseError(f"Response is missing attribute {name}")
    return value


@dataclass
class Response:
    """An identity provider's answer to an authentication request."""

    id: str
    version: str
    issue_instant: datetime
    status: Status
    in_response_to: str | None = None
    destination: str | None = None
    consent: str | None = None
    issuer: Issuer | None = None
    signature: Signature | None = None
    encrypted_assertion: str | None = None
    assertion: Assertion | None = None

    def to_xml(self) -> str:
        attrs = [
            SCHEMA,
            ("ID", self.id),
            ("InResponseTo", self.in_response_to),
            ("Version", self.version),
            ("IssueInstant", format_instant(self.issue_instant, True)),
            ("Destination", self.destination),
            ("Consent", self.consent),
        ]
        parts = []
        if self.issuer is not None:
            parts.append(self.issuer.to_xml())
        if self.signature is not None:
            parts.append(self.signature.to_xml())
        parts.append(self.status.to_xml())
        if self.assertion is not None:
            parts.append(self.assertion.to_xml())
        return DECLARATION + _element(NAME, attrs, "".join(parts))

    @classmethod
    def from_element(cls, element: ET.Element) -> Response:
        status = find_child(element, "Status")
        if status is None:
            raise ParseError("Response is missing element Status")
        issuer = find_child(element, "Issuer")
        signature = find_child(element, "Signature")
        encrypted = find_child(element, "EncryptedAssertion")
        assertion = find_child(element, "Assertion")
        return cls(
            id=_required_attr(element, "ID"),
            version=_required_attr(element, "Version"),
            issue_instant=parse_instant(_required_attr(element, "IssueInstant")),
            status=Status.from_element(status),
            in_response_to=element.get("InResponseTo"),
            destination=element.get("Destination"),
            consent=element.get("Consent"),
            issuer=None if issuer is None else Issuer.from_element(issuer),
            signature=None if signature is None else Signature.from_element(signature),
            encrypted_assertion=(
                None if encrypted is None else ET.tostring(encrypted, encoding="unicode")
            ),
            assertion=None if assertion is None else Assertion.from_element(assertion),
        )

    @classmethod
    def from_xml(cls, text: str | bytes) -> Response:
        """Parse a serialized response document."""
        return cls.from_element(parse_xml(text))