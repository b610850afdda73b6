"""SAML assertions, their statements, and protocol status elements."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime

from samlkit.conditions import Conditions
from samlkit.issuer import Issuer
from samlkit.signature import Signature
from samlkit.subject import Subject
from samlkit.xmlbase import (
    ParseError,
    _element,
    _empty_element,
    _escape,
    _instant_attr,
    _text,
    find_child,
    find_children,
    format_instant,
    parse_instant,
)

ASSERTION_NAME = "saml2:Assertion"
ASSERTION_SCHEMA = (
    ("xmlns:saml2", "urn:oasis:names:tc:SAML:2.0:assertion"),
    ("xmlns:xsd", "http://www.w3.org/2001/XMLSchema"),
)
ATTRIBUTE_NAME = "saml2:Attribute"
ATTRIBUTE_VALUE_NAME = "saml2:AttributeValue"
ATTRIBUTE_STATEMENT_NAME = "saml2:AttributeStatement"
ATTRIBUTE_STATEMENT_SCHEMA = ("xmlns:saml2", "urn:oasis:names:tc:SAML:2.0:assertion")
AUTHN_STATEMENT_NAME = "saml2:AuthnStatement"
AUTHN_CONTEXT_NAME = "saml2:AuthnContext"
AUTHN_CONTEXT_CLASS_REF_NAME = "saml2:AuthnContextClassRef"
STATUS_NAME = "saml2p:Status"
STATUS_CODE_NAME = "saml2p:StatusCode"


def _required_attr(element: ET.Element, name: str) -> str:
    value = element.get(name)
    if value is None:
        raise ParseError(f"{element.tag} is missing attribute {name}")
    return value


def _required_child(element: ET.Element, name: str) -> ET.Element:
    child = find_child(element, name)
    if child is None:
        raise ParseError(f"{element.tag} is missing element {name}")
    return child


def _optional_child(element: ET.Element, name: str, cls):
    child = find_child(element, name)
    return None if child is None else cls.from_element(child)


def _millis(value: datetime | None) -> str | None:
    return None if value is None else format_instant(value, True)


def _attr_or_text(element: ET.Element, name: str) -> str | None:
    value = element.get(name)
    return _text(element) if value is None else value


@dataclass
class Attribute:
    """A named attribute of the subject with its values."""

    name: str
    name_format: str | None = None
    friendly_name: str | None = None
    values: list[str] = field(default_factory=list)

    def to_xml(self) -> str:
        attrs = [
            ("Name", self.name),
            ("NameFormat", self.name_format),
            ("FriendlyName", self.friendly_name),
        ]
        content = "".join(
            _element(ATTRIBUTE_VALUE_NAME, (), _escape(value)) for value in self.values
        )
        return _element(ATTRIBUTE_NAME, attrs, content)

    @classmethod
    def from_element(cls, element: ET.Element) -> Attribute:
        return cls(
            name=_required_attr(element, "Name"),
            name_format=element.get("NameFormat"),
            friendly_name=element.get("FriendlyName"),
            values=[_text(child) or "" for child in find_children(element, "AttributeValue")],
        )


@dataclass
class AttributeStatement:
    """A group of attributes asserted about the subject."""

    attributes: list[Attribute] = field(default_factory=list)

    def to_xml(self) -> str:
        content = "".join(attr.to_xml() for attr in self.attributes)
        return _element(ATTRIBUTE_STATEMENT_NAME, [ATTRIBUTE_STATEMENT_SCHEMA], content)

    @classmethod
    def from_element(cls, element: ET.Element) -> AttributeStatement:
        return cls(
            attributes=[
                Attribute.from_element(child) for child in find_children(element, "Attribute")
            ]
        )


@dataclass
class SubjectLocality:
    """Where the subject authenticated from."""

    address: str | None = None
    dns_name: str | None = None

    @classmethod
    def from_element(cls, element: ET.Element) -> SubjectLocality:
        return cls(address=element.get("Address"), dns_name=element.get("DNSName"))


@dataclass
class AuthnContextClassRef:
    """A reference to an authentication context class."""

    value: str | None = None

    def to_xml(self) -> str:
        if self.value is None:
            return ""
        return _element(AUTHN_CONTEXT_CLASS_REF_NAME, (), _escape(self.value))

    @classmethod
    def from_element(cls, element: ET.Element) -> AuthnContextClassRef:
        return cls(value=_text(element))


@dataclass
class AuthnContext:
    """The context in which authentication took place."""

    value: AuthnContextClassRef | None = None

    def to_xml(self) -> str:
        if self.value is None:
            return ""
        return _element(AUTHN_CONTEXT_NAME, (), self.value.to_xml())

    @classmethod
    def from_element(cls, element: ET.Element) -> AuthnContext:
        return cls(value=_optional_child(element, "AuthnContextClassRef", AuthnContextClassRef))


@dataclass
class AuthnStatement:
    """States that the subject authenticated at a given time."""

    authn_instant: datetime | None = None
    session_index: str | None = None
    session_not_on_or_after: datetime | None = None
    subject_locality: SubjectLocality | None = None
    authn_context: AuthnContext | None = None

    def to_xml(self) -> str:
        attrs = [
            ("SessionIndex", self.session_index),
            ("AuthnInstant", _millis(self.authn_instant)),
            ("SessionNotOnOrAfter", _millis(self.session_not_on_or_after)),
        ]
        content = "" if self.authn_context is None else self.authn_context.to_xml()
        return _element(AUTHN_STATEMENT_NAME, attrs, content)

    @classmethod
    def from_element(cls, element: ET.Element) -> AuthnStatement:
        return cls(
            authn_instant=_instant_attr(element, "AuthnInstant"),
            session_index=element.get("SessionIndex"),
            session_not_on_or_after=_instant_attr(element, "SessionNotOnOrAfter"),
            subject_locality=_optional_child(element, "SubjectLocality", SubjectLocality),
            authn_context=_optional_child(element, "AuthnContext", AuthnContext),
        )


@dataclass
class StatusCode:
    """The top-level status code of a protocol message."""

    value: str | None = None

    def to_xml(self) -> str:
        return _empty_element(STATUS_CODE_NAME, [("Value", self.value)])

    @classmethod
    def from_element(cls, element: ET.Element) -> StatusCode:
        return cls(value=element.get("Value"))


@dataclass
class StatusMessage:
    """A human-readable status message."""

    value: str | None = None

    @classmethod
    def from_element(cls, element: ET.Element) -> StatusMessage:
        return cls(value=_attr_or_text(element, "Value"))


@dataclass
class StatusDetail:
    """Additional status information."""

    children: str | None = None

    @classmethod
    def from_element(cls, element: ET.Element) -> StatusDetail:
        return cls(children=_attr_or_text(element, "Children"))


@dataclass
class Status:
    """The outcome of a protocol request."""

    status_code: StatusCode
    status_message: StatusMessage | None = None
    status_detail: StatusDetail | None = None

    def to_xml(self) -> str:
        return _element(STATUS_NAME, (), self.status_code.to_xml())

    @classmethod
    def from_element(cls, element: ET.Element) -> Status:
        return cls(
            status_code=StatusCode.from_element(_required_child(element, "StatusCode")),
            status_message=_optional_child(element, "StatusMessage", StatusMessage),
            status_detail=_optional_child(element, "StatusDetail", StatusDetail),
        )


@dataclass
class Assertion:
    """Statements an identity provider makes about a subject."""

    id: str
    issue_instant: datetime
    version: str
    issuer: Issuer
    signature: Signature | None = None
    subject: Subject | None = None
    conditions: Conditions | None = None
    authn_statements: list[AuthnStatement] | None = None
    attribute_statements: list[AttributeStatement] | None = None

    def to_xml(self) -> str:
        attrs = [
            *ASSERTION_SCHEMA,
            ("ID", self.id),
            ("Version", self.version),
            ("IssueInstant", format_instant(self.issue_instant, True)),
        ]
        parts = [self.issuer.to_xml()]
        for part in (self.signature, self.subject, self.conditions):
            if part is not None:
                parts.append(part.to_xml())
        parts.extend(s.to_xml() for s in self.authn_statements or [])
        parts.extend(s.to_xml() for s in self.attribute_statements or [])
        return _element(ASSERTION_NAME, attrs, "".join(parts))

    @classmethod
    def from_element(cls, element: ET.Element) -> Assertion:
        authn = [
            AuthnStatement.from_element(child)
            for child in find_children(element, "AuthnStatement")
        ]
        attribute = [
            AttributeStatement.from_element(child)
            for child in find_children(element, "AttributeStatement")
        ]
        return cls(
            id=_required_attr(element, "ID"),
            issue_instant=parse_instant(_required_attr(element, "IssueInstant")),
            version=_required_attr(element, "Version"),
            issuer=Issuer.from_element(_required_child(element, "Issuer")),
            signature=_optional_child(element, "Signature", Signature),
            subject=_optional_child(element, "Subject", Subject),
            conditions=_optional_child(element, "Conditions", Conditions),
            authn_statements=authn or None,
            attribute_statements=attribute or None,
        )


def _session_index(element: ET.Element) -> str | None:
    child = find_child(element, "SessionIndex")
    if child is not None:
        return _text(child)
    return element.get("SessionIndex")


@dataclass
class LogoutRequest:
    """A request to end a session."""

    id: str | None = None
    version: str | None = None
    issue_instant: datetime | None = None
    destination: str | None = None
    issuer: Issuer | None = None
    signature: Signature | None = None
    session_index: str | None = None

    @classmethod
    def from_element(cls, element: ET.Element) -> LogoutRequest:
        return cls(
            id=element.get("ID"),
            version=element.get("Version"),
            issue_instant=_instant_attr(element, "IssueInstant"),
            destination=element.get("Destination"),
            issuer=_optional_child(element, "Issuer", Issuer),
            signature=_optional_child(element, "Signature", Signature),
            session_index=_session_index(element),
        )


@dataclass
class LogoutResponse:
    """The answer to a logout request."""

    id: str | None = None
    in_response_to: str | None = None
    version: str | None = None
    issue_instant: datetime | None = None
    destination: str | None = None
    consent: str | None = None
    issuer: Issuer | None = None
    signature: Signature | None = None
    status: Status | None = None

    @classmethod
    def from_element(cls, element: ET.Element) -> LogoutResponse:
        return cls(
            id=element.get("ID"),
            in_response_to=element.get("InResponseTo"),
            version=element.get("Version"),
            issue_instant=_instant_attr(element, "IssueInstant"),
            destination=element.get("Destination"),
            consent=element.get("Consent"),
            issuer=_optional_child(element, "Issuer", Issuer),
            signature=_optional_child(element, "Signature", Signature),
            status=_optional_child(element, "Status", Status),
        )