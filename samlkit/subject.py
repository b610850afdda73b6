"""The SAML assertion ``Subject`` element and its parts."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from samlkit.xmlbase import (
    _element,
    _escape,
    _instant_attr,
    _text,
    find_child,
    find_children,
    format_instant,
)

NAME = "saml2:Subject"
SCHEMA = ("xmlns:saml2", "urn:oasis:names:tc:SAML:2.0:assertion")
NAME_ID_NAME = "saml2:NameID"
SUBJECT_CONFIRMATION_NAME = "saml2:SubjectConfirmation"
SUBJECT_CONFIRMATION_DATA_NAME = "saml2:SubjectConfirmationData"


class SubjectKind(Enum):
    """The ways a subject can be identified, by element name."""

    BASE_ID = "saml2:BaseID"
    NAME_ID = "saml2:NameID"
    ENCRYPTED_ID = "saml2:EncryptedID"


@dataclass(frozen=True)
class SubjectType:
    """A subject identifier; only a name identifier carries content."""

    kind: SubjectKind
    content: str | None = None

    def __post_init__(self) -> None:
        if self.kind is SubjectKind.NAME_ID and self.content is None:
            raise ValueError("a NameID subject needs content")
        if self.kind is not SubjectKind.NAME_ID and self.content is not None:
            raise ValueError(f"{self.kind.name} subject carries no content")

    def to_xml(self) -> str:
        content = _escape(self.content) if self.content is not None else ""
        return _element(self.kind.value, (), content)


def _optional_instant(value: datetime | None) -> str | None:
    return None if value is None else format_instant(value, True)


@dataclass
class SubjectNameID:
    """The name identifier of a subject."""

    value: str = ""
    format: str | None = None

    def to_xml(self) -> str:
        return _element(NAME_ID_NAME, [("Format", self.format)], _escape(self.value))

    @classmethod
    def from_element(cls, element: ET.Element) -> SubjectNameID:
        return cls(value=_text(element) or "", format=element.get("Format"))


@dataclass
class SubjectConfirmationData:
    """Constraints under which a subject confirmation holds."""

    not_before: datetime | None = None
    not_on_or_after: datetime | None = None
    recipient: str | None = None
    in_response_to: str | None = None
    address: str | None = None
    content: str | None = None

    def to_xml(self) -> str:
        attrs = [
            ("NotBefore", _optional_instant(self.not_before)),
            ("NotOnOrAfter", _optional_instant(self.not_on_or_after)),
            ("Recipient", self.recipient),
            ("InResponseTo", self.in_response_to),
            ("Address", self.address),
        ]
        content = "" if self.content is None else _escape(self.content)
        return _element(SUBJECT_CONFIRMATION_DATA_NAME, attrs, content)

    @classmethod
    def from_element(cls, element: ET.Element) -> SubjectConfirmationData:
        return cls(
            not_before=_instant_attr(element, "NotBefore"),
            not_on_or_after=_instant_attr(element, "NotOnOrAfter"),
            recipient=element.get("Recipient"),
            in_response_to=element.get("InResponseTo"),
            address=element.get("Address"),
            content=_text(element),
        )


@dataclass
class SubjectConfirmation:
    """How the relying party may confirm the subject."""

    method: str | None = None
    name_id: SubjectNameID | None = None
    subject_confirmation_data: SubjectConfirmationData | None = None

    def to_xml(self) -> str:
        parts = []
        if self.name_id is not None:
            parts.append(self.name_id.to_xml())
        if self.subject_confirmation_data is not None:
            parts.append(self.subject_confirmation_data.to_xml())
        return _element(SUBJECT_CONFIRMATION_NAME, [("Method", self.method)], "".join(parts))

    @classmethod
    def from_element(cls, element: ET.Element) -> SubjectConfirmation:
        name_id = find_child(element, "NameID")
        data = find_child(element, "SubjectConfirmationData")
        return cls(
            method=element.get("Method"),
            name_id=None if name_id is None else SubjectNameID.from_element(name_id),
            subject_confirmation_data=(
                None if data is None else SubjectConfirmationData.from_element(data)
            ),
        )


@dataclass
class Subject:
    """The principal an assertion is about."""

    name_id: SubjectNameID | None = None
    subject_confirmations: list[SubjectConfirmation] | None = None

    def to_xml(self) -> str:
        parts = []
        if self.name_id is not None:
            parts.append(self.name_id.to_xml())
        parts.extend(c.to_xml() for c in self.subject_confirmations or [])
        return _element(NAME, [SCHEMA], "".join(parts))

    @classmethod
    def from_element(cls, element: ET.Element) -> Subject:
        name_id = find_child(element, "NameID")
        confirmations = [
            SubjectConfirmation.from_element(child)
            for child in find_children(element, "SubjectConfirmation")
        ]
        return cls(
            name_id=None if name_id is None else SubjectNameID.from_element(name_id),
            subject_confirmations=confirmations or None,
        )