"""The SAML assertion ``Conditions`` element and its restrictions."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime

from samlkit.xmlbase import (
    ParseError,
    _element,
    _escape,
    _instant_attr,
    _text,
    find_child,
    find_children,
    format_instant,
)

NAME = "saml2:Conditions"
AUDIENCE_RESTRICTION_NAME = "saml2:AudienceRestriction"
AUDIENCE_NAME = "saml2:Audience"
PROXY_RESTRICTION_NAME = "saml2:ProxyRestriction"


def _audiences_xml(audiences: list[str]) -> str:
    return "".join(_element(AUDIENCE_NAME, (), _escape(aud)) for aud in audiences)


def _audiences(element: ET.Element) -> list[str]:
    return [_text(child) or "" for child in find_children(element, "Audience")]


@dataclass
class AudienceRestriction:
    """Audiences, any one of which the assertion is addressed to."""

    audience: list[str] = field(default_factory=list)

    def to_xml(self) -> str:
        return _element(AUDIENCE_RESTRICTION_NAME, (), _audiences_xml(self.audience))

    @classmethod
    def from_element(cls, element: ET.Element) -> AudienceRestriction:
        return cls(audience=_audiences(element))


@dataclass
class OneTimeUse:
    """Marks an assertion as usable only once."""


@dataclass
class ProxyRestriction:
    """Limits on how the assertion may be passed on by its relying party."""

    count: int | None = None
    audiences: list[str] | None = None

    def to_xml(self) -> str:
        count = None if self.count is None else str(self.count)
        content = _audiences_xml(self.audiences or [])
        return _element(PROXY_RESTRICTION_NAME, [("Count", count)], content)

    @classmethod
    def from_element(cls, element: ET.Element) -> ProxyRestriction:
        raw = element.get("Count")
        count = None
        if raw is not None:
            try:
                count = int(raw.strip())
            except ValueError as exc:
                raise ParseError(f"invalid count: {raw!r}") from exc
            if count < 0:
                raise ParseError(f"invalid count: {raw!r}")
        audiences = _audiences(element)
        return cls(count=count, audiences=audiences or None)


@dataclass
class Conditions:
    """Validity window and restrictions placed on an assertion."""

    not_before: datetime | None = None
    not_on_or_after: datetime | None = None
    audience_restrictions: list[AudienceRestriction] | None = None
    one_time_use: OneTimeUse | None = None
    proxy_restriction: ProxyRestriction | None = None

    def to_xml(self) -> str:
        attrs = [
            ("NotBefore", None if self.not_before is None else format_instant(self.not_before)),
            (
                "NotOnOrAfter",
                None if self.not_on_or_after is None else format_instant(self.not_on_or_after),
            ),
        ]
        parts = [r.to_xml() for r in self.audience_restrictions or []]
        if self.proxy_restriction is not None:
            parts.append(self.proxy_restriction.to_xml())
        return _element(NAME, attrs, "".join(parts))

    @classmethod
    def from_element(cls, element: ET.Element) -> Conditions:
        restrictions = [
            AudienceRestriction.from_element(child)
            for child in find_children(element, "AudienceRestriction")
        ]
        proxy = find_child(element, "ProxyRestriction")
        return cls(
            not_before=_instant_attr(element, "NotBefore"),
            not_on_or_after=_instant_attr(element, "NotOnOrAfter"),
            audience_restrictions=restrictions or None,
            one_time_use=OneTimeUse() if find_child(element, "OneTimeUse") is not None else None,
            proxy_restriction=None if proxy is None else ProxyRestriction.from_element(proxy),
        )