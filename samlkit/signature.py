"""XML digital signature elements carried inside SAML messages."""

from __future__ import annotations

import base64
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from samlkit.xmlbase import (
    ParseError,
    _element,
    _empty_element,
    _escape,
    _text,
    find_child,
    find_children,
)

NAME = "ds:Signature"
SCHEMA = ("xmlns:ds", "http://www.w3.org/2000/09/xmldsig#")
SIGNATURE_VALUE_NAME = "ds:SignatureValue"
SIGNED_INFO_NAME = "ds:SignedInfo"
CANONICALIZATION_METHOD = "ds:CanonicalizationMethod"
SIGNATURE_METHOD_NAME = "ds:SignatureMethod"
HMAC_OUTPUT_LENGTH_NAME = "ds:HMACOutputLength"
TRANSFORMS_NAME = "ds:Transforms"
TRANSFORM_NAME = "ds:Transform"
XPATH_NAME = "ds:XPath"
DIGEST_METHOD = "ds:DigestMethod"
DIGEST_VALUE_NAME = "ds:DigestValue"
REFERENCE_NAME = "ds:Reference"
KEY_INFO_NAME = "ds:KeyInfo"
X509_DATA_NAME = "ds:X509Data"
X509_CERTIFICATE_NAME = "ds:X509Certificate"


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


def _id_attr(element: ET.Element) -> str | None:
    value = element.get("Id")
    return element.get("ID") if value is None else value


def _text_content(value: str | None) -> str:
    return "" if value is None else _escape(value)


@dataclass
class X509Data:
    """Holds a base64 encoded X.509 certificate."""

    certificate: str | None = None

    def to_xml(self) -> str:
        content = ""
        if self.certificate is not None:
            content = _element(X509_CERTIFICATE_NAME, (), _escape(self.certificate))
        return _element(X509_DATA_NAME, (), content)

    @classmethod
    def from_element(cls, element: ET.Element) -> X509Data:
        cert = find_child(element, "X509Certificate")
        return cls(certificate=None if cert is None else _text(cert))


@dataclass
class KeyInfo:
    """Identifies the key that verifies a signature."""

    id: str | None = None
    x509_data: X509Data | None = None

    def to_xml(self) -> str:
        content = "" if self.x509_data is None else self.x509_data.to_xml()
        return _element(KEY_INFO_NAME, [("Id", self.id)], content)

    @classmethod
    def from_element(cls, element: ET.Element) -> KeyInfo:
        data = find_child(element, "X509Data")
        return cls(
            id=_id_attr(element),
            x509_data=None if data is None else X509Data.from_element(data),
        )


@dataclass
class CanonicalizationMethod:
    """The canonicalization algorithm applied to ``SignedInfo``."""

    algorithm: str

    def to_xml(self) -> str:
        return _empty_element(CANONICALIZATION_METHOD, [("Algorithm", self.algorithm)])

    @classmethod
    def from_element(cls, element: ET.Element) -> CanonicalizationMethod:
        return cls(algorithm=_required_attr(element, "Algorithm"))


@dataclass
class SignatureMethod:
    """The algorithm that produced the signature value."""

    algorithm: str
    hmac_output_length: int | None = None

    def to_xml(self) -> str:
        attrs = [("Algorithm", self.algorithm)]
        if self.hmac_output_length is None:
            return _empty_element(SIGNATURE_METHOD_NAME, attrs)
        inner = _element(HMAC_OUTPUT_LENGTH_NAME, (), str(self.hmac_output_length))
        return _element(SIGNATURE_METHOD_NAME, attrs, inner)

    @classmethod
    def from_element(cls, element: ET.Element) -> SignatureMethod:
        length = None
        child = find_child(element, "HMACOutputLength")
        if child is not None:
            raw = _text(child) or ""
            try:
                length = int(raw)
            except ValueError as exc:
                raise ParseError(f"invalid HMACOutputLength: {raw!r}") from exc
            if length < 0:
                raise ParseError(f"invalid HMACOutputLength: {raw!r}")
        return cls(algorithm=_required_attr(element, "Algorithm"), hmac_output_length=length)


@dataclass
class Transform:
    """One transform applied to referenced data before digesting."""

    algorithm: str
    xpath: str | None = None

    def to_xml(self) -> str:
        attrs = [("Algorithm", self.algorithm)]
        if self.xpath is None:
            return _empty_element(TRANSFORM_NAME, attrs)
        return _element(TRANSFORM_NAME, attrs, _element(XPATH_NAME, (), _escape(self.xpath)))

    @classmethod
    def from_element(cls, element: ET.Element) -> Transform:
        xpath = find_child(element, "XPath")
        return cls(
            algorithm=_required_attr(element, "Algorithm"),
            xpath=None if xpath is None else _text(xpath),
        )


@dataclass
class Transforms:
    """The ordered transforms of a reference."""

    transforms: list[Transform] = field(default_factory=list)

    def to_xml(self) -> str:
        return _element(TRANSFORMS_NAME, (), "".join(t.to_xml() for t in self.transforms))

    @classmethod
    def from_element(cls, element: ET.Element) -> Transforms:
        children = find_children(element, "Transform")
        if not children:
            raise ParseError("Transforms holds no Transform")
        return cls(transforms=[Transform.from_element(child) for child in children])


@dataclass
class DigestMethod:
    """The digest algorithm applied to referenced data."""

    algorithm: str

    def to_xml(self) -> str:
        return _empty_element(DIGEST_METHOD, [("Algorithm", self.algorithm)])

    @classmethod
    def from_element(cls, element: ET.Element) -> DigestMethod:
        return cls(algorithm=_required_attr(element, "Algorithm"))


@dataclass
class DigestValue:
    """The base64 encoded digest of referenced data."""

    base64_content: str | None = None

    def to_xml(self) -> str:
        return _element(DIGEST_VALUE_NAME, (), _text_content(self.base64_content))

    @classmethod
    def from_element(cls, element: ET.Element) -> DigestValue:
        return cls(base64_content=_text(element))


@dataclass
class Reference:
    """A signed reference to data, with its digest."""

    digest_method: DigestMethod
    transforms: Transforms | None = None
    digest_value: DigestValue | None = None
    uri: str | None = None
    reference_type: str | None = None
    id: str | None = None

    def to_xml(self) -> str:
        attrs = [("Id", self.id), ("URI", self.uri), ("Type", self.reference_type)]
        parts = []
        if self.transforms is not None:
            parts.append(self.transforms.to_xml())
        parts.append(self.digest_method.to_xml())
        if self.digest_value is not None:
            parts.append(self.digest_value.to_xml())
        return _element(REFERENCE_NAME, attrs, "".join(parts))

    @classmethod
    def from_element(cls, element: ET.Element) -> Reference:
        transforms = find_child(element, "Transforms")
        digest_value = find_child(element, "DigestValue")
        return cls(
            digest_method=DigestMethod.from_element(_required_child(element, "DigestMethod")),
            transforms=None if transforms is None else Transforms.from_element(transforms),
            digest_value=None if digest_value is None else DigestValue.from_element(digest_value),
            uri=element.get("URI"),
            reference_type=element.get("Type"),
            id=element.get("Id"),
        )


@dataclass
class SignedInfo:
    """The signed part of a signature: algorithms and references."""

    canonicalization_method: CanonicalizationMethod
    signature_method: SignatureMethod
    reference: list[Reference] = field(default_factory=list)
    id: str | None = None

    def to_xml(self) -> str:
        parts = [self.canonicalization_method.to_xml(), self.signature_method.to_xml()]
        parts.extend(r.to_xml() for r in self.reference)
        return _element(SIGNED_INFO_NAME, [("Id", self.id)], "".join(parts))

    @classmethod
    def from_element(cls, element: ET.Element) -> SignedInfo:
        references = find_children(element, "Reference")
        if not references:
            raise ParseError("SignedInfo holds no Reference")
        return cls(
            canonicalization_method=CanonicalizationMethod.from_element(
                _required_child(element, "CanonicalizationMethod")
            ),
            signature_method=SignatureMethod.from_element(
                _required_child(element, "SignatureMethod")
            ),
            reference=[Reference.from_element(child) for child in references],
            id=_id_attr(element),
        )


@dataclass
class SignatureValue:
    """The base64 encoded signature value."""

    id: str | None = None
    base64_content: str | None = None

    def to_xml(self) -> str:
        return _element(
            SIGNATURE_VALUE_NAME, [("Id", self.id)], _text_content(self.base64_content)
        )

    @classmethod
    def from_element(cls, element: ET.Element) -> SignatureValue:
        return cls(id=_id_attr(element), base64_content=_text(element))


@dataclass
class Signature:
    """An enveloped XML digital signature."""

    signed_info: SignedInfo
    signature_value: SignatureValue
    id: str | None = None
    key_info: list[KeyInfo] | None = None

    def to_xml(self) -> str:
        parts = [self.signed_info.to_xml(), self.signature_value.to_xml()]
        parts.extend(k.to_xml() for k in self.key_info or [])
        return _element(NAME, [SCHEMA, ("Id", self.id)], "".join(parts))

    @classmethod
    def from_element(cls, element: ET.Element) -> Signature:
        key_infos = [KeyInfo.from_element(child) for child in find_children(element, "KeyInfo")]
        return cls(
            signed_info=SignedInfo.from_element(_required_child(element, "SignedInfo")),
            signature_value=SignatureValue.from_element(
                _required_child(element, "SignatureValue")
            ),
            id=element.get("Id"),
            key_info=key_infos or None,
        )

    def add_key_info(self, public_cert_der: bytes) -> Signature:
        """Append a key info holding the given DER certificate; return self."""
        if self.key_info is None:
            self.key_info = []
        encoded = base64.b64encode(public_cert_der).decode("ascii")
        self.key_info.append(KeyInfo(x509_data=X509Data(certificate=encoded)))
        return self