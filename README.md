# samlkit

Data classes for the SAML 2.0 protocol and assertion schema. Each class can
be read from a parsed XML element, and most can write themselves back out
as XML. Only the standard library is used.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `samlkit.response`: `Response`, the `saml2p:Response` message.
  `Response.from_xml(text)` parses a document (string or bytes).
  `Response.to_xml()` writes it with an XML declaration in front.
- `samlkit.assertion`: `Assertion`, `AttributeStatement`, `Attribute`,
  `AuthnStatement`, `AuthnContext`, `AuthnContextClassRef`,
  `SubjectLocality`, `Status`, `StatusCode`, `StatusMessage`,
  `StatusDetail`, `LogoutRequest` and `LogoutResponse`.
- `samlkit.subject`: `Subject`, `SubjectNameID`, `SubjectConfirmation`,
  `SubjectConfirmationData`, and `SubjectType` with its `SubjectKind`
  (`BASE_ID`, `NAME_ID`, `ENCRYPTED_ID`).
- `samlkit.conditions`: `Conditions`, `AudienceRestriction`,
  `ProxyRestriction` and `OneTimeUse`.
- `samlkit.issuer`: `Issuer`.
- `samlkit.name_id_policy`: `NameIdPolicy`.
- `samlkit.signature`: the XML signature elements `Signature`,
  `SignedInfo`, `SignatureValue`, `CanonicalizationMethod`,
  `SignatureMethod`, `Reference`, `Transforms`, `Transform`,
  `DigestMethod`, `DigestValue`, `KeyInfo` and `X509Data`.
  `Signature.add_key_info(der_bytes)` appends a `KeyInfo` holding the
  base64 encoded certificate and returns the signature.
- `samlkit.xmlbase`: `parse_xml`, `parse_instant`, `format_instant`,
  `local_name`, `find_child`, `find_children`, and `ParseError`.

## Example

```python
from samlkit.response import Response

with open("response.xml", encoding="utf-8") as fh:
    response = Response.from_xml(fh.read())

print(response.id, response.in_response_to)
if response.assertion is not None:
    print(response.assertion.issuer.value)

again = Response.from_xml(response.to_xml())
```

## Reading and writing

`from_element(element)` takes an `xml.etree.ElementTree.Element`, such as
the one `samlkit.xmlbase.parse_xml` returns. Children are matched by local
name, so any namespace prefix is accepted. Every class has it except
`SubjectType` and `OneTimeUse`.

`to_xml()` returns the element as a string with fixed prefixes (`saml2`,
`saml2p`, `ds`). `SubjectLocality`, `StatusMessage`, `StatusDetail`,
`LogoutRequest`, `LogoutResponse` and `OneTimeUse` are read but not
written. A few parts that are read are also left out when writing: a
`OneTimeUse` in `Conditions`, a `SubjectLocality` in `AuthnStatement`, the
message and detail of a `Status`, and a response's encrypted assertion,
which is kept only as raw XML text in `Response.encrypted_assertion`. A
written and re-read response equals the original when it has none of these
and its timestamps carry whole milliseconds (whole seconds for
`Conditions`).

`SubjectType` needs content for `SubjectKind.NAME_ID` and takes none for
the other kinds; otherwise it raises `ValueError`.

Timestamps are timezone-aware `datetime` objects in UTC. `format_instant`
treats a naive datetime as UTC. Malformed XML, bad timestamps, numbers or
booleans, and missing required attributes or elements raise
`samlkit.xmlbase.ParseError`, a subclass of `ValueError`.

## What this package does not do

It models and serializes SAML messages only. It does not verify or create
signatures, decrypt encrypted assertions, check a response's issuer,
destination, audience or validity window, build or send authentication
requests, or produce service provider metadata.