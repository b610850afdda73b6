import pytest

from samlkit.response import Response
from samlkit.xmlbase import ParseError

RESPONSE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<saml2p:Response xmlns:saml2p="urn:oasis:names:tc:SAML:2.0:protocol"
    ID="_resp1" InResponseTo="id-42" Version="2.0"
    IssueInstant="2024-03-04T05:06:07.250Z"
    Destination="http://localhost:8080/saml/acs">
  <saml2:Issuer xmlns:saml2="urn:oasis:names:tc:SAML:2.0:assertion">https://idp.example.com</saml2:Issuer>
  <saml2p:Status>
    <saml2p:StatusCode Value="urn:oasis:names:tc:SAML:2.0:status:Success"/>
  </saml2p:Status>
  <saml2:Assertion xmlns:saml2="urn:oasis:names:tc:SAML:2.0:assertion"
      ID="_assert1" Version="2.0" IssueInstant="2024-03-04T05:06:07.250Z">
    <saml2:Issuer>https://idp.example.com</saml2:Issuer>
    <saml2:Subject>
      <saml2:NameID Format="urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress">alice@example.com</saml2:NameID>
      <saml2:SubjectConfirmation Method="urn:oasis:names:tc:SAML:2.0:cm:bearer">
        <saml2:SubjectConfirmationData InResponseTo="id-42"
            NotOnOrAfter="2024-03-04T05:11:07.250Z"
            Recipient="http://localhost:8080/saml/acs"/>
      </saml2:SubjectConfirmation>
    </saml2:Subject>
    <saml2:Conditions NotBefore="2024-03-04T05:01:07Z" NotOnOrAfter="2024-03-04T05:11:07Z">
      <saml2:AudienceRestriction>
        <saml2:Audience>http://localhost:8080/saml/metadata</saml2:Audience>
      </saml2:AudienceRestriction>
    </saml2:Conditions>
    <saml2:AuthnStatement AuthnInstant="2024-03-04T05:06:07.250Z" SessionIndex="_sess1">
      <saml2:AuthnContext>
        <saml2:AuthnContextClassRef>urn:oasis:names:tc:SAML:2.0:ac:classes:PasswordProtectedTransport</saml2:AuthnContextClassRef>
      </saml2:AuthnContext>
    </saml2:AuthnStatement>
    <saml2:AttributeStatement>
      <saml2:Attribute Name="email">
        <saml2:AttributeValue>alice@example.com</saml2:AttributeValue>
      </saml2:Attribute>
    </saml2:AttributeStatement>
  </saml2:Assertion>
</saml2p:Response>
"""

SIGNATURE_XML = """
<ds:Signature xmlns:ds="http://www.w3.org/2000/09/xmldsig#">
  <ds:SignedInfo>
    <ds:CanonicalizationMethod Algorithm="http://www.w3.org/2001/10/xml-exc-c14n#"/>
    <ds:SignatureMethod Algorithm="http://www.w3.org/2001/04/xmldsig-more#rsa-sha256"/>
    <ds:Reference URI="#{ref}">
      <ds:Transforms>
        <ds:Transform Algorithm="http://www.w3.org/2000/09/xmldsig#enveloped-signature"/>
        <ds:Transform Algorithm="http://www.w3.org/2001/10/xml-exc-c14n#"/>
      </ds:Transforms>
      <ds:DigestMethod Algorithm="http://www.w3.org/2000/09/xmldsig#sha1"/>
      <ds:DigestValue>cGxhY2Vob2xkZXI=</ds:DigestValue>
    </ds:Reference>
  </ds:SignedInfo>
  <ds:SignatureValue>cGxhY2Vob2xkZXI=</ds:SignatureValue>
  <ds:KeyInfo>
    <ds:X509Data>
      <ds:X509Certificate>cGxhY2Vob2xkZXI=</ds:X509Certificate>
    </ds:X509Data>
  </ds:KeyInfo>
</ds:Signature>
"""

_ASSERTION_ISSUER = "    <saml2:Issuer>https://idp.example.com</saml2:Issuer>\n    <saml2:Subject>"
_RESPONSE_ISSUER = (
    "https://idp.example.com</saml2:Issuer>\n  <saml2p:Status>"
)

RESPONSE_SIGNED_ASSERTION_XML = RESPONSE_XML.replace(
    _ASSERTION_ISSUER,
    "    <saml2:Issuer>https://idp.example.com</saml2:Issuer>"
    + SIGNATURE_XML.format(ref="_assert1")
    + "    <saml2:Subject>",
)

RESPONSE_SIGNED_XML = RESPONSE_XML.replace(
    _RESPONSE_ISSUER,
    "https://idp.example.com</saml2:Issuer>"
    + SIGNATURE_XML.format(ref="_resp1")
    + "  <saml2p:Status>",
)


def _round_trip(xml):
    expected = Response.from_xml(xml)
    serialized = expected.to_xml()
    actual = Response.from_xml(serialized)
    return expected, actual


def test_deserialize_serialize_response():
    expected, actual = _round_trip(RESPONSE_XML)
    assert expected == actual


def test_deserialize_serialize_response_with_signed_assertion():
    expected, actual = _round_trip(RESPONSE_SIGNED_ASSERTION_XML)
    assert expected == actual
    assert expected.assertion.signature.signed_info.reference[0].uri == "#_assert1"
    assert expected.signature is None


def test_deserialize_serialize_signed_response():
    expected, actual = _round_trip(RESPONSE_SIGNED_XML)
    assert expected == actual
    assert expected.signature.signed_info.reference[0].uri == "#_resp1"
    assert expected.assertion.signature is None


def test_parsed_fields():
    response = Response.from_xml(RESPONSE_XML)
    assert response.id == "_resp1"
    assert response.in_response_to == "id-42"
    assert response.destination == "http://localhost:8080/saml/acs"
    assert response.status.status_code.value == "urn:oasis:names:tc:SAML:2.0:status:Success"
    assert response.assertion.issuer.value == "https://idp.example.com"
    assert response.assertion.subject.name_id.value == "alice@example.com"
    assert response.encrypted_assertion is None


def test_to_xml_starts_with_declaration():
    xml = Response.from_xml(RESPONSE_XML).to_xml()
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?><saml2p:Response')


def test_accepts_bytes():
    assert Response.from_xml(RESPONSE_XML.encode("utf-8")) == Response.from_xml(RESPONSE_XML)


def test_encrypted_assertion_is_kept():
    xml = RESPONSE_XML.replace(
        "  </saml2p:Status>",
        "  </saml2p:Status>\n  <saml2:EncryptedAssertion "
        'xmlns:saml2="urn:oasis:names:tc:SAML:2.0:assertion">data</saml2:EncryptedAssertion>',
    )
    response = Response.from_xml(xml)
    assert "EncryptedAssertion" in response.encrypted_assertion


def test_missing_status_raises():
    xml = (
        '<saml2p:Response xmlns:saml2p="urn:oasis:names:tc:SAML:2.0:protocol" '
        'ID="_r" Version="2.0" IssueInstant="2024-03-04T05:06:07Z"/>'
    )
    with pytest.raises(ParseError):
        Response.from_xml(xml)


def test_missing_id_raises():
    xml = (
        '<saml2p:Response xmlns:saml2p="urn:oasis:names:tc:SAML:2.0:protocol" '
        'Version="2.0" IssueInstant="2024-03-04T05:06:07Z">'
        '<saml2p:Status><saml2p:StatusCode/></saml2p:Status></saml2p:Response>'
    )
    with pytest.raises(ParseError):
        Response.from_xml(xml)


def test_malformed_xml_raises():
    with pytest.raises(ParseError):
        Response.from_xml("<saml2p:Response")