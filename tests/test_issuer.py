from samlkit.issuer import Issuer
from samlkit.xmlbase import parse_xml


def _round_trip(issuer):
    return Issuer.from_element(parse_xml(issuer.to_xml()))


def test_empty_issuer_xml():
    assert Issuer().to_xml() == (
        '<saml2:Issuer xmlns:saml2="urn:oasis:names:tc:SAML:2.0:assertion"></saml2:Issuer>'
    )


def test_round_trip_all_fields():
    issuer = Issuer(
        name_qualifier="nq",
        sp_name_qualifier="spnq",
        format="urn:oasis:names:tc:SAML:2.0:nameid-format:entity",
        sp_provided_id="spid",
        value="https://idp.example.com/metadata",
    )
    assert _round_trip(issuer) == issuer


def test_round_trip_escapes_text():
    issuer = Issuer(value="a & b <c>", format='say "hi"')
    xml = issuer.to_xml()
    assert "&amp;" in xml
    assert _round_trip(issuer) == issuer


def test_attribute_order():
    xml = Issuer(format="f", name_qualifier="n").to_xml()
    assert xml.index("NameQualifier") < xml.index("Format")


def test_from_element_without_text():
    root = parse_xml('<saml2:Issuer xmlns:saml2="urn:oasis:names:tc:SAML:2.0:assertion" Format="f"/>')
    assert Issuer.from_element(root) == Issuer(format="f")


def test_from_element_strips_whitespace():
    root = parse_xml("<Issuer>\n  idp  \n</Issuer>")
    assert Issuer.from_element(root).value == "idp"