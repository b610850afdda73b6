"""SAML 2.0 schema objects with XML serialization and parsing."""

__version__ = "0.1.0"