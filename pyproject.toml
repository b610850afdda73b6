[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "samlkit"
version = "0.1.0"
description = "SAML 2.0 protocol and assertion schema objects with XML serialization and parsing"
requires-python = ">=3.10"
dependencies = []
keywords = ["saml", "saml2", "sso", "xml", "assertion", "xmldsig"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Session",
    "Topic :: Text Processing :: Markup :: XML",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["samlkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
