"""Public API for strict XML parsing.

Level 1: simple functions ``parse``, ``parse_string`` and ``parse_file``.
Level 2: the configured ``StrictXMLParser`` class.
Adapters for ElementTree and lxml live in ``strict_xml_parser.api.adapters``.
"""

from .parser import (
    StrictXMLParser,
    parse,
    parse_file,
    parse_string,
)

__all__ = [
    "StrictXMLParser",
    "parse",
    "parse_file",
    "parse_string",
]
