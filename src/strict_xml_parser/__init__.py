"""Strict XML Parser.

A small XML parser built from a rule-table lexer and a recursive-descent tree
builder. Malformed input is rejected with ``XMLSyntaxError`` carrying line
and column information.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file()
- Level 2: Configured parser - StrictXMLParser class
"""

__version__ = "0.1.0"
__author__ = "Strict XML Parser Team"

from .api import StrictXMLParser, parse, parse_file, parse_string
from .character import EntityDirection, decode, encode, transform
from .shared import ParserConfig, TokenizationConfig, TreeConfig, XMLSyntaxError
from .tree import ParseResult, XMLElement, serialize

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_file",

    # Level 2: Configured parser
    "StrictXMLParser",

    # Result objects and errors
    "ParseResult",
    "XMLElement",
    "XMLSyntaxError",

    # Entity transform and serialization
    "EntityDirection",
    "decode",
    "encode",
    "transform",
    "serialize",

    # Configuration classes
    "ParserConfig",
    "TokenizationConfig",
    "TreeConfig",
]
