"""Tree building engine for strict XML parsing.

Key Components:
    XMLTreeBuilder: Recursive-descent parser over a token sequence
    XMLElement: Individual XML element with attributes, text value and children
    ParseResult: Parsed tree with tokenizer output and metrics
    serialize: Render an element tree back to markup
"""

from .builder import (
    ParseResult,
    XMLElement,
    XMLTreeBuilder,
)
from .serializer import serialize

__all__ = [
    "ParseResult",
    "XMLElement",
    "XMLTreeBuilder",
    "serialize",
]
