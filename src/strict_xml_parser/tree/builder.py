"""Recursive-descent tree building for strict XML parsing.

``XMLTreeBuilder`` consumes a token tuple positionally. The cursor is never
stored on the builder: ``_parse_element(pos)`` returns the finished element
together with the position right after its closing tag, and callers continue
from there. Any deviation from the expected token shapes raises
``XMLSyntaxError``; no partial tree is ever returned.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, NoReturn, Optional, Sequence, Tuple

from strict_xml_parser.character import decode
from strict_xml_parser.shared import (
    DiagnosticEntry,
    PerformanceMetrics,
    TreeConfig,
    XMLSyntaxError,
    get_logger,
)
from strict_xml_parser.tokenization import (
    Token,
    TokenizationResult,
    TokenPosition,
    TokenType,
)
from .serializer import serialize

OPEN_TAG = TokenType.OPEN_TAG
CLOSE_TAG = TokenType.CLOSE_TAG
SELF_CLOSE = TokenType.SELF_CLOSE
IDENTIFIER = TokenType.IDENTIFIER
SPACING = TokenType.SPACING
ATTR_EQUALS = TokenType.ATTR_EQUALS
QUOTATION = TokenType.QUOTATION
VALUE = TokenType.VALUE

START_TAG = (OPEN_TAG, IDENTIFIER)
ATTRIBUTE = (SPACING, IDENTIFIER, ATTR_EQUALS, QUOTATION, VALUE, QUOTATION)
EMPTY_TAG_END = (SELF_CLOSE, CLOSE_TAG)
END_TAG = (OPEN_TAG, SELF_CLOSE, IDENTIFIER, CLOSE_TAG)
TEXT_AND_END_TAG = (VALUE,) + END_TAG
COMMENT = (
    OPEN_TAG,
    TokenType.COMMENT_MARK,
    TokenType.COMMENT_DASHES,
    TokenType.COMMENT_CONTENT,
    TokenType.COMMENT_DASHES,
    CLOSE_TAG,
)


@dataclass
class XMLElement:
    """A parsed markup element.

    An element either carries a text ``value`` or a list of ``children``,
    never both. Attributes keep their insertion order; setting an existing
    name replaces its value in place.
    """

    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    value: Optional[str] = None
    children: List["XMLElement"] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate element values."""
        if not self.tag:
            raise ValueError("Element tag cannot be empty")
        if self.value is not None and self.children:
            raise ValueError("Element cannot have both a value and children")

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self.attributes.get(name, default)

    def set_attribute(self, name: str, value: str) -> None:
        """Set attribute value."""
        if not isinstance(name, str) or not isinstance(value, str):
            raise TypeError("Attribute name and value must be strings")
        self.attributes[name] = value

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def iter_attributes(self) -> Iterator[Tuple[str, str]]:
        """Iterate over ``(name, value)`` pairs in insertion order."""
        return iter(list(self.attributes.items()))

    def set_value(self, value: Optional[str]) -> None:
        """Set the text value of a leaf element."""
        if value is not None and self.children:
            raise ValueError(f"Element <{self.tag}> has children and cannot hold a value")
        self.value = value

    def add_child(self, child: "XMLElement") -> None:
        """Append a child element."""
        if not isinstance(child, XMLElement):
            raise TypeError("Child must be an XMLElement instance")
        if self.value is not None:
            raise ValueError(f"Element <{self.tag}> has a value and cannot hold children")
        self.children.append(child)

    def find_child(self, tag: str) -> Optional["XMLElement"]:
        """Find first direct child with matching tag name."""
        for child in self.children:
            if child.tag == tag:
                return child
        return None

    def find_children(self, tag: str) -> List["XMLElement"]:
        """Find all direct children with matching tag name."""
        return [child for child in self.children if child.tag == tag]

    def find(self, tag: str) -> Optional["XMLElement"]:
        """Find first descendant element with matching tag name."""
        for element in self.iter():
            if element is not self and element.tag == tag:
                return element
        return None

    def find_all(self, tag: str) -> List["XMLElement"]:
        """Find all descendant elements with matching tag name."""
        return [
            element for element in self.iter()
            if element is not self and element.tag == tag
        ]

    def iter(self) -> Iterator["XMLElement"]:
        """Iterate over this element and its descendants in document order."""
        yield self
        for child in self.children:
            yield from child.iter()

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        result: Dict[str, Any] = {"tag": self.tag, "attributes": dict(self.attributes)}
        if self.value is not None:
            result["value"] = self.value
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result

    def to_xml(self, indent: Optional[int] = None) -> str:
        """Serialize this element back to markup."""
        return serialize(self, indent=indent)


@dataclass
class ParseResult:
    """Parsed tree together with tokenizer output and metrics."""

    root: XMLElement
    tokenization: TokenizationResult
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    correlation_id: Optional[str] = None

    @property
    def element_count(self) -> int:
        return sum(1 for _ in self.root.iter())

    @property
    def truncated(self) -> bool:
        return self.tokenization.truncated

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root.to_dict(),
            "element_count": self.element_count,
            "token_count": self.tokenization.token_count,
            "truncated": self.truncated,
            "processing_time_ms": self.performance.processing_time_ms,
            "diagnostics": [entry.to_dict() for entry in self.diagnostics],
        }


class XMLTreeBuilder:
    """Builds a single ``XMLElement`` tree from a token sequence.

    Between elements the builder skips "ignorable" material: whitespace
    tokens and complete ``<!-- ... -->`` comment groups.
    """

    def __init__(
        self,
        tokens: Sequence[Token],
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.tokens: Tuple[Token, ...] = tuple(tokens)
        self.config = config or TreeConfig()
        self._logger = get_logger(__name__, correlation_id, "tree_builder")

    def build(self) -> XMLElement:
        """Parse the whole token sequence into one root element.

        Raises:
            XMLSyntaxError: If the tokens do not form exactly one
                well-formed element, optionally surrounded by whitespace
                and comments.
        """
        start = self._skip_ignorable(0)
        if start >= len(self.tokens):
            raise XMLSyntaxError("Document is empty", expected="a root element")

        root, end = self._parse_element(start, 1)
        end = self._skip_ignorable(end)
        if end < len(self.tokens):
            self._fail(f"Unexpected content after root element </{root.tag}>", end)

        self._logger.debug(
            "Tree built",
            extra={"root_tag": root.tag, "token_count": len(self.tokens)}
        )
        return root

    def _parse_element(self, pos: int, depth: int) -> Tuple[XMLElement, int]:
        pos = self._skip_ignorable(pos)
        if not self._check(pos, *START_TAG):
            self._fail("Expected start of a new tag", pos, expected="'<' and a tag name")

        tag = self.tokens[pos + 1].value
        if depth > self.config.max_depth:
            self._fail(
                f"Maximum nesting depth of {self.config.max_depth} exceeded at <{tag}>",
                pos,
            )
        element = XMLElement(tag)
        pos += 2

        while self._check(pos, *ATTRIBUTE):
            element.set_attribute(
                self.tokens[pos + 1].value, self._text(self.tokens[pos + 4].value)
            )
            pos += len(ATTRIBUTE)

        if self._is(pos, SPACING):
            pos += 1
        if self._check(pos, *EMPTY_TAG_END):
            return element, pos + len(EMPTY_TAG_END)
        if not self._is(pos, CLOSE_TAG):
            self._fail(f"Malformed start tag <{tag}>", pos, expected="'>' or '/>'")

        body = self._skip_ignorable(pos + 1)
        if self._check(body, *TEXT_AND_END_TAG):
            self._match_end_tag(element, body + 1)
            element.set_value(self._text(self.tokens[body].value))
            return element, body + len(TEXT_AND_END_TAG)

        cursor = body
        while self._check(cursor, *START_TAG):
            child, cursor = self._parse_element(cursor, depth + 1)
            element.add_child(child)
            cursor = self._skip_ignorable(cursor)

        if not self._check(cursor, *END_TAG):
            self._fail(f"Missing closing tag for <{tag}>", cursor, expected=f"</{tag}>")
        self._match_end_tag(element, cursor)
        return element, cursor + len(END_TAG)

    def _match_end_tag(self, element: XMLElement, pos: int) -> None:
        closing = self.tokens[pos + 2].value
        if closing != element.tag:
            raise XMLSyntaxError(
                f"Closing tag doesn't match opening tag: <{element.tag}> vs </{closing}>",
                self.tokens[pos + 2].position,
                expected=f"</{element.tag}>",
                found=f"</{closing}>",
            )

    def _skip_ignorable(self, pos: int) -> int:
        while True:
            if self._is(pos, SPACING):
                pos += 1
            elif self._check(pos, *COMMENT):
                pos += len(COMMENT)
            else:
                return pos

    def _text(self, raw: str) -> str:
        return decode(raw) if self.config.decode_entities else raw

    def _is(self, pos: int, kind: TokenType) -> bool:
        return pos < len(self.tokens) and self.tokens[pos].type is kind

    def _check(self, pos: int, *kinds: TokenType) -> bool:
        return all(self._is(pos + i, kind) for i, kind in enumerate(kinds))

    def _position(self, pos: int) -> Optional[TokenPosition]:
        if pos < len(self.tokens):
            return self.tokens[pos].position
        return None

    def _describe(self, pos: int) -> str:
        if pos < len(self.tokens):
            return str(self.tokens[pos])
        return "end of input"

    def _fail(self, message: str, pos: int, expected: Optional[str] = None) -> NoReturn:
        found = self._describe(pos)
        raise XMLSyntaxError(
            f"{message}, found {found}",
            self._position(pos),
            expected=expected,
            found=found,
        )
