"""Rule-table XML tokenizer.

The lexer walks the input once, left to right. At every position it consults
``LEX_RULES`` in a fixed priority order and emits the first token whose
pattern matches and whose guard accepts the types of the most recently
emitted tokens. Guards only ever look at a bounded window of ``LOOKBACK``
types, so acceptance is a small deterministic check rather than a scan of the
full history.

Two guard families are used:

* positional guards check the type of the last emitted token
  (``after``), or that nothing has been emitted yet (``at_start``);
* historical guards check that the trailing token types equal a fixed
  sequence (``trailing``).

The priority order resolves the ambiguous cases, e.g. whitespace inside a
tag header versus whitespace between sibling elements, or ``<`` starting a
comment versus an ordinary tag. Reordering the table changes the language.
"""

import re
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Deque, List, Optional, Pattern, Sequence, Tuple

from strict_xml_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    TokenizationConfig,
    XMLSyntaxError,
    get_logger,
)

# Longest trailing sequence any guard inspects
LOOKBACK = 4


class TokenType(Enum):
    """XML token types produced by the tokenizer."""

    OPEN_TAG = auto()           # <
    CLOSE_TAG = auto()          # >
    SELF_CLOSE = auto()         # / in </tag> or <tag/>
    IDENTIFIER = auto()         # Tag or attribute name
    SPACING = auto()            # Whitespace run
    ATTR_EQUALS = auto()        # = between attribute name and value
    QUOTATION = auto()          # " around attribute values
    VALUE = auto()              # Attribute value or element text
    COMMENT_MARK = auto()       # ! in <!--
    COMMENT_DASHES = auto()     # -- opening or closing a comment
    COMMENT_CONTENT = auto()    # Comment body


@dataclass(frozen=True)
class TokenPosition:
    """Position information for XML tokens."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")

    def to_dict(self) -> dict:
        return {"line": self.line, "column": self.column, "offset": self.offset}


@dataclass(frozen=True)
class Token:
    """A single classified lexical unit."""

    type: TokenType
    value: str
    position: TokenPosition = field(default_factory=lambda: TokenPosition(1, 1, 0))

    def __str__(self) -> str:
        return f"{self.type.name} {self.value!r}"


Guard = Callable[[Tuple[TokenType, ...]], bool]


def at_start(window: Tuple[TokenType, ...]) -> bool:
    """Accept only when no token has been emitted yet."""
    return not window


def after(*kinds: TokenType) -> Guard:
    """Accept when the last emitted token is one of ``kinds``."""
    def guard(window: Tuple[TokenType, ...]) -> bool:
        return bool(window) and window[-1] in kinds
    return guard


def trailing(*kinds: TokenType) -> Guard:
    """Accept when the emitted token types end with exactly ``kinds``."""
    size = len(kinds)

    def guard(window: Tuple[TokenType, ...]) -> bool:
        return len(window) >= size and window[-size:] == kinds
    return guard


def either(*guards: Guard) -> Guard:
    """Accept when any of ``guards`` accepts."""
    def guard(window: Tuple[TokenType, ...]) -> bool:
        return any(check(window) for check in guards)
    return guard


def neither(*guards: Guard) -> Guard:
    """Accept when none of ``guards`` accepts."""
    def guard(window: Tuple[TokenType, ...]) -> bool:
        return not any(check(window) for check in guards)
    return guard


@dataclass(frozen=True)
class LexRule:
    """One entry of the priority table: a token kind, its pattern and its guard."""

    kind: TokenType
    pattern: Pattern[str]
    guard: Guard
    description: str = ""

    def match(self, window: Tuple[TokenType, ...], text: str, offset: int) -> Optional[int]:
        """Return the match length at ``offset``, or None if the rule does not apply."""
        if not self.guard(window):
            return None
        found = self.pattern.match(text, offset)
        if found is None:
            return None
        return found.end() - offset


_LT = re.compile("<")
_GT = re.compile(">")
_SLASH = re.compile("/")
_EQUALS = re.compile("=")
_QUOTE = re.compile('"')
_BANG = re.compile("!")
_DASHES = re.compile("--")
_NAME = re.compile(r"[A-Za-z_:][A-Za-z0-9_:.\-]*")
_SPACE = re.compile(r"\s+")
_ATTR_VALUE = re.compile(r'[^"]*')
_TEXT = re.compile(r"[^<]+")
_COMMENT_BODY = re.compile(r"(?:(?!-->).)*", re.DOTALL)

T = TokenType

LEX_RULES: Tuple[LexRule, ...] = (
    LexRule(T.OPEN_TAG, _LT,
            neither(after(T.OPEN_TAG), trailing(T.COMMENT_MARK, T.COMMENT_DASHES)),
            "start of a tag or comment"),
    LexRule(T.SELF_CLOSE, _SLASH, after(T.OPEN_TAG),
            "slash of a closing tag"),
    LexRule(T.IDENTIFIER, _NAME, after(T.OPEN_TAG, T.SELF_CLOSE),
            "tag name"),
    LexRule(T.SPACING, _SPACE,
            either(trailing(T.OPEN_TAG, T.IDENTIFIER), trailing(T.VALUE, T.QUOTATION)),
            "whitespace inside a tag header"),
    LexRule(T.IDENTIFIER, _NAME,
            either(trailing(T.IDENTIFIER, T.SPACING), trailing(T.QUOTATION, T.SPACING)),
            "attribute name"),
    LexRule(T.SELF_CLOSE, _SLASH,
            either(after(T.IDENTIFIER), trailing(T.VALUE, T.QUOTATION),
                   trailing(T.IDENTIFIER, T.SPACING), trailing(T.QUOTATION, T.SPACING)),
            "slash of a self-closing tag"),
    LexRule(T.ATTR_EQUALS, _EQUALS, trailing(T.SPACING, T.IDENTIFIER),
            "attribute assignment"),
    LexRule(T.QUOTATION, _QUOTE, after(T.ATTR_EQUALS),
            "opening quote"),
    LexRule(T.VALUE, _ATTR_VALUE, trailing(T.ATTR_EQUALS, T.QUOTATION),
            "attribute value"),
    LexRule(T.QUOTATION, _QUOTE, trailing(T.QUOTATION, T.VALUE),
            "closing quote"),
    LexRule(T.CLOSE_TAG, _GT,
            either(after(T.IDENTIFIER, T.QUOTATION),
                   trailing(T.IDENTIFIER, T.SPACING), trailing(T.QUOTATION, T.SPACING),
                   trailing(T.IDENTIFIER, T.SELF_CLOSE), trailing(T.QUOTATION, T.SELF_CLOSE),
                   trailing(T.SPACING, T.SELF_CLOSE)),
            "end of a tag header"),
    LexRule(T.SPACING, _SPACE, either(at_start, after(T.CLOSE_TAG)),
            "whitespace between tags"),
    LexRule(T.VALUE, _TEXT,
            either(trailing(T.QUOTATION, T.CLOSE_TAG),
                   trailing(T.SPACING, T.CLOSE_TAG),
                   trailing(T.OPEN_TAG, T.IDENTIFIER, T.CLOSE_TAG),
                   trailing(T.COMMENT_CONTENT, T.COMMENT_DASHES, T.CLOSE_TAG),
                   trailing(T.QUOTATION, T.CLOSE_TAG, T.SPACING),
                   trailing(T.SPACING, T.CLOSE_TAG, T.SPACING),
                   trailing(T.OPEN_TAG, T.IDENTIFIER, T.CLOSE_TAG, T.SPACING),
                   trailing(T.COMMENT_DASHES, T.CLOSE_TAG, T.SPACING)),
            "element text"),
    LexRule(T.SPACING, _SPACE,
            either(trailing(T.SELF_CLOSE, T.CLOSE_TAG),
                   trailing(T.SELF_CLOSE, T.IDENTIFIER, T.CLOSE_TAG)),
            "whitespace after a finished element"),
    LexRule(T.COMMENT_MARK, _BANG, after(T.OPEN_TAG),
            "comment marker"),
    LexRule(T.COMMENT_DASHES, _DASHES, after(T.COMMENT_MARK),
            "comment opening dashes"),
    LexRule(T.COMMENT_CONTENT, _COMMENT_BODY, trailing(T.COMMENT_MARK, T.COMMENT_DASHES),
            "comment body"),
    LexRule(T.COMMENT_DASHES, _DASHES, after(T.COMMENT_CONTENT),
            "comment closing dashes"),
    LexRule(T.CLOSE_TAG, _GT, trailing(T.COMMENT_CONTENT, T.COMMENT_DASHES),
            "end of a comment"),
)

del T


def classify(
    history: Sequence[TokenType],
    text: str,
    offset: int,
) -> Optional[Tuple[TokenType, int]]:
    """Classify the token starting at ``offset``.

    Args:
        history: Types of the tokens emitted so far; only the last
            ``LOOKBACK`` entries are consulted
        text: Complete input text
        offset: Current read position

    Returns:
        ``(token type, match length)`` for the first applicable rule, or
        None when no rule accepts the input at this position
    """
    window = tuple(history)[-LOOKBACK:]
    for rule in LEX_RULES:
        length = rule.match(window, text, offset)
        if length is not None:
            return rule.kind, length
    return None


@dataclass
class TokenizationResult:
    """Outcome of a tokenizer run."""

    tokens: Tuple[Token, ...]
    character_count: int
    consumed: int
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)

    @property
    def truncated(self) -> bool:
        """True when trailing input was dropped (lenient mode only)."""
        return self.consumed < self.character_count

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    @property
    def token_types(self) -> List[TokenType]:
        return [token.type for token in self.tokens]


def _advance(value: str, line: int, column: int) -> Tuple[int, int]:
    newlines = value.count("\n")
    if newlines:
        return line + newlines, len(value) - value.rfind("\n")
    return line, column + len(value)


class XMLTokenizer:
    """Turns markup text into a tuple of tokens.

    A tokenizer holds configuration only; every ``tokenize`` call keeps its
    state in locals, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        config: Optional[TokenizationConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or TokenizationConfig()
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, "xml_tokenizer")

    def tokenize(self, text: str) -> TokenizationResult:
        """Tokenize ``text``.

        Raises:
            XMLSyntaxError: In strict mode, when some input cannot be matched
                by any rule.
        """
        tokens: List[Token] = []
        window: Deque[TokenType] = deque(maxlen=LOOKBACK)
        diagnostics: List[DiagnosticEntry] = []
        offset, line, column = 0, 1, 1
        limit = self.config.max_iterations(len(text))
        iterations = 0

        while offset < len(text) and iterations < limit:
            iterations += 1
            match = classify(window, text, offset)
            if match is None:
                break
            kind, length = match
            value = text[offset:offset + length]
            tokens.append(Token(kind, value, TokenPosition(line, column, offset)))
            window.append(kind)
            line, column = _advance(value, line, column)
            offset += length

        if offset < len(text):
            diagnostics.append(
                self._unconsumed(text, offset, TokenPosition(line, column, offset), window)
            )

        self._logger.debug(
            "Tokenization complete",
            extra={
                "token_count": len(tokens),
                "character_count": len(text),
                "iterations": iterations,
            }
        )
        return TokenizationResult(
            tokens=tuple(tokens),
            character_count=len(text),
            consumed=offset,
            diagnostics=diagnostics,
        )

    def _unconsumed(
        self,
        text: str,
        offset: int,
        position: TokenPosition,
        window: Deque[TokenType],
    ) -> DiagnosticEntry:
        previous = window[-1].name if window else "start of input"
        message = f"Unexpected character {text[offset]!r} after {previous}"

        if self.config.strict:
            raise XMLSyntaxError(message, position, found=text[offset])

        dropped = len(text) - offset
        self._logger.warning(
            "Dropping untokenizable trailing input",
            extra={"offset": offset, "dropped_characters": dropped}
        )
        return DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message=f"{message}; {dropped} trailing characters dropped",
            component="xml_tokenizer",
            position=position.to_dict(),
            details={"dropped_characters": dropped},
            correlation_id=self.correlation_id,
        )


def tokenize(text: str, config: Optional[TokenizationConfig] = None) -> TokenizationResult:
    """Tokenize ``text`` with a throwaway ``XMLTokenizer``."""
    return XMLTokenizer(config).tokenize(text)
