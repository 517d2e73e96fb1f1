"""Tokenization engine for strict XML parsing.

Converts raw markup text into an ordered tuple of typed tokens using a
fixed-priority table of guarded lexical rules.

Key Components:
    XMLTokenizer: Tokenizer class holding configuration and logging context
    classify: Pure rule lookup for a single position
    LEX_RULES: The priority-ordered rule table
    Token: Represents individual XML tokens with position information
    TokenType: Enumeration of all supported XML token types
"""

from .tokenizer import (
    LEX_RULES,
    LOOKBACK,
    LexRule,
    Token,
    TokenizationResult,
    TokenPosition,
    TokenType,
    XMLTokenizer,
    classify,
    tokenize,
)

__all__ = [
    "LEX_RULES",
    "LOOKBACK",
    "LexRule",
    "Token",
    "TokenizationResult",
    "TokenPosition",
    "TokenType",
    "XMLTokenizer",
    "classify",
    "tokenize",
]
