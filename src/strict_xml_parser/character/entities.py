"""Escaping between the five reserved XML characters and their named entities.

Both directions substitute in a single left-to-right pass. An entity written
by one substitution is therefore never rewritten by another, which keeps
``decode(encode(text)) == text`` for every string.

Encoding is not idempotent: escaping already-escaped text escapes its
ampersands again (``encode("&lt;") == "&amp;lt;"``).
"""

import re
from enum import Enum
from typing import Dict

ENCODE_MAP: Dict[str, str] = {
    "<": "&lt;",
    ">": "&gt;",
    "&": "&amp;",
    "'": "&apos;",
    '"': "&quot;",
}

DECODE_MAP: Dict[str, str] = {entity: char for char, entity in ENCODE_MAP.items()}

_ENCODE_PATTERN = re.compile("[<>&'\"]")
_DECODE_PATTERN = re.compile("&(?:lt|gt|amp|apos|quot);")


class EntityDirection(Enum):
    """Direction of an entity transform."""

    DECODE = "decode"   # entities -> raw characters, used when reading
    ENCODE = "encode"   # raw characters -> entities, used when writing


def encode(text: str) -> str:
    """Replace reserved characters with their named entities."""
    return _ENCODE_PATTERN.sub(lambda match: ENCODE_MAP[match.group()], text)


def decode(text: str) -> str:
    """Replace the five named entities with the characters they stand for.

    Anything else that looks like a reference (``&foo;``, ``&#10;``, a bare
    ``&``) is left untouched.
    """
    if "&" not in text:
        return text
    return _DECODE_PATTERN.sub(lambda match: DECODE_MAP[match.group()], text)


def transform(text: str, direction: EntityDirection) -> str:
    """Apply the entity transform in the requested direction."""
    if direction is EntityDirection.DECODE:
        return decode(text)
    if direction is EntityDirection.ENCODE:
        return encode(text)
    raise ValueError(f"Unknown entity direction: {direction!r}")
