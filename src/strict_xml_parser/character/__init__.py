"""Character layer: entity escaping applied to text and attribute values."""

from .entities import (
    DECODE_MAP,
    ENCODE_MAP,
    EntityDirection,
    decode,
    encode,
    transform,
)

__all__ = [
    "DECODE_MAP",
    "ENCODE_MAP",
    "EntityDirection",
    "decode",
    "encode",
    "transform",
]
