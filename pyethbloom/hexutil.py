"""Strict hex text codec.

Only ``[0-9a-fA-F]`` is accepted on input: no ``0x`` prefix, no whitespace,
no separators. Output is always lowercase.
"""
from __future__ import annotations

import logging
import string

__all__ = ["FromHexError", "InvalidHexCharacter", "InvalidHexLength", "to_hex", "from_hex"]

logger = logging.getLogger(__name__)

_HEXDIGITS = frozenset(string.hexdigits)


class FromHexError(ValueError):
    """Base class for hex decoding failures."""


class InvalidHexCharacter(FromHexError):
    def __init__(self, char: str, index: int):
        super().__init__(f"invalid character {char!r} at position {index}")
        self.char = char
        self.index = index


class InvalidHexLength(FromHexError):
    pass


def to_hex(data: bytes) -> str:
    return bytes(data).hex()


def from_hex(text: str) -> bytes:
    """Decode *text* into bytes.

    Characters are validated before the length, so a bad character is
    reported even when the text also has odd length.
    """
    if not isinstance(text, str):
        raise TypeError(f"expected str, got {type(text).__name__}")
    for i, ch in enumerate(text):
        if ch not in _HEXDIGITS:
            logger.debug("rejecting hex text: bad character %r at %d", ch, i)
            raise InvalidHexCharacter(ch, i)
    if len(text) % 2:
        logger.debug("rejecting hex text: odd length %d", len(text))
        raise InvalidHexLength(f"odd number of hex digits: {len(text)}")
    return bytes.fromhex(text)
