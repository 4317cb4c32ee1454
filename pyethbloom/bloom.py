"""The 2048-bit log bloom.

Layout (wire/storage compatible with existing filters):

    ┌──────────────────────────────────────────┐
    │ byte 0  …  byte 255  (256 bytes total)   │
    └──────────────────────────────────────────┘

• every item is hashed to 32 bytes (Keccak-256) unless already a hash
• 3 bit positions are read from the first 6 bytes of the hash, 2 bytes
  each, big-endian, masked to 0..2047
• bit *n* lives in byte ``255 - n // 8`` at bit ``n % 8`` (LSB first), i.e.
  bytes are addressed from the *end* of the buffer

Two flavours share the read-only logic: :class:`Bloom` owns its buffer,
:class:`BloomRef` is a read-only view over somebody else's.
"""
from __future__ import annotations

from typing import Iterable, Iterator, Optional, Union

from .hashing import Input, derive_hash
from .hexutil import InvalidHexLength, from_hex, to_hex

__all__ = ["BLOOM_SIZE", "BLOOM_BITS", "Bloom", "BloomRef", "bit_positions"]

# Constants
BLOOM_SIZE = 256  # bytes
BLOOM_BITS = 3  # bit positions set per item
_MASK = BLOOM_SIZE * 8 - 1
_BYTES_PER_INDEX = ((BLOOM_SIZE * 8).bit_length() + 7) // 8


def bit_positions(digest: bytes) -> Iterator[int]:
    """Yield the ``BLOOM_BITS`` bit positions encoded in *digest*."""
    # must be a power of 2
    assert BLOOM_SIZE & (BLOOM_SIZE - 1) == 0
    # out of range
    assert BLOOM_BITS * _BYTES_PER_INDEX <= len(digest)
    ptr = 0
    for _ in range(BLOOM_BITS):
        index = 0
        for _ in range(_BYTES_PER_INDEX):
            index = (index << 8) | digest[ptr]
            ptr += 1
        yield index & _MASK


def _buffer_of(other: BloomLike) -> Union[bytearray, memoryview]:
    if isinstance(other, _BloomBase):
        return other._buf
    view = memoryview(other)
    if not view.c_contiguous:
        raise ValueError("bloom buffer must be contiguous")
    view = view.cast("B")
    if view.nbytes != BLOOM_SIZE:
        raise ValueError(f"bloom must be {BLOOM_SIZE} bytes, got {view.nbytes}")
    return view


class _BloomBase:
    """Read-only operations shared by :class:`Bloom` and :class:`BloomRef`."""

    __slots__ = ()
    _buf: Union[bytearray, memoryview]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def is_empty(self) -> bool:
        return not any(self._buf)

    def contains(self, item: Input) -> bool:
        """True if *item* may have been accrued; False means it never was."""
        return self.contains_bloom(Bloom.from_input(item))

    def __contains__(self, item: Input) -> bool:
        return self.contains(item)

    def contains_bloom(self, other: BloomLike) -> bool:
        """True iff every bit set in *other* is also set here."""
        for a, b in zip(self._buf, _buffer_of(other)):
            if a & b != b:
                return False
        return True

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------
    def union(self, other: BloomLike) -> Bloom:
        return Bloom(bytes(a | b for a, b in zip(self._buf, _buffer_of(other))))

    def intersection(self, other: BloomLike) -> Bloom:
        return Bloom(bytes(a & b for a, b in zip(self._buf, _buffer_of(other))))

    # ------------------------------------------------------------------
    # Access & formatting
    # ------------------------------------------------------------------
    @property
    def data(self) -> memoryview:
        """Read-only view of the 256 bytes."""
        return memoryview(self._buf).toreadonly()

    def as_bytes(self) -> memoryview:
        return self.data

    def __bytes__(self) -> bytes:
        return bytes(self._buf)

    def to_hex(self) -> str:
        return to_hex(self._buf)

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(data={self.to_hex()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _BloomBase):
            return NotImplemented
        return bytes(self._buf) == bytes(other._buf)

    __hash__ = None  # type: ignore[assignment]


class Bloom(_BloomBase):
    """Owned 256-byte log bloom.

    Not thread-safe: ``accrue`` and ``accrue_bloom`` do unsynchronised
    read-modify-write on single bytes. Callers sharing one instance across
    threads must hold a lock around each mutating call.
    """

    __slots__ = ("_buf",)

    def __init__(self, data: Optional[bytes] = None):
        self._buf = bytearray(BLOOM_SIZE)
        if data is not None:
            self._buf[:] = _buffer_of(data)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_bytes(cls, blob: bytes) -> "Bloom":
        """Copy exactly ``BLOOM_SIZE`` bytes into a new bloom."""
        return cls(blob)

    @classmethod
    def from_hex(cls, text: str) -> "Bloom":
        """Parse 512 hex digits.

        Raises :class:`InvalidHexCharacter` or :class:`InvalidHexLength`;
        no bloom is built on failure.
        """
        blob = from_hex(text)
        if len(blob) != BLOOM_SIZE:
            raise InvalidHexLength(f"bloom must decode to {BLOOM_SIZE} bytes, got {len(blob)}")
        return cls(blob)

    parse = from_hex

    @classmethod
    def from_input(cls, item: Input) -> "Bloom":
        bloom = cls()
        bloom.accrue(item)
        return bloom

    @classmethod
    def from_inputs(cls, items: Iterable[Input]) -> "Bloom":
        bloom = cls()
        for item in items:
            bloom.accrue(item)
        return bloom

    def copy(self) -> "Bloom":
        return Bloom(self._buf)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def accrue(self, item: Input) -> None:
        """Set the item's bit positions."""
        for index in bit_positions(derive_hash(item)):
            self._buf[BLOOM_SIZE - 1 - index // 8] |= 1 << (index % 8)

    def accrue_bloom(self, other: BloomLike) -> None:
        """Merge *other* into this bloom (bitwise OR)."""
        buf = _buffer_of(other)
        for i in range(BLOOM_SIZE):
            self._buf[i] |= buf[i]

    merge = accrue_bloom


class BloomRef(_BloomBase):
    """Read-only view over a 256-byte buffer or another :class:`Bloom`.

    The view shares the buffer: later accruals into the owning bloom are
    visible through it.
    """

    __slots__ = ("_buf",)

    def __init__(self, source: BloomLike):
        self._buf = memoryview(_buffer_of(source)).toreadonly()

    def to_bloom(self) -> Bloom:
        return Bloom(self._buf)


BloomLike = Union[_BloomBase, bytes, bytearray, memoryview]
