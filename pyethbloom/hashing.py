"""Hash inputs for the log bloom.

Every item that goes into a bloom is first reduced to a 32-byte Keccak-256
digest. Callers that already hold the digest (e.g. a topic hash) wrap it in
:class:`Hash` so it is used as-is; anything else is wrapped in :class:`Raw`
and hashed on demand.

Note: this is the *original* Keccak-256 used by Ethereum, which pads
differently from ``hashlib.sha3_256``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from Crypto.Hash import keccak

__all__ = ["HASH_SIZE", "Raw", "Hash", "Input", "keccak256", "derive_hash"]

HASH_SIZE = 32


def keccak256(data: bytes) -> bytes:
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


@dataclass(frozen=True)
class Raw:
    """Arbitrary-length bytes, hashed before use."""

    data: bytes


@dataclass(frozen=True)
class Hash:
    """A precomputed 32-byte digest, used directly."""

    digest: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.digest, (bytes, bytearray, memoryview)):
            raise TypeError(f"hash must be bytes, not {type(self.digest).__name__}")
        object.__setattr__(self, "digest", bytes(self.digest))
        if len(self.digest) != HASH_SIZE:
            raise ValueError(f"hash must be {HASH_SIZE} bytes, got {len(self.digest)}")


Input = Union[Raw, Hash, bytes, bytearray, memoryview]


def derive_hash(item: Input) -> bytes:
    """Resolve *item* to the digest the bit positions are read from.

    Plain bytes-like values are treated as :class:`Raw`.
    """
    if isinstance(item, Hash):
        return bytes(item.digest)
    if isinstance(item, Raw):
        return keccak256(item.data)
    if isinstance(item, (bytes, bytearray, memoryview)):
        return keccak256(item)
    raise TypeError(f"expected Raw, Hash or bytes, got {type(item).__name__}")
