"""PyEthBloom: the 2048-bit Ethereum log bloom in Python.

This package exposes the owned filter via `pyethbloom.Bloom` and a
read-only view via `pyethbloom.BloomRef`. Items go in either as raw bytes
(hashed with Keccak-256) or as precomputed 32-byte hashes.
"""

from __future__ import annotations

__all__ = [
    "Bloom",
    "BloomRef",
    "BLOOM_SIZE",
    "BLOOM_BITS",
    "Raw",
    "Hash",
    "Input",
    "keccak256",
    "FromHexError",
    "InvalidHexCharacter",
    "InvalidHexLength",
]

from .bloom import BLOOM_BITS, BLOOM_SIZE, Bloom, BloomRef
from .hashing import Hash, Input, Raw, keccak256
from .hexutil import FromHexError, InvalidHexCharacter, InvalidHexLength
