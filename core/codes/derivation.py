"""
Redemption Codes — Deterministic Display Code
===============================================
Maps a seed string to a fixed-length numeric code (JAN-style, 13
digits) for on-screen scanner rendering.

Doctrine:
- Pure function: same seed → same code, on every call, every process.
- No randomness, no hidden state.
- 32-bit FNV-1a style mixing with signed 32-bit wraparound, iterating
  UTF-16 code units so codes match the ones shown by the web client.

This module ONLY derives. Minting of redeemable codes lives in
core.codes.minting and must never call into this one.
"""

from __future__ import annotations

from typing import Iterator

HASH_OFFSET_BASIS = 0x811C9DC5
HASH_PRIME = 0x01000193
CODE_LENGTH = 13

_UINT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


def _to_int32(value: int) -> int:
    value &= _UINT32_MASK
    return value - (1 << 32) if value & _INT32_SIGN else value


def _utf16_units(seed: str) -> Iterator[int]:
    encoded = seed.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(encoded), 2):
        yield encoded[i] | (encoded[i + 1] << 8)


def seed_hash(seed: str) -> int:
    """Signed 32-bit hash of `seed`. An empty seed returns the offset basis."""
    if not isinstance(seed, str):
        raise TypeError(f"seed must be str, got {type(seed).__name__}.")
    h = HASH_OFFSET_BASIS
    for unit in _utf16_units(seed):
        h = _to_int32(h) ^ unit
        h = _to_int32(h * HASH_PRIME)
    return h


def derive_code(seed: str) -> str:
    """
    Derive the 13-digit display code for `seed`.

    Always returns exactly CODE_LENGTH ASCII digits.
    """
    digits = str(abs(seed_hash(seed)))
    return digits.rjust(CODE_LENGTH, "0")[:CODE_LENGTH]
