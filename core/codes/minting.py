"""
Redemption Codes — Random Minting
===================================
Opaque identifiers and PINs handed out when a coupon is redeemed.

Uniqueness, not determinism, is the requirement here. Minted values
come from the `secrets` CSPRNG; callers that need session-wide
uniqueness pass the set of codes already issued.
"""

from __future__ import annotations

import secrets
import string
from typing import AbstractSet, Optional

ID_ALPHABET = string.digits + string.ascii_uppercase
ID_LENGTH = 6
MAX_MINT_ATTEMPTS = 32


def generate_id(length: int = ID_LENGTH) -> str:
    """Short uppercase base-36 identifier, e.g. 'K3F9QZ'."""
    if length <= 0:
        raise ValueError("length must be > 0.")
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


def mint_code(prefix: str, issued: Optional[AbstractSet[str]] = None) -> str:
    """
    Mint '<prefix>-<id>' not present in `issued`.

    Raises RuntimeError if no free code was found, which only happens
    when the id space is close to exhaustion.
    """
    if not prefix:
        raise ValueError("prefix must be non-empty.")
    taken = issued or frozenset()
    for _ in range(MAX_MINT_ATTEMPTS):
        candidate = f"{prefix}-{generate_id()}"
        if candidate not in taken:
            return candidate
    raise RuntimeError(
        f"Could not mint a unique '{prefix}' code after {MAX_MINT_ATTEMPTS} attempts."
    )


def mint_pin(digits: int = 4) -> str:
    """Numeric PIN without a leading zero, e.g. 1000..9999 for 4 digits."""
    if digits <= 0:
        raise ValueError("digits must be > 0.")
    low = 10 ** (digits - 1)
    high = 10 ** digits
    return str(low + secrets.randbelow(high - low))
