"""
Redemption Core Time — Temporal Helpers
=========================================
Pure functions for expiry logic (coupon validity, barcode display
lifetime). All functions take explicit datetime arguments — no hidden
clock access.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional


def _require_aware(name: str, dt: datetime) -> None:
    if not isinstance(dt, datetime):
        raise ValueError(f"{name} must be a datetime.")
    if dt.tzinfo is None:
        raise ValueError(f"{name} must be timezone-aware.")


def is_expired(issued_at: datetime, ttl_seconds: float, now: datetime) -> bool:
    """
    Check if something issued at `issued_at` has expired given a TTL.

    The boundary instant itself is still valid.
    """
    _require_aware("issued_at", issued_at)
    _require_aware("now", now)
    return (now - issued_at).total_seconds() > ttl_seconds


def seconds_until_expiry(
    issued_at: datetime, ttl_seconds: float, now: datetime
) -> Optional[float]:
    """Return seconds remaining before expiry, or None if already expired."""
    _require_aware("issued_at", issued_at)
    _require_aware("now", now)
    remaining = ttl_seconds - (now - issued_at).total_seconds()
    return remaining if remaining > 0 else None


def is_past(deadline: Optional[datetime], now: datetime) -> bool:
    """True when `deadline` is set and `now` is strictly after it."""
    if deadline is None:
        return False
    _require_aware("deadline", deadline)
    _require_aware("now", now)
    return now > deadline
