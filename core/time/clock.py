"""
Redemption Core Time — Session Clock
======================================
Every timestamp the engine writes comes from an injected Clock:

    ledger debit        → LedgerDebit.debited_at
    redeem / use        → Coupon.redeemed_at / Coupon.used_at
    history entry       → TransactionRecord.timestamp
    barcode shown       → BarcodeDisplay.shown_at (lifetime starts here)

RULES (NON-NEGOTIABLE):
- No datetime.now() inside engine logic.
- Timestamps are timezone-aware UTC.
- Session time never runs backward. History is presented newest
  first, so a clock that rewinds would reorder it.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol, Union

Step = Union[float, timedelta]


class Clock(Protocol):
    """Source of UTC timestamps for one session."""

    def now_utc(self) -> datetime:
        ...  # pragma: no cover


class SystemClock:
    """Wall-clock time, used by production sessions."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Manually stepped clock for tests and replayed sessions.

    Usage:
        clock = FixedClock(datetime(2026, 2, 25, 9, 0, tzinfo=timezone.utc))
        session = RedemptionSession(clock=clock)
        session.redeem("ecomart-1200")        # redeemed_at == 09:00
        clock.advance(timedelta(minutes=5))
        session.barcode("ecomart-1200")       # shown_at == 09:05
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._now = fixed_dt.astimezone(timezone.utc)

    def now_utc(self) -> datetime:
        return self._now

    def advance(self, step: Step) -> datetime:
        """Move forward by seconds or a timedelta; returns the new time."""
        delta = step if isinstance(step, timedelta) else timedelta(seconds=step)
        if delta < timedelta(0):
            raise ValueError(f"Clock cannot move backward (step {delta}).")
        self._now = self._now + delta
        return self._now

    def advance_to(self, moment: datetime) -> datetime:
        """Jump to `moment`, which must not be earlier than now."""
        if moment.tzinfo is None:
            raise ValueError("moment must be timezone-aware.")
        return self.advance(moment - self._now)


_default_clock: Clock = SystemClock()


def set_default_clock(clock: Clock) -> None:
    """Clock used by sessions and ledgers built without one (tests only)."""
    global _default_clock
    _default_clock = clock


def get_default_clock() -> Clock:
    return _default_clock
