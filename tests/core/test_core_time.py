"""
Tests for core.time — Clock protocol, temporal helpers and schedulers.
"""

import pytest
from datetime import datetime, timezone, timedelta

from core.time.clock import (
    FixedClock,
    SystemClock,
    set_default_clock,
    get_default_clock,
)
from core.primitives.ledger import CreditLedger
from core.time.scheduler import ManualScheduler, ThreadingScheduler
from core.time.temporal import is_expired, is_past, seconds_until_expiry

NOW = datetime(2026, 2, 25, 9, 0, 0, tzinfo=timezone.utc)


# ── Clock Tests ──────────────────────────────────────────────

class TestSystemClock:
    def test_returns_utc_datetime(self):
        dt = SystemClock().now_utc()
        assert dt.tzinfo == timezone.utc


class TestFixedClock:
    def test_returns_fixed_time(self):
        clock = FixedClock(NOW)
        assert clock.now_utc() == NOW
        assert clock.now_utc() == NOW

    def test_rejects_naive_datetime(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            FixedClock(datetime(2026, 1, 1))

    def test_normalises_to_utc(self):
        tokyo = timezone(timedelta(hours=9))
        clock = FixedClock(datetime(2026, 2, 25, 18, 0, 0, tzinfo=tokyo))
        assert clock.now_utc() == NOW
        assert clock.now_utc().tzinfo == timezone.utc

    def test_advance_seconds_or_timedelta(self):
        clock = FixedClock(NOW)
        assert clock.advance(60) == NOW + timedelta(seconds=60)
        clock.advance(timedelta(minutes=4))
        assert clock.now_utc() == NOW + timedelta(minutes=5)

    def test_never_moves_backward(self):
        clock = FixedClock(NOW)
        with pytest.raises(ValueError, match="backward"):
            clock.advance(-1)
        with pytest.raises(ValueError, match="backward"):
            clock.advance_to(NOW - timedelta(seconds=1))
        assert clock.now_utc() == NOW

    def test_advance_to(self):
        clock = FixedClock(NOW)
        later = NOW + timedelta(seconds=301)
        assert clock.advance_to(later) == later


class TestDefaultClock:
    def test_ledger_without_clock_uses_default(self):
        original = get_default_clock()
        set_default_clock(FixedClock(NOW))
        try:
            outcome = CreditLedger("1.0").debit("0.1")
            assert outcome.occurred_at == NOW
        finally:
            set_default_clock(original)


# ── Temporal Helper Tests ────────────────────────────────────

class TestTemporalHelpers:
    def test_not_expired_within_ttl(self):
        assert not is_expired(NOW, 300, NOW + timedelta(seconds=299))

    def test_boundary_is_still_valid(self):
        assert not is_expired(NOW, 300, NOW + timedelta(seconds=300))

    def test_expired_after_ttl(self):
        assert is_expired(NOW, 300, NOW + timedelta(seconds=301))

    def test_seconds_until_expiry(self):
        assert seconds_until_expiry(NOW, 300, NOW + timedelta(seconds=100)) == 200

    def test_seconds_until_expiry_none_when_expired(self):
        assert seconds_until_expiry(NOW, 300, NOW + timedelta(seconds=300)) is None

    def test_naive_datetimes_rejected(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            is_expired(datetime(2026, 1, 1), 10, NOW)

    def test_is_past(self):
        assert not is_past(None, NOW)
        assert not is_past(NOW, NOW)
        assert is_past(NOW, NOW + timedelta(microseconds=1))


# ── Scheduler Tests ──────────────────────────────────────────

class TestManualScheduler:
    def test_nothing_fires_before_advance(self):
        fired = []
        scheduler = ManualScheduler()
        scheduler.call_later(0.2, lambda: fired.append("a"))
        assert fired == []
        assert scheduler.pending == 1

    def test_fires_when_due(self):
        fired = []
        scheduler = ManualScheduler()
        scheduler.call_later(0.2, lambda: fired.append("a"))
        assert scheduler.advance(0.1) == 0
        assert scheduler.advance(0.1) == 1
        assert fired == ["a"]
        assert scheduler.pending == 0

    def test_fires_in_due_order(self):
        fired = []
        scheduler = ManualScheduler()
        scheduler.call_later(2, lambda: fired.append("late"))
        scheduler.call_later(1, lambda: fired.append("early"))
        scheduler.call_later(1, lambda: fired.append("early-second"))
        scheduler.advance(5)
        assert fired == ["early", "early-second", "late"]

    def test_cancelled_timer_never_fires(self):
        fired = []
        scheduler = ManualScheduler()
        handle = scheduler.call_later(0.2, lambda: fired.append("a"))
        handle.cancel()
        handle.cancel()
        assert scheduler.advance(1) == 0
        assert fired == []

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            ManualScheduler().call_later(-1, lambda: None)

    def test_negative_advance_rejected(self):
        with pytest.raises(ValueError):
            ManualScheduler().advance(-1)


class TestThreadingScheduler:
    def test_cancel_before_fire(self):
        fired = []
        handle = ThreadingScheduler().call_later(60, lambda: fired.append("a"))
        handle.cancel()
        assert fired == []

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            ThreadingScheduler().call_later(-0.1, lambda: None)
