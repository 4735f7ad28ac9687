"""
Tests for engines.transactions — append-only redemption history.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from engines.transactions import TransactionKind, TransactionRecord, TransactionRecorder

NOW = datetime(2026, 2, 25, 9, 0, 0, tzinfo=timezone.utc)


def seeded_recorder():
    recorder = TransactionRecorder()
    recorder.append(TransactionKind.REDEEM, "GreenCafe ¥600", Decimal("0.1"), 600, NOW)
    recorder.append(
        TransactionKind.REDEEM, "EcoMart ¥1,200", Decimal("0.2"), 1200,
        NOW + timedelta(minutes=1),
    )
    recorder.append(TransactionKind.USE, "GreenCafe ¥600", None, 600, NOW + timedelta(minutes=2))
    recorder.append(TransactionKind.USE, "EcoMart ¥1,200", None, 1200, NOW + timedelta(minutes=3))
    return recorder


class TestAppend:
    def test_returns_record(self):
        recorder = TransactionRecorder()
        record = recorder.append(
            TransactionKind.REDEEM, "GreenCafe ¥600", Decimal("0.1"), 600, NOW,
            coupon_id="greencafe-600",
        )
        assert isinstance(record, TransactionRecord)
        assert record.kind == TransactionKind.REDEEM
        assert record.credits == Decimal("0.1")
        assert record.coupon_id == "greencafe-600"
        assert len(record.transaction_id) == 6
        assert recorder.count == 1

    def test_label_required(self):
        with pytest.raises(ValueError, match="label"):
            TransactionRecorder().append(TransactionKind.USE, "", None, 600, NOW)

    def test_timestamp_required(self):
        with pytest.raises(ValueError, match="timestamp"):
            TransactionRecorder().append(TransactionKind.USE, "GreenCafe ¥600", None, 600, None)

    def test_use_record_carries_no_credits(self):
        with pytest.raises(ValueError):
            TransactionRecorder().append(
                TransactionKind.USE, "GreenCafe ¥600", Decimal("0.1"), 600, NOW
            )

    def test_ids_unique(self):
        recorder = seeded_recorder()
        ids = {e.transaction_id for e in recorder.entries}
        assert len(ids) == recorder.count


class TestQueries:
    def test_entries_in_insertion_order(self):
        kinds = [e.kind for e in seeded_recorder().entries]
        assert kinds == [
            TransactionKind.REDEEM, TransactionKind.REDEEM,
            TransactionKind.USE, TransactionKind.USE,
        ]

    def test_history_newest_first(self):
        history = seeded_recorder().history()
        stamps = [e.timestamp for e in history]
        assert stamps == sorted(stamps, reverse=True)
        assert history[0].label == "EcoMart ¥1,200"

    def test_recent_defaults_to_three(self):
        recent = seeded_recorder().recent()
        assert len(recent) == 3
        assert recent[0].kind == TransactionKind.USE

    def test_summary_total(self):
        recorder = seeded_recorder()
        assert recorder.summary_total(TransactionKind.REDEEM) == 1800
        assert recorder.summary_total(TransactionKind.USE) == 1800

    def test_total_credits_spent(self):
        assert seeded_recorder().total_credits_spent() == Decimal("0.3")

    def test_list_by_kind(self):
        uses = seeded_recorder().list_by_kind(TransactionKind.USE)
        assert [e.amount for e in uses] == [600, 1200]

    def test_entries_not_mutable(self):
        recorder = seeded_recorder()
        with pytest.raises(AttributeError):
            recorder.entries[0].label = "changed"

    def test_to_dict(self):
        data = seeded_recorder().entries[0].to_dict()
        assert data["kind"] == "redeem"
        assert data["credits"] == "0.1"
        assert data["timestamp"] == NOW.isoformat()
