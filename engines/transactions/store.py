"""
Redemption Transaction History — In-Memory Recorder
=====================================================
Append-only storage for TransactionRecord entries.

Stored in insertion order; presented newest first. There is no
update and no delete.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from core.codes.minting import generate_id
from engines.transactions.models import TransactionKind, TransactionRecord

logger = logging.getLogger("redemption.transactions")


class TransactionRecorder:
    """
    Append-only transaction history for one session.

    summary_total(kind) always equals the face value sum of the
    coupons that reached the matching state.
    """

    def __init__(self) -> None:
        self._entries: List[TransactionRecord] = []
        self._ids: set = set()

    def append(
        self,
        kind: TransactionKind,
        label: str,
        credits: Optional[Decimal],
        amount: int,
        timestamp: datetime,
        *,
        coupon_id: Optional[str] = None,
    ) -> TransactionRecord:
        """Append a record. Only label and timestamp are validated."""
        if not label:
            raise ValueError("label must be non-empty.")
        if timestamp is None:
            raise ValueError("timestamp is required.")

        transaction_id = generate_id()
        while transaction_id in self._ids:
            transaction_id = generate_id()

        record = TransactionRecord(
            transaction_id=transaction_id,
            kind=kind,
            label=label,
            amount=amount,
            timestamp=timestamp,
            credits=credits,
            coupon_id=coupon_id,
        )
        self._entries.append(record)
        self._ids.add(transaction_id)
        logger.info(
            f"Transaction {transaction_id} recorded: {kind.value} {label} "
            f"(credits={credits}, amount={amount})"
        )
        return record

    # ── Queries ───────────────────────────────────────────────

    @property
    def entries(self) -> Tuple[TransactionRecord, ...]:
        """Insertion order."""
        return tuple(self._entries)

    def history(self) -> List[TransactionRecord]:
        """Newest first."""
        return list(reversed(self._entries))

    def recent(self, limit: int = 3) -> List[TransactionRecord]:
        if limit < 0:
            raise ValueError("limit must be >= 0.")
        return self.history()[:limit]

    def list_by_kind(self, kind: TransactionKind) -> List[TransactionRecord]:
        return [e for e in self._entries if e.kind == kind]

    def summary_total(self, kind: TransactionKind) -> int:
        return sum(e.amount for e in self._entries if e.kind == kind)

    def total_credits_spent(self) -> Decimal:
        return sum(
            (e.credits for e in self._entries if e.credits is not None),
            Decimal("0"),
        )

    @property
    def count(self) -> int:
        return len(self._entries)
