"""
Redemption Transaction History — Immutable Records
====================================================
Every accepted redeem or use produces one TransactionRecord.
Records are append-only — never modified, never deleted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionKind(Enum):
    REDEEM = "redeem"   # credits exchanged for a coupon
    USE = "use"         # coupon presented at the till


@dataclass(frozen=True)
class TransactionRecord:
    """
    One ledger-affecting event.

    credits is set for REDEEM only; USE never debits the ledger.
    amount is the coupon's face value in JPY.
    """

    transaction_id: str
    kind: TransactionKind
    label: str
    amount: int
    timestamp: datetime
    credits: Optional[Decimal] = None
    coupon_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.transaction_id:
            raise ValueError("transaction_id must be non-empty.")
        if not isinstance(self.kind, TransactionKind):
            raise ValueError("kind must be TransactionKind.")
        if not self.label or not isinstance(self.label, str):
            raise ValueError("label must be a non-empty string.")
        if not isinstance(self.timestamp, datetime):
            raise ValueError("timestamp must be a datetime.")
        if self.kind == TransactionKind.USE and self.credits is not None:
            raise ValueError("use transactions carry no credit amount.")

    def to_dict(self) -> dict:
        return {
            "transaction_id": self.transaction_id,
            "kind": self.kind.value,
            "label": self.label,
            "credits": str(self.credits) if self.credits is not None else None,
            "amount": self.amount,
            "timestamp": self.timestamp.isoformat(),
            "coupon_id": self.coupon_id,
        }
