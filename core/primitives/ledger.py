"""
Redemption Ledger Primitive — Credit Balance
==============================================
Owns the scalar credit balance (metric tons of CO2e) of one session.

RULES (NON-NEGOTIABLE):
- Balance is never negative. A debit that would overdraw is REJECTED,
  never clamped.
- The ledger only ever decreases. There is no credit operation.
- All amounts are Decimal. Floats are converted through str() so that
  0.1 means 0.1.
- Balance is rounded half-up to the configured quantum (0.1 t by
  default) after every mutation, but never above the balance before
  the debit. Rounding must not mint credits.
- Accepted debits are recorded as immutable LedgerDebit entries.
- One mutation in flight per ledger instance (re-entrant lock).

This file contains NO persistence logic.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Optional, Tuple, Union

from core.commands.outcomes import CommandOutcome
from core.commands.rejection import ReasonCode, RejectionReason
from core.time.clock import Clock, get_default_clock

logger = logging.getLogger("redemption.ledger")

CREDIT_QUANTUM = Decimal("0.1")

CreditAmount = Union[Decimal, int, float, str]


# ══════════════════════════════════════════════════════════════
# AMOUNT NORMALISATION
# ══════════════════════════════════════════════════════════════

def to_credits(value: CreditAmount) -> Decimal:
    """
    Normalise a credit amount to Decimal.

    Floats go through str() (0.2 → Decimal('0.2'), not the binary
    expansion). NaN and infinities are rejected.
    """
    if isinstance(value, bool):
        raise TypeError("credit amount must be numeric, got bool.")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValueError(f"Invalid credit amount: {value!r}.") from exc
    else:
        raise TypeError(
            f"credit amount must be Decimal, int, float or str, "
            f"got {type(value).__name__}."
        )
    if not amount.is_finite():
        raise ValueError(f"credit amount must be finite, got {value!r}.")
    return amount


def quantize_credits(amount: Decimal, quantum: Decimal = CREDIT_QUANTUM) -> Decimal:
    """Round half-up to `quantum` (0.35 → 0.4, 12.25 → 12.3)."""
    return amount.quantize(quantum, rounding=ROUND_HALF_UP)


# ══════════════════════════════════════════════════════════════
# DEBIT RECORD
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LedgerDebit:
    """
    Immutable record of one accepted debit.

    balance_after is the rounded balance, so
    balance_before - amount may differ from it by less than one quantum.
    """
    debit_id: uuid.UUID
    amount: Decimal
    balance_before: Decimal
    balance_after: Decimal
    debited_at: datetime
    reference: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.debit_id, uuid.UUID):
            raise ValueError("debit_id must be UUID.")
        if self.amount <= 0:
            raise ValueError("amount must be > 0.")
        if self.balance_after < 0:
            raise ValueError(
                "LEDGER INVARIANT VIOLATION: balance_after is negative."
            )
        if self.balance_after > self.balance_before:
            raise ValueError(
                "LEDGER INVARIANT VIOLATION: debit raised the balance."
            )

    def to_dict(self) -> dict:
        return {
            "debit_id": str(self.debit_id),
            "amount": str(self.amount),
            "balance_before": str(self.balance_before),
            "balance_after": str(self.balance_after),
            "debited_at": self.debited_at.isoformat(),
            "reference": self.reference,
        }


# ══════════════════════════════════════════════════════════════
# CREDIT LEDGER
# ══════════════════════════════════════════════════════════════

class CreditLedger:
    """
    Non-negative, decrease-only credit balance.

    The opening balance is taken as-is (it may carry more precision
    than the quantum); rounding applies from the first debit on and is
    capped at the pre-debit balance.
    """

    def __init__(
        self,
        opening_balance: CreditAmount,
        *,
        quantum: Decimal = CREDIT_QUANTUM,
        clock: Optional[Clock] = None,
    ):
        balance = to_credits(opening_balance)
        if balance < 0:
            raise ValueError(
                f"opening_balance must be >= 0, got {balance}."
            )
        if not isinstance(quantum, Decimal) or quantum <= 0:
            raise ValueError("quantum must be a positive Decimal.")
        self._balance = balance
        self._quantum = quantum
        self._clock = clock or get_default_clock()
        self._debits: List[LedgerDebit] = []
        self._lock = threading.RLock()

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def lock(self) -> threading.RLock:
        """Held by callers that must check-then-debit atomically."""
        return self._lock

    @property
    def debits(self) -> Tuple[LedgerDebit, ...]:
        return tuple(self._debits)

    @property
    def total_debited(self) -> Decimal:
        return sum((d.amount for d in self._debits), Decimal("0"))

    def can_afford(self, amount: CreditAmount) -> bool:
        return to_credits(amount) <= self._balance

    def debit(
        self,
        amount: CreditAmount,
        *,
        reference: Optional[str] = None,
    ) -> CommandOutcome:
        """
        Subtract `amount` from the balance.

        REJECTED with INSUFFICIENT_BALANCE when amount > balance; the
        balance is untouched in that case. Non-positive amounts are a
        caller bug and raise ValueError.
        """
        value = to_credits(amount)
        if value <= 0:
            raise ValueError(f"debit amount must be > 0, got {value}.")

        command_id = uuid.uuid4()
        with self._lock:
            now = self._clock.now_utc()
            before = self._balance
            if value > before:
                logger.info(
                    f"Debit {command_id} REJECTED: balance {before} < {value} "
                    f"(reference={reference})"
                )
                return CommandOutcome.rejected(
                    command_id,
                    now,
                    RejectionReason(
                        code=ReasonCode.INSUFFICIENT_BALANCE,
                        message=f"Balance is {before}t, debit needs {value}t.",
                        policy_name="non_negative_balance_policy",
                    ),
                )

            after = min(quantize_credits(before - value, self._quantum), before)
            record = LedgerDebit(
                debit_id=command_id,
                amount=value,
                balance_before=before,
                balance_after=after,
                debited_at=now,
                reference=reference,
            )
            self._balance = after
            self._debits.append(record)

        logger.info(
            f"Debit {command_id} ACCEPTED: {before} - {value} → {after} "
            f"(reference={reference})"
        )
        return CommandOutcome.accepted(command_id, now, record.to_dict())
