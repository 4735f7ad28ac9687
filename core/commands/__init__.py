"""
Redemption Command Layer
==========================
Every ledger or coupon operation produces exactly one Outcome.
REJECTED outcomes are first-class values, never exceptions.
"""

from core.commands.outcomes import (
    CommandOutcome,
    CommandStatus,
)
from core.commands.rejection import (
    ReasonCode,
    RejectionReason,
)

__all__ = [
    # ── Outcomes ──────────────────────────────────────────────
    "CommandOutcome",
    "CommandStatus",
    # ── Rejection ─────────────────────────────────────────────
    "ReasonCode",
    "RejectionReason",
]
