"""
Redemption Command Layer — Rejection Model
============================================
Structured rejection reasons for denied operations.

A rejection is a value, not an exception. It travels back to the
caller inside a CommandOutcome so the UI layer can translate it into
a user-facing message.

Every rejection must be:
- Deterministic (same input → same rejection)
- Machine-readable (code)
- Human-readable (message)
- Traceable to the policy that produced it (policy_name)
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for command rejection.

    Fields:
        code:        Machine-readable rejection code (e.g. 'INVALID_STATE').
        message:     Human-readable explanation.
        policy_name: Name of the policy that caused rejection.
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Ledger ────────────────────────────────────────────────
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"

    # ── Coupon lifecycle ──────────────────────────────────────
    INSUFFICIENT_CREDITS = "INSUFFICIENT_CREDITS"
    INVALID_STATE = "INVALID_STATE"
    COUPON_NOT_FOUND = "COUPON_NOT_FOUND"
