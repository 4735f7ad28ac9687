"""
Redemption Core Config — Engine Settings
==========================================
Tunables for the gesture gate, ledger arithmetic and coupon minting.

Doctrine: no magic numbers in engine logic. Thresholds, rates and
lifetimes come from a RedemptionSettings instance handed to the
session, never from module constants inside the engines.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional


ENV_PREFIX = "REDEMPTION_"


# ══════════════════════════════════════════════════════════════
# SETTINGS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RedemptionSettings:
    """
    Session-wide configuration.

    Fields:
        swipe_threshold:          Progress percent that completes a gesture.
        gesture_reset_delay:      Seconds before an aborted gesture returns to idle.
        opening_balance:          Credit balance (t) a new session starts with.
        balance_quantum:          Rounding step applied after every debit.
        credit_rate_yen:          JPY value of one ton of credit.
        barcode_lifetime_seconds: How long a shown barcode stays valid.
        redeemed_code_prefix:     Prefix of codes minted on redemption.
        pin_digits:               Length of the numeric PIN.
    """

    swipe_threshold: int = 75
    gesture_reset_delay: float = 0.2
    opening_balance: Decimal = Decimal("12.4")
    balance_quantum: Decimal = Decimal("0.1")
    credit_rate_yen: int = 6000
    barcode_lifetime_seconds: int = 300
    redeemed_code_prefix: str = "DC"
    pin_digits: int = 4

    def __post_init__(self) -> None:
        if not 0 < self.swipe_threshold <= 100:
            raise ValueError(
                f"swipe_threshold must be in (0, 100], got {self.swipe_threshold}."
            )
        if self.gesture_reset_delay < 0:
            raise ValueError("gesture_reset_delay must be >= 0.")
        if not isinstance(self.opening_balance, Decimal):
            raise TypeError("opening_balance must be Decimal.")
        if self.opening_balance < 0:
            raise ValueError("opening_balance must be >= 0.")
        if not isinstance(self.balance_quantum, Decimal) or self.balance_quantum <= 0:
            raise ValueError("balance_quantum must be a positive Decimal.")
        if self.credit_rate_yen <= 0:
            raise ValueError("credit_rate_yen must be > 0.")
        if self.barcode_lifetime_seconds <= 0:
            raise ValueError("barcode_lifetime_seconds must be > 0.")
        if not self.redeemed_code_prefix or not self.redeemed_code_prefix.isalnum():
            raise ValueError("redeemed_code_prefix must be non-empty alphanumeric.")
        if not 1 <= self.pin_digits <= 9:
            raise ValueError("pin_digits must be between 1 and 9.")

    def with_overrides(self, **overrides: Any) -> RedemptionSettings:
        return replace(self, **overrides)

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> RedemptionSettings:
        """
        Build settings from REDEMPTION_* variables.

        e.g. REDEMPTION_SWIPE_THRESHOLD=80, REDEMPTION_OPENING_BALANCE=3.5.
        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        overrides: dict = {}
        for f in fields(cls):
            raw = env.get(f"{ENV_PREFIX}{f.name.upper()}")
            if raw is None or raw.strip() == "":
                continue
            overrides[f.name] = _coerce(f.name, f.type, raw.strip())
        return cls(**overrides)


def _coerce(name: str, type_name: Any, raw: str) -> Any:
    # dataclass field types are strings under `from __future__ import annotations`
    type_name = getattr(type_name, "__name__", type_name)
    try:
        if type_name == "int":
            return int(raw)
        if type_name == "float":
            return float(raw)
        if type_name == "Decimal":
            return Decimal(raw)
    except (ValueError, InvalidOperation) as exc:
        raise ValueError(f"{ENV_PREFIX}{name.upper()}: invalid value {raw!r}.") from exc
    return raw


DEFAULT_SETTINGS = RedemptionSettings()
