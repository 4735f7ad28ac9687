"""
Redemption Coupon Engine — Coupon Record
==========================================
Frozen snapshot of one coupon. The projection store replaces the
snapshot on every transition; nothing mutates a Coupon in place.

Lifecycle (see core.primitives.workflow.COUPON_WORKFLOW):
    redeemable ──redeem──▶ usable ──use──▶ used (terminal)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from core.primitives.ledger import to_credits
from core.primitives.workflow import StateTransition
from core.time.temporal import is_past
from engines.coupon.formatting import coupon_label


class CouponStatus(Enum):
    REDEEMABLE = "redeemable"
    USABLE = "usable"
    USED = "used"


@dataclass(frozen=True)
class Coupon:
    """
    A catalog coupon and, once redeemed, its code + PIN.

    Invariants:
        - REDEEMABLE carries no code/pin.
        - USABLE and USED carry both.
        - only USED carries used_at.
    """
    coupon_id: str
    brand: str
    face: int
    need_credits: Decimal
    status: CouponStatus = CouponStatus.REDEEMABLE
    icon: Optional[str] = None
    description: Optional[str] = None
    products: Tuple[str, ...] = ()
    expires_at: Optional[datetime] = None
    code: Optional[str] = None
    pin: Optional[str] = None
    redeemed_at: Optional[datetime] = None
    used_at: Optional[datetime] = None
    transitions: Tuple[StateTransition, ...] = ()

    def __post_init__(self):
        if not self.coupon_id or not isinstance(self.coupon_id, str):
            raise ValueError("coupon_id must be a non-empty string.")
        if not self.brand:
            raise ValueError("brand must be non-empty.")
        if not isinstance(self.face, int) or self.face < 0:
            raise ValueError("face must be a non-negative int (JPY).")
        object.__setattr__(self, "need_credits", to_credits(self.need_credits))
        if self.need_credits <= 0:
            raise ValueError("need_credits must be > 0.")
        if not isinstance(self.status, CouponStatus):
            raise ValueError("status must be CouponStatus.")
        if not isinstance(self.products, tuple):
            object.__setattr__(self, "products", tuple(self.products))
        if self.expires_at is not None and self.expires_at.tzinfo is None:
            raise ValueError("expires_at must be timezone-aware.")

        has_secret = self.code is not None and self.pin is not None
        if self.status == CouponStatus.REDEEMABLE and (self.code or self.pin):
            raise ValueError("redeemable coupon must not carry code/pin.")
        if self.status != CouponStatus.REDEEMABLE and not has_secret:
            raise ValueError(f"{self.status.value} coupon must carry code and pin.")
        if (self.status == CouponStatus.USED) != (self.used_at is not None):
            raise ValueError("used_at is set exactly when status is used.")

    @property
    def label(self) -> str:
        return coupon_label(self.brand, self.face)

    @property
    def barcode_seed(self) -> Optional[str]:
        """'<code>-<pin>', the input of the display code. None until redeemed."""
        if self.code is None or self.pin is None:
            return None
        return f"{self.code}-{self.pin}"

    def is_expired(self, now: datetime) -> bool:
        return is_past(self.expires_at, now)

    def to_dict(self) -> dict:
        return {
            "coupon_id": self.coupon_id,
            "brand": self.brand,
            "face": self.face,
            "need_credits": str(self.need_credits),
            "status": self.status.value,
            "icon": self.icon,
            "description": self.description,
            "products": list(self.products),
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "code": self.code,
            "pin": self.pin,
            "redeemed_at": self.redeemed_at.isoformat() if self.redeemed_at else None,
            "used_at": self.used_at.isoformat() if self.used_at else None,
            "transitions": [t.to_dict() for t in self.transitions],
        }
