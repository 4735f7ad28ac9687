"""
Redemption Coupon Engine — Commands
=====================================
Redeem (spend credits for a coupon) and use (present it at the till).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

REDEEM_COMMAND_TYPE = "coupon.redeem.request"
USE_COMMAND_TYPE = "coupon.use.request"


def _validate_common(coupon_id: str, issued_at: datetime) -> None:
    if not coupon_id or not isinstance(coupon_id, str):
        raise ValueError("coupon_id must be a non-empty string.")
    if not isinstance(issued_at, datetime):
        raise ValueError("issued_at must be a datetime.")
    if issued_at.tzinfo is None:
        raise ValueError("issued_at must be timezone-aware.")


@dataclass(frozen=True)
class CouponCommand:
    """Routed command as seen by policies and payload builders."""
    command_id: uuid.UUID
    command_type: str
    coupon_id: str
    issued_at: datetime
    actor_id: Optional[str] = None


@dataclass(frozen=True)
class RedeemCouponRequest:
    """Exchange the coupon's required credits for a usable code + PIN."""
    coupon_id: str
    issued_at: datetime
    actor_id: Optional[str] = None

    def __post_init__(self):
        _validate_common(self.coupon_id, self.issued_at)

    def to_command(self) -> CouponCommand:
        return CouponCommand(
            command_id=uuid.uuid4(),
            command_type=REDEEM_COMMAND_TYPE,
            coupon_id=self.coupon_id,
            issued_at=self.issued_at,
            actor_id=self.actor_id,
        )


@dataclass(frozen=True)
class UseCouponRequest:
    """Consume a usable coupon. No credits move."""
    coupon_id: str
    issued_at: datetime
    actor_id: Optional[str] = None

    def __post_init__(self):
        _validate_common(self.coupon_id, self.issued_at)

    def to_command(self) -> CouponCommand:
        return CouponCommand(
            command_id=uuid.uuid4(),
            command_type=USE_COMMAND_TYPE,
            coupon_id=self.coupon_id,
            issued_at=self.issued_at,
            actor_id=self.actor_id,
        )
