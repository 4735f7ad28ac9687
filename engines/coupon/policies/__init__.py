"""
Redemption Coupon Engine — Policies
=====================================
Lifecycle and affordability guards. Each policy returns None to
allow, or a RejectionReason to deny. Policies never mutate.
"""

from typing import Optional

from core.commands.rejection import ReasonCode, RejectionReason
from engines.coupon.models import CouponStatus


def coupon_must_exist_policy(
    command,
    coupon_lookup=None,
) -> Optional[RejectionReason]:
    """Command must target a coupon in this session's catalog."""
    if coupon_lookup is None:
        return None
    if coupon_lookup(command.coupon_id) is None:
        return RejectionReason(
            code=ReasonCode.COUPON_NOT_FOUND,
            message=f"Coupon '{command.coupon_id}' does not exist.",
            policy_name="coupon_must_exist_policy",
        )
    return None


def _require_status(command, coupon_lookup, expected: CouponStatus, policy_name: str):
    if coupon_lookup is None:
        return None
    coupon = coupon_lookup(command.coupon_id)
    if coupon is None:
        return None
    if coupon.status != expected:
        return RejectionReason(
            code=ReasonCode.INVALID_STATE,
            message=(
                f"Coupon '{coupon.coupon_id}' is {coupon.status.value}, "
                f"must be {expected.value}."
            ),
            policy_name=policy_name,
        )
    return None


def coupon_must_be_redeemable_policy(
    command,
    coupon_lookup=None,
) -> Optional[RejectionReason]:
    """Redeem is one-way: only a redeemable coupon can be redeemed."""
    return _require_status(
        command, coupon_lookup, CouponStatus.REDEEMABLE,
        "coupon_must_be_redeemable_policy",
    )


def coupon_must_be_usable_policy(
    command,
    coupon_lookup=None,
) -> Optional[RejectionReason]:
    """Use is one-way: only a usable coupon can be used."""
    return _require_status(
        command, coupon_lookup, CouponStatus.USABLE,
        "coupon_must_be_usable_policy",
    )


def sufficient_credits_policy(
    command,
    coupon_lookup=None,
    balance_lookup=None,
) -> Optional[RejectionReason]:
    """Balance must cover the coupon's required credits."""
    if coupon_lookup is None or balance_lookup is None:
        return None
    coupon = coupon_lookup(command.coupon_id)
    if coupon is None:
        return None
    balance = balance_lookup()
    if balance < coupon.need_credits:
        return RejectionReason(
            code=ReasonCode.INSUFFICIENT_CREDITS,
            message=f"Balance is {balance}t, {coupon.brand} needs {coupon.need_credits}t.",
            policy_name="sufficient_credits_policy",
        )
    return None
