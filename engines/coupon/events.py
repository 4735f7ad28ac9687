"""
Redemption Coupon Engine — Event Types
========================================
Single-use coupons bought with credits. Redeem once, use once.
"""

# ── Event Types ───────────────────────────────────────────────

COUPON_REDEEMED_V1 = "coupon.redeemed.v1"
COUPON_USED_V1 = "coupon.used.v1"

ALL_EVENT_TYPES = (
    COUPON_REDEEMED_V1,
    COUPON_USED_V1,
)


# ── Payload Builders ──────────────────────────────────────────

def _base_fields(cmd):
    return {
        "command_id": str(cmd.command_id),
        "coupon_id": cmd.coupon_id,
        "actor_id": getattr(cmd, "actor_id", None),
    }


def _coupon_redeemed(cmd, coupon, facts):
    base = _base_fields(cmd)
    base.update({
        "brand": coupon.brand,
        "face": coupon.face,
        "credits": str(coupon.need_credits),
        "code": facts["code"],
        "pin": facts["pin"],
        "balance_after": str(facts["balance_after"]),
        "redeemed_at": cmd.issued_at.isoformat(),
    })
    return base


def _coupon_used(cmd, coupon, facts):
    base = _base_fields(cmd)
    base.update({
        "brand": coupon.brand,
        "face": coupon.face,
        "code": coupon.code,
        "pin": coupon.pin,
        "used_at": cmd.issued_at.isoformat(),
    })
    return base


PAYLOAD_BUILDERS = {
    COUPON_REDEEMED_V1: _coupon_redeemed,
    COUPON_USED_V1: _coupon_used,
}

COMMAND_TO_EVENT_TYPE = {
    "coupon.redeem.request": COUPON_REDEEMED_V1,
    "coupon.use.request": COUPON_USED_V1,
}
