"""
Redemption Coupon Engine — Default Catalog
============================================
The coupons a new session is seeded with. All start redeemable.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import List

from engines.coupon.models import Coupon


def default_catalog(now: datetime) -> List[Coupon]:
    """Fresh catalog with expiries counted from `now`."""
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware.")
    return [
        Coupon(
            coupon_id="greencafe-600",
            brand="GreenCafe",
            icon="☕",
            face=600,
            need_credits=Decimal("0.1"),
            description="GreenCafeで使えるドリンク券",
            products=("ホット/アイスコーヒー", "紅茶", "カフェラテ"),
            expires_at=now + timedelta(days=30),
        ),
        Coupon(
            coupon_id="ecomart-1200",
            brand="EcoMart",
            icon="🛒",
            face=1200,
            need_credits=Decimal("0.2"),
            description="EcoMartで使えるお買い物クーポン",
            products=("青果・惣菜・日用品", "一部セール除外"),
            expires_at=now + timedelta(days=60),
        ),
        Coupon(
            coupon_id="biocoffee-300",
            brand="BioCoffee",
            icon="🌱",
            face=300,
            need_credits=Decimal("0.05"),
            description="BioCoffeeのオーガニックドリンク",
            products=("オーガニックコーヒー", "ハーブティー"),
        ),
    ]
