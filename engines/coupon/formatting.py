"""
Redemption Coupon Engine — Display Formatting
===============================================
Unit conversions and labels shared by history and balance displays.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from core.primitives.ledger import CreditAmount, to_credits

KG_PER_TON = 1000
DEFAULT_CREDIT_RATE_YEN = 6000


def format_yen(amount: int) -> str:
    """600 → '¥600', 1200 → '¥1,200'."""
    return f"¥{int(amount):,}"


def format_credits(credits: CreditAmount) -> str:
    """Decimal('12.4') → '12.4t'."""
    return f"{to_credits(credits):.1f}t"


def coupon_label(brand: str, face: int) -> str:
    """History label, e.g. 'GreenCafe ¥600'."""
    return f"{brand} {format_yen(face)}"


def kg_to_ton(kg: CreditAmount) -> Decimal:
    """Rounded half-up to 0.1 t."""
    tons = to_credits(kg) / KG_PER_TON
    return tons.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def ton_to_kg(tons: CreditAmount) -> int:
    """Floored to whole kg."""
    return math.floor(to_credits(tons) * KG_PER_TON)


def credits_to_yen(credits: CreditAmount, rate: int = DEFAULT_CREDIT_RATE_YEN) -> int:
    """Indicative JPY value, floored."""
    return math.floor(to_credits(credits) * rate)
