"""
Redemption Core Config — Public API
=====================================
Session tunables (gesture threshold, ledger rounding, minting).
"""

from core.config.settings import (
    DEFAULT_SETTINGS,
    ENV_PREFIX,
    RedemptionSettings,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "ENV_PREFIX",
    "RedemptionSettings",
]
