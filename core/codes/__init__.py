"""
Redemption Codes — Public API
===============================
Two unrelated kinds of code live here and must stay apart:

    derivation — deterministic 13-digit display code from a seed
    barcode    — bar layout for a display code
    minting    — random, unique redemption codes and PINs
"""

from core.codes.barcode import (
    BAR_PATTERNS,
    Bar,
    BarcodeLayout,
    bar_modules,
    barcode_for_seed,
    render_barcode,
    render_svg,
)
from core.codes.derivation import (
    CODE_LENGTH,
    derive_code,
    seed_hash,
)
from core.codes.minting import (
    generate_id,
    mint_code,
    mint_pin,
)

__all__ = [
    "BAR_PATTERNS",
    "Bar",
    "BarcodeLayout",
    "bar_modules",
    "barcode_for_seed",
    "render_barcode",
    "render_svg",
    "CODE_LENGTH",
    "derive_code",
    "seed_hash",
    "generate_id",
    "mint_code",
    "mint_pin",
]
