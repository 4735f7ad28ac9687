"""
Redemption Codes — Bar Pattern Renderer
=========================================
Turns a numeric display code into a drawable bar layout.

This is a simplified visual pattern, NOT a scannable symbology:
each digit occupies one cell split into 4 equal slots, and a fixed
table says which slots carry a bar.

Doctrine:
- Same code + same geometry → same layout (deterministic).
- Layout is plain data; SVG output is derived from the layout.
- No external dependencies (stdlib html.escape only).
"""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Optional, Tuple

from core.codes.derivation import derive_code

SLOTS_PER_DIGIT = 4

BAR_PATTERNS: Tuple[Tuple[int, int, int, int], ...] = (
    (1, 1, 0, 0),  # 0
    (0, 1, 1, 0),  # 1
    (0, 0, 1, 1),  # 2
    (1, 0, 0, 1),  # 3
    (1, 1, 1, 0),  # 4
    (0, 1, 1, 1),  # 5
    (1, 0, 1, 0),  # 6
    (0, 1, 0, 1),  # 7
    (1, 0, 1, 1),  # 8
    (1, 1, 0, 1),  # 9
)

DEFAULT_WIDTH = 280
DEFAULT_HEIGHT = 120
BAR_TOP = 10
TEXT_BASELINE_OFFSET = 8
TEXT_AREA = 30


# ══════════════════════════════════════════════════════════════
# LAYOUT RECORDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Bar:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class BarcodeLayout:
    """
    Drawable bar sequence for one code.

    bars are ordered left to right. text is None when the caller asked
    for bars only.
    """
    code: str
    width: int
    height: int
    bars: Tuple[Bar, ...]
    text: Optional[str] = None
    text_x: float = 0.0
    text_y: float = 0.0

    @property
    def bar_count(self) -> int:
        return len(self.bars)


# ══════════════════════════════════════════════════════════════
# RENDERING
# ══════════════════════════════════════════════════════════════

def _require_digits(code: str) -> None:
    if not isinstance(code, str) or not code:
        raise ValueError("code must be a non-empty string of digits.")
    if not all("0" <= ch <= "9" for ch in code):
        raise ValueError(f"code must contain only ASCII digits, got {code!r}.")


def bar_modules(code: str) -> Tuple[int, ...]:
    """Flattened slot presence (4 per digit) for `code`."""
    _require_digits(code)
    modules: list[int] = []
    for ch in code:
        modules.extend(BAR_PATTERNS[int(ch)])
    return tuple(modules)


def render_barcode(
    code: str,
    *,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    show_text: bool = True,
) -> BarcodeLayout:
    """
    Lay out one bar per present slot.

    Each digit gets a cell of width/len(code); a present slot j draws a
    bar at cell_x + j * cell/4 with width max(1, cell/4).
    """
    _require_digits(code)
    if width <= 0 or height <= TEXT_AREA:
        raise ValueError(
            f"width must be > 0 and height > {TEXT_AREA}, got {width}x{height}."
        )

    cell = width / len(code)
    slot = cell / SLOTS_PER_DIGIT
    bar_width = max(1.0, slot)
    bar_height = height - TEXT_AREA

    bars: list[Bar] = []
    for i, ch in enumerate(code):
        cell_x = i * cell
        for j, present in enumerate(BAR_PATTERNS[int(ch)]):
            if present:
                bars.append(Bar(x=cell_x + j * slot, y=BAR_TOP, width=bar_width, height=bar_height))

    return BarcodeLayout(
        code=code,
        width=width,
        height=height,
        bars=tuple(bars),
        text=code if show_text else None,
        text_x=width / 2,
        text_y=height - TEXT_BASELINE_OFFSET,
    )


def barcode_for_seed(seed: str, **kwargs) -> BarcodeLayout:
    """Derive the display code for `seed` and lay it out."""
    return render_barcode(derive_code(seed), **kwargs)


def _num(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def render_svg(layout: BarcodeLayout) -> str:
    """Serialize a layout to a standalone SVG document."""
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{layout.width}" '
        f'height="{layout.height}" viewBox="0 0 {layout.width} {layout.height}">',
        f'<rect x="0" y="0" width="{layout.width}" height="{layout.height}" fill="white"/>',
    ]
    for bar in layout.bars:
        parts.append(
            f'<rect x="{_num(bar.x)}" y="{_num(bar.y)}" '
            f'width="{_num(bar.width)}" height="{_num(bar.height)}" fill="black"/>'
        )
    if layout.text is not None:
        parts.append(
            f'<text x="{_num(layout.text_x)}" y="{_num(layout.text_y)}" '
            f'font-family="monospace" font-size="12" text-anchor="middle" fill="black">'
            f"{html.escape(layout.text)}</text>"
        )
    parts.append("</svg>")
    return "".join(parts)
