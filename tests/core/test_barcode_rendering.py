"""
Tests for core.codes.barcode — bar layout and SVG output.
"""

import pytest

from core.codes.barcode import (
    BAR_PATTERNS,
    bar_modules,
    barcode_for_seed,
    render_barcode,
    render_svg,
)
from core.codes.derivation import derive_code


class TestPatterns:
    def test_table(self):
        assert BAR_PATTERNS[0] == (1, 1, 0, 0)
        assert BAR_PATTERNS[4] == (1, 1, 1, 0)
        assert BAR_PATTERNS[9] == (1, 1, 0, 1)
        assert len(BAR_PATTERNS) == 10
        assert all(len(p) == 4 for p in BAR_PATTERNS)

    def test_modules_concatenate_patterns(self):
        assert bar_modules("07") == (1, 1, 0, 0, 0, 1, 0, 1)


class TestRenderBarcode:
    def test_single_digit_geometry(self):
        layout = render_barcode("0")
        assert layout.bar_count == 2
        first, second = layout.bars
        assert (first.x, first.y, first.width, first.height) == (0, 10, 70, 90)
        assert second.x == 70
        assert (layout.text_x, layout.text_y) == (140, 112)
        assert layout.text == "0"

    def test_one_bar_per_present_slot(self):
        code = derive_code("BC-AB12CD")
        layout = render_barcode(code)
        assert layout.bar_count == sum(bar_modules(code))

    def test_bars_left_to_right(self):
        layout = render_barcode("8888")
        xs = [bar.x for bar in layout.bars]
        assert xs == sorted(xs)

    def test_minimum_bar_width(self):
        layout = render_barcode("12", width=4)
        assert all(bar.width == 1.0 for bar in layout.bars)

    def test_hide_text(self):
        assert render_barcode("123", show_text=False).text is None

    def test_deterministic(self):
        assert render_barcode("4902102") == render_barcode("4902102")

    @pytest.mark.parametrize("code", ["", "12a4", "１２"])
    def test_non_digit_codes_rejected(self, code):
        with pytest.raises(ValueError):
            render_barcode(code)

    def test_height_must_leave_room_for_text(self):
        with pytest.raises(ValueError):
            render_barcode("1", height=30)

    def test_barcode_for_seed(self):
        layout = barcode_for_seed("DC-K3F9QZ-4821")
        assert layout.code == derive_code("DC-K3F9QZ-4821")


class TestRenderSvg:
    def test_contains_bars_and_text(self):
        layout = render_barcode("0")
        svg = render_svg(layout)
        assert svg.startswith("<svg")
        assert svg.endswith("</svg>")
        assert svg.count('fill="black"/>') == 2
        assert ">0</text>" in svg

    def test_no_text_element_when_hidden(self):
        svg = render_svg(render_barcode("0", show_text=False))
        assert "<text" not in svg
