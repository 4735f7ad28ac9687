"""
Tests for core.codes.minting — redemption codes and PINs.
"""

import re

import pytest

from core.codes import minting
from core.codes.minting import generate_id, mint_code, mint_pin


class TestGenerateId:
    def test_format(self):
        for _ in range(50):
            assert re.fullmatch(r"[0-9A-Z]{6}", generate_id())

    def test_custom_length(self):
        assert len(generate_id(9)) == 9

    def test_invalid_length(self):
        with pytest.raises(ValueError):
            generate_id(0)


class TestMintCode:
    def test_format(self):
        assert re.fullmatch(r"DC-[0-9A-Z]{6}", mint_code("DC"))

    def test_avoids_issued_codes(self, monkeypatch):
        ids = iter(["AAAAAA", "AAAAAA", "BBBBBB"])
        monkeypatch.setattr(minting, "generate_id", lambda: next(ids))
        assert mint_code("DC", issued={"DC-AAAAAA"}) == "DC-BBBBBB"

    def test_gives_up_when_exhausted(self, monkeypatch):
        monkeypatch.setattr(minting, "generate_id", lambda: "AAAAAA")
        with pytest.raises(RuntimeError):
            mint_code("DC", issued={"DC-AAAAAA"})

    def test_empty_prefix(self):
        with pytest.raises(ValueError):
            mint_code("")


class TestMintPin:
    def test_four_digit_range(self):
        for _ in range(200):
            pin = mint_pin()
            assert len(pin) == 4
            assert 1000 <= int(pin) <= 9999

    def test_custom_digits(self):
        assert len(mint_pin(6)) == 6

    def test_invalid_digits(self):
        with pytest.raises(ValueError):
            mint_pin(0)
