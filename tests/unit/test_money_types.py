"""Money rounding and currency validation tests."""

from decimal import Decimal

import pytest

from recognition_kernel.db.types import is_valid_currency, round_money, round_money_down


class TestRounding:

    @pytest.mark.parametrize("value,expected", [
        ("1.005", "1.01"),
        ("1.004", "1.00"),
        ("-1.005", "-1.01"),
        ("100", "100.00"),
    ])
    def test_round_half_up(self, value, expected):
        assert round_money(Decimal(value)) == Decimal(expected)

    @pytest.mark.parametrize("value,expected", [
        ("33.339", "33.33"),
        ("0.009", "0.00"),
        ("-1.019", "-1.01"),
    ])
    def test_round_down_truncates(self, value, expected):
        assert round_money_down(Decimal(value)) == Decimal(expected)


class TestCurrency:

    @pytest.mark.parametrize("code", ["IDR", "usd", " EUR "])
    def test_known(self, code):
        assert is_valid_currency(code)

    @pytest.mark.parametrize("code", ["", "XYZ", None, 840])
    def test_unknown(self, code):
        assert not is_valid_currency(code)
