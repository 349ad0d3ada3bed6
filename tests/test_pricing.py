"""Tests for format_price."""

from decimal import Decimal

import pytest

from commerce_gtm.pricing import InvalidInputError, format_price


class TestFormatPrice:
    def test_truncates_instead_of_rounding(self):
        assert format_price(11.999) == "11.99"

    def test_exact_decimal_truncation(self):
        assert format_price(10.005) == "10.00"
        assert format_price("0.29") == "0.29"

    def test_zero(self):
        assert format_price(0) == "0"
        assert format_price("0.00") == "0"
        assert format_price(Decimal("0.001")) == "0.00"

    def test_pads_to_two_decimals(self):
        assert format_price(5) == "5.00"
        assert format_price("7.5") == "7.50"

    def test_no_thousands_grouping(self):
        assert format_price("1234567.891") == "1234567.89"

    def test_negative_truncates_toward_zero(self):
        assert format_price("-3.459") == "-3.45"

    def test_decimal_input(self):
        assert format_price(Decimal("19.9999")) == "19.99"

    @pytest.mark.parametrize(
        "value",
        ["abc", "", None, True, "NaN", "Infinity", [1], "1_000", "\u0661\u0662", "12.5x"],
    )
    def test_rejects_non_numeric(self, value):
        with pytest.raises(InvalidInputError):
            format_price(value)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            format_price("12,50")

    def test_scientific_notation_string(self):
        assert format_price("1.5e2") == "150.00"

    def test_very_large_values(self):
        assert format_price(1e30) == "1" + "0" * 30 + ".00"
        assert format_price("123456789012345678901234567890.129") == (
            "123456789012345678901234567890.12"
        )
