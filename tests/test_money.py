"""Tests for integer-cent money helpers."""

from decimal import Decimal

import pytest

from group_ledger.exceptions import InvalidAmountError
from group_ledger.money import (
    format_money,
    normalize_currency_code,
    parse_money,
    round_half_up,
    sum_cents,
    to_cents,
    to_decimal,
    validate_split_total,
)


class TestToCents:
    """Test conversion from decimal amounts to cents."""

    def test_decimal_amount(self):
        """Decimal dollars convert exactly."""
        assert to_cents(Decimal("12.34")) == 1234

    def test_string_and_int_amounts(self):
        """Strings and ints are accepted."""
        assert to_cents("60.00") == 6000
        assert to_cents(15) == 1500

    def test_half_rounds_away_from_zero(self):
        """Half a cent rounds away from zero in both directions."""
        assert to_cents("0.005") == 1
        assert to_cents("-0.005") == -1
        assert to_cents("2.675") == 268

    def test_float_binary_artifacts_do_not_leak(self):
        """0.1 + 0.2 is 30 cents, not 30.000000000000004."""
        assert to_cents(0.1 + 0.2) == 30
        assert to_cents(19.99) == 1999

    @pytest.mark.parametrize("bad", ["abc", "", "NaN", float("inf"), True])
    def test_rejects_non_numeric(self, bad):
        """Non-numeric and non-finite input raises InvalidAmountError."""
        with pytest.raises(InvalidAmountError):
            to_cents(bad)


class TestToDecimal:
    """Test conversion from cents to display decimals."""

    def test_two_places(self):
        """Cents become a two-place Decimal."""
        assert to_decimal(1234) == Decimal("12.34")
        assert str(to_decimal(5)) == "0.05"
        assert str(to_decimal(-150)) == "-1.50"

    @pytest.mark.parametrize("cents", [0, 1, -1, 99, 100, 333, 123456789, -98765])
    def test_round_trip(self, cents):
        """to_cents(to_decimal(c)) == c."""
        assert to_cents(to_decimal(cents)) == cents

    def test_rejects_float_cents(self):
        """Cents must be integers."""
        with pytest.raises(InvalidAmountError):
            to_decimal(12.5)


class TestSumCents:
    """Test exact summing of cent amounts."""

    def test_sum(self):
        """Integer sum is exact."""
        assert sum_cents([334, 333, 333]) == 1000
        assert sum_cents([]) == 0

    def test_rejects_floats(self):
        """A float in the list is an error, not a silent conversion."""
        with pytest.raises(InvalidAmountError):
            sum_cents([100, 2.5])

    def test_validate_split_total(self):
        """Split totals must match exactly."""
        assert validate_split_total(1000, [600, 400])
        assert not validate_split_total(1000, [600, 399])


class TestRoundHalfUp:
    """Test the shared rounding primitive."""

    def test_halves_round_up(self):
        """0.5 rounds to 1 and 2.5 rounds to 3 (not banker's rounding)."""
        assert round_half_up(Decimal("0.5")) == 1
        assert round_half_up(Decimal("2.5")) == 3
        assert round_half_up(Decimal("333.3")) == 333


class TestFormatting:
    """Test display formatting."""

    def test_usd(self):
        """Thousands separators and two decimals."""
        assert format_money(123456) == "$1,234.56"
        assert format_money(0) == "$0.00"

    def test_negative(self):
        """Negatives use a minus sign, or parentheses in accounting style."""
        assert format_money(-500) == "-$5.00"
        assert format_money(-500, accounting=True) == "($5.00)"

    def test_currency_symbols(self):
        """Known currencies use their symbol, others their code."""
        assert format_money(1000, currency="EUR") == "€10.00"
        assert format_money(1000, currency="gbp") == "£10.00"
        assert format_money(1000, currency="CHF") == "CHF 10.00"


class TestParseMoney:
    """Test parsing of user-facing money text."""

    def test_symbols_and_separators(self):
        """Currency symbols and thousands separators are ignored."""
        assert parse_money("$1,234.56") == 123456
        assert parse_money(" 10 ") == 1000

    def test_negative_forms(self):
        """Minus signs and accounting parentheses are negative."""
        assert parse_money("-3.5") == -350
        assert parse_money("($5.00)") == -500

    @pytest.mark.parametrize("bad", ["", "abc", "$", "-"])
    def test_rejects_text_without_number(self, bad):
        """Text with no digits is an error."""
        with pytest.raises(InvalidAmountError):
            parse_money(bad)


class TestCurrencyCode:
    """Test currency code normalisation."""

    def test_upper_cases(self):
        """Codes are upper-cased."""
        assert normalize_currency_code("eur") == "EUR"

    @pytest.mark.parametrize("bad", ["EURO", "US", "", "U$D", "12€"])
    def test_rejects_malformed(self, bad):
        """Anything but three letters is a ValueError."""
        with pytest.raises(ValueError, match="3-letter code"):
            normalize_currency_code(bad)
