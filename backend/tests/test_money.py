"""
Test per la normalizzazione degli importi.
"""

from decimal import Decimal

import pytest

from gestionale_studio.core.money import parse_money, round2, to_money


class TestParseMoney:
    """Test parsing importi da stringhe e numeri."""

    def test_italian_format_with_thousands(self):
        """Test '1.234,56' → 1234.56."""
        assert parse_money("1.234,56") == Decimal("1234.56")

    def test_plain_dot_decimal(self):
        assert parse_money("1234.56") == Decimal("1234.56")

    def test_currency_symbol_and_spaces(self):
        assert parse_money("€ 10,00") == Decimal("10.00")
        assert parse_money(" $ 7.5 ") == Decimal("7.5")

    def test_comma_only(self):
        assert parse_money("10,50") == Decimal("10.50")

    def test_garbage_is_zero(self):
        """Un importo non interpretabile vale 0 e non solleva eccezioni."""
        assert parse_money("garbage") == Decimal("0")
        assert parse_money("") == Decimal("0")

    def test_none_is_zero(self):
        assert parse_money(None) == Decimal("0")

    def test_leading_numeric_prefix(self):
        assert parse_money("12abc") == Decimal("12")
        assert parse_money("-3,5 euro") == Decimal("-3.5")

    def test_numbers_pass_through(self):
        assert parse_money(5) == Decimal("5")
        assert parse_money(0.1) == Decimal("0.1")
        assert parse_money(Decimal("2.345")) == Decimal("2.345")

    def test_non_finite_and_odd_types(self):
        assert parse_money(float("nan")) == Decimal("0")
        assert parse_money(float("inf")) == Decimal("0")
        assert parse_money(True) == Decimal("0")
        assert parse_money(["1"]) == Decimal("0")


class TestRound2:
    """Test arrotondamento al centesimo."""

    def test_half_away_from_zero(self):
        assert round2(Decimal("1.005")) == Decimal("1.01")
        assert round2(Decimal("-1.005")) == Decimal("-1.01")
        assert round2(Decimal("2.675")) == Decimal("2.68")

    def test_float_input_has_no_binary_drift(self):
        """1.005 come float non diventa 1.00."""
        assert round2(1.005) == Decimal("1.01")

    @pytest.mark.parametrize("value", ["0", "1.005", "-7.125", "1234.5678", "0.004", "99.995"])
    def test_idempotent(self, value):
        once = round2(Decimal(value))
        assert round2(once) == once

    def test_to_money(self):
        assert to_money("1.234,565") == Decimal("1234.57")
        assert str(to_money(3)) == "3.00"


class TestOutOfRangeAmounts:
    """Test importi enormi: non sollevano mai eccezioni."""

    def test_beyond_float_range_is_zero(self):
        """'1e400' come float è infinito: vale 0."""
        assert parse_money("1e400") == Decimal("0")
        assert parse_money(Decimal("1e400")) == Decimal("0")
        assert parse_money(10 ** 400) == Decimal("0")
        assert to_money("1e400") == Decimal("0.00")

    def test_large_amounts_are_rounded(self):
        """Oltre le 28 cifre della precisione di default il valore resta valido."""
        assert to_money("1e30") == Decimal("1e30")
        assert to_money(1e300) == Decimal("1e300")
        assert to_money("123456789012345678901234567890,555") == Decimal(
            "123456789012345678901234567890.56"
        )
