"""
Unit Tests for money arithmetic and period helpers.

Tests business rules:
- Half-even rounding at 2 and 10 decimals
- Exact division before rounding
- Half-open month and fiscal-year windows
"""
import pytest
from datetime import date
from decimal import Decimal
from fractions import Fraction

from intercompany.domain.exceptions import InvalidPeriodError
from intercompany.domain.money import (
    ZERO,
    clamp_non_negative,
    divide,
    fraction_to_decimal,
    multiply,
    round_money,
    round_ratio,
    to_decimal,
)
from intercompany.domain.periods import (
    add_months,
    fiscal_year_window,
    month_window,
    months_in_window,
    next_month,
    validate_window,
)


class TestToDecimal:
    """Tests for amount conversion."""

    def test_float_uses_shortest_repr(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(1234.56) == Decimal("1234.56")

    def test_none_is_zero(self):
        assert to_decimal(None) == ZERO

    def test_passthrough_and_strings(self):
        value = Decimal("12.345")
        assert to_decimal(value) is value
        assert to_decimal("7.5") == Decimal("7.5")
        assert to_decimal(3) == Decimal(3)


class TestRounding:
    """Tests for half-even rounding."""

    def test_money_half_even(self):
        assert round_money(Decimal("2.675")) == Decimal("2.68")
        assert round_money(Decimal("2.665")) == Decimal("2.66")
        assert round_money(Decimal("0.125")) == Decimal("0.12")
        assert round_money(Decimal("0.135")) == Decimal("0.14")

    def test_money_negative_half_even(self):
        assert round_money(Decimal("-1.005")) == Decimal("-1.00")
        assert round_money(Decimal("-1.015")) == Decimal("-1.02")

    def test_money_keeps_two_decimals(self):
        assert str(round_money(Decimal("5"))) == "5.00"

    def test_ratio_ten_decimals(self):
        assert round_ratio(Decimal("0.33333333335")) == Decimal("0.3333333334")
        assert round_ratio(Decimal("0.33333333325")) == Decimal("0.3333333332")


class TestDivide:
    """Tests for exact division."""

    def test_thirds(self):
        assert divide(1, 3, 10) == Decimal("0.3333333333")
        assert divide(2, 3, 10) == Decimal("0.6666666667")

    def test_half_even_on_exact_tie(self):
        assert divide(Decimal("0.5"), 4, 2) == Decimal("0.12")
        assert divide(Decimal("0.7"), 4, 2) == Decimal("0.18")

    def test_divide_by_zero(self):
        with pytest.raises(ZeroDivisionError):
            divide(1, 0, 2)

    def test_fraction_to_decimal_negative(self):
        assert fraction_to_decimal(Fraction(-1, 8), 2) == Decimal("-0.12")
        assert fraction_to_decimal(Fraction(-3, 8), 2) == Decimal("-0.38")

    def test_multiply_is_exact(self):
        assert multiply(Decimal("1000.00"), Decimal("0.3333333333")) == Decimal("333.3333333000")


class TestClamp:
    """Tests for non-negative clamping."""

    def test_clamp(self):
        assert clamp_non_negative(Decimal("-0.01")) == ZERO
        assert clamp_non_negative(Decimal("4.20")) == Decimal("4.20")


class TestPeriods:
    """Tests for month and fiscal-year windows."""

    def test_next_month_rolls_year(self):
        assert next_month(date(2024, 12, 1)) == date(2025, 1, 1)
        assert next_month(date(2025, 2, 1)) == date(2025, 3, 1)

    def test_add_months(self):
        assert add_months(date(2024, 11, 1), 3) == date(2025, 2, 1)
        assert add_months(date(2024, 1, 1), -1) == date(2023, 12, 1)

    def test_month_window(self):
        assert month_window(2025, 12) == (date(2025, 12, 1), date(2026, 1, 1))

    @pytest.mark.parametrize("year,month", [(2009, 1), (2024, 0), (2024, 13)])
    def test_month_window_rejects_out_of_range(self, year, month):
        with pytest.raises(InvalidPeriodError) as exc_info:
            month_window(year, month, min_year=2010)
        assert exc_info.value.code == "INVALID_PERIOD"

    def test_fiscal_year_july_to_june(self):
        start, end = fiscal_year_window(2024)
        assert (start, end) == (date(2024, 7, 1), date(2025, 7, 1))
        months = months_in_window(start, end)
        assert len(months) == 12
        assert months[0] == date(2024, 7, 1)
        assert months[-1] == date(2025, 6, 1)

    def test_validate_window(self):
        validate_window(date(2025, 1, 1), date(2025, 2, 1))
        with pytest.raises(InvalidPeriodError):
            validate_window(date(2025, 2, 1), date(2025, 2, 1))
