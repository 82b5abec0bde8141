"""Tests for minor-unit money helpers."""

from decimal import Decimal

import pytest

from ledger_tools.settle.money import (
    allocate_evenly,
    divide_rounded,
    from_minor_units,
    to_minor_units,
)


class TestToMinorUnits:
    """Conversion from major-unit amounts to integer cents."""

    def test_whole_amount(self):
        assert to_minor_units(Decimal("300")) == 30000

    def test_cents_exact(self):
        assert to_minor_units(Decimal("12.34")) == 1234

    def test_half_cent_rounds_up(self):
        """ROUND_HALF_UP, not banker's rounding."""
        assert to_minor_units(Decimal("0.005")) == 1
        assert to_minor_units(Decimal("0.025")) == 3

    def test_negative_half_cent_rounds_away_from_zero(self):
        assert to_minor_units(Decimal("-10.005")) == -1001

    def test_sub_cent_precision_dropped(self):
        assert to_minor_units(Decimal("33.333")) == 3333

    def test_accepts_int_and_str(self):
        assert to_minor_units(5) == 500
        assert to_minor_units("1.10") == 110


class TestFromMinorUnits:
    """Conversion back to 2-dp Decimals at the boundary."""

    def test_two_decimal_places(self):
        assert from_minor_units(10000) == Decimal("100.00")
        assert str(from_minor_units(10000)) == "100.00"

    def test_negative(self):
        assert from_minor_units(-3333) == Decimal("-33.33")

    def test_zero(self):
        assert str(from_minor_units(0)) == "0.00"


class TestAllocateEvenly:
    """Equal-split allocation that never loses a cent."""

    def test_even_division(self):
        assert allocate_evenly(30000, 3) == [10000, 10000, 10000]

    def test_leftover_goes_to_first_shares(self):
        assert allocate_evenly(10000, 3) == [3334, 3333, 3333]
        assert allocate_evenly(10001, 3) == [3334, 3334, 3333]

    def test_always_sums_to_total(self):
        for total in (1, 7, 99, 12345, 100000):
            for count in (1, 2, 3, 7, 11):
                assert sum(allocate_evenly(total, count)) == total

    def test_more_shares_than_cents(self):
        assert allocate_evenly(2, 4) == [1, 1, 0, 0]

    def test_zero_count_rejected(self):
        with pytest.raises(ValueError, match="Cannot allocate"):
            allocate_evenly(100, 0)


class TestDivideRounded:
    def test_rounds_half_up(self):
        assert divide_rounded(10000, 3) == 3333
        assert divide_rounded(5, 2) == 3

    def test_exact(self):
        assert divide_rounded(36000, 3) == 12000
