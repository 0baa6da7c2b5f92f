"""Unit tests for force_planner.decimal_math."""

from __future__ import annotations

from decimal import Decimal

import pytest

from force_planner import decimal_math as dm


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("$1,234.50", Decimal("1234.50")),
        (" 42 ", Decimal("42")),
        (7, Decimal("7")),
        (0.1, Decimal("0.1")),
        (Decimal("3.30"), Decimal("3.30")),
        ("1e12", Decimal("1e12")),
    ],
)
def test_to_decimal_parses_amounts(raw, expected) -> None:
    assert dm.to_decimal(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [None, "", "   ", "abc", "12..5", float("nan"), float("inf"), "Infinity", "1e9999999", "-1e9999999"],
)
def test_to_decimal_treats_bad_input_as_zero(raw) -> None:
    assert dm.to_decimal(raw) == dm.ZERO


def test_out_of_range_arithmetic_is_zero() -> None:
    huge = "9e999999"
    assert dm.multiply(huge, huge) == dm.ZERO
    assert dm.add(huge, huge) == dm.ZERO
    assert dm.total([huge, huge]) == dm.ZERO
    assert dm.round_places(dm.multiply(huge, "10")) == dm.ZERO
    assert dm.divide(huge, "1e-999998") == dm.ZERO


def test_floor_divide_truncates_fractional_units() -> None:
    assert dm.floor_divide(950, 100) == Decimal(9)
    assert dm.floor_divide("1050", "100") == Decimal(10)
    assert dm.floor_divide("99.99", "100") == Decimal(0)


def test_floor_divide_by_zero_is_zero() -> None:
    assert dm.floor_divide(500, 0) == dm.ZERO
    assert dm.floor_divide(500, "") == dm.ZERO


def test_round_places_rounds_half_up() -> None:
    assert dm.round_places(Decimal("2.345")) == Decimal("2.35")
    assert dm.round_places(Decimal("2.344")) == Decimal("2.34")
    assert dm.round_places(Decimal("0.125"), 2) == Decimal("0.13")
    assert dm.round_places(Decimal("7"), 2) == Decimal("7.00")


def test_total_has_no_float_drift() -> None:
    assert dm.total(["0.1"] * 1000) == Decimal("100")
    assert dm.total([]) == dm.ZERO


def test_large_sums_keep_every_cent() -> None:
    budgets = [Decimal("99999999999.99")] * 1000
    assert dm.total(budgets) == Decimal("99999999999990.00")


def test_comparisons_and_clamp() -> None:
    assert dm.lte("100", 100)
    assert not dm.gt("100", "100.00")
    assert dm.gt("100.01", 100)
    assert dm.clamp(5, 0, 3) == Decimal(3)
    assert dm.clamp(-1, 0, 3) == Decimal(0)
    assert dm.non_negative("-4") == dm.ZERO


def test_to_float_rounds_for_presentation() -> None:
    assert dm.to_float(Decimal("1.005")) == 1.01
    assert dm.to_float(Decimal("143e9")) == 143e9
