"""Tests for Decimal helpers."""

from decimal import Decimal

import pytest

from src.utils.decimal_utils import coerce_decimal, quantize_money


def test_coerce_decimal_treats_missing_as_zero() -> None:
    assert coerce_decimal(None) == Decimal("0")
    assert coerce_decimal("") == Decimal("0")


def test_coerce_decimal_parses_strings_and_floats() -> None:
    assert coerce_decimal(" 12.50 ") == Decimal("12.50")
    assert coerce_decimal(0.1) == Decimal("0.1")


@pytest.mark.parametrize("value", ["abc", True])
def test_coerce_decimal_rejects_non_numbers(value) -> None:
    with pytest.raises(ValueError):
        coerce_decimal(value)


def test_quantize_money_rounds_half_up() -> None:
    assert quantize_money(Decimal("2.345")) == Decimal("2.35")
