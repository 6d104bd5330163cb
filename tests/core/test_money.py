"""Tests for decimal money helpers."""

from decimal import Decimal

import pytest

from fin.core.money import convert, from_float, is_valid_amount, to_plain_string, truncate

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (Decimal("3.999"), Decimal("3.99")),
        (Decimal("-1.239"), Decimal("-1.23")),
        (Decimal("5"), Decimal("5.00")),
    ],
)
def test_truncate_rounds_toward_zero(value: Decimal, expected: Decimal) -> None:
    assert truncate(value) == expected


def test_truncate_custom_places() -> None:
    assert truncate(Decimal("1.23456"), places=4) == Decimal("1.2345")


def test_from_float_uses_shortest_repr() -> None:
    """0.29 must not become 0.28 through binary float noise."""
    assert from_float(0.29) == Decimal("0.29")
    assert from_float(3.8099) == Decimal("3.80")


def test_convert_truncates_product() -> None:
    assert convert(Decimal("100.99"), Decimal("3.80")) == Decimal("383.76")
    assert convert(Decimal("10.00"), Decimal("0.33")) == Decimal("3.30")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (Decimal("100.00"), "100"),
        (Decimal("1.50"), "1.5"),
        (Decimal("0.00"), "0"),
        (Decimal("1E+2"), "100"),
    ],
)
def test_to_plain_string(value: Decimal, expected: str) -> None:
    assert to_plain_string(value) == expected


@pytest.mark.parametrize("value", ["1.99", "100.00", "0.5", "7", ".5"])
def test_valid_amounts(value: str) -> None:
    assert is_valid_amount(Decimal(value))


@pytest.mark.parametrize("value", ["1.999", "-1.00", "NaN", "Infinity"])
def test_invalid_amounts(value: str) -> None:
    assert not is_valid_amount(Decimal(value))
