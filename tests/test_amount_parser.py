"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from bankbook.utils.amount_parser import is_amount_value, parse_amount, parse_amount_strict, to_cents


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("123.45", Decimal("123.45")),
        ("-50.00", Decimal("-50.00")),
        ("$1,234.56", Decimal("1234.56")),
        ("(123.45)", Decimal("-123.45")),
        ("($1,000.00)", Decimal("-1000.00")),
        (" 7 ", Decimal("7")),
    ],
)
def test_parse_amount_formats(raw, expected):
    """Bank export notations parse to exact decimals."""
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", None, "abc", "-", "$", "NaN", "Infinity"])
def test_parse_amount_non_numeric_is_zero(raw):
    """Anything that is not a finite number parses as zero."""
    assert parse_amount(raw) == Decimal("0")


def test_parse_amount_strict_accepts_same_formats():
    assert parse_amount_strict("(1,234.50)") == Decimal("-1234.50")


@pytest.mark.parametrize("raw", ["", "   ", "abc", "NaN"])
def test_parse_amount_strict_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_amount_strict(raw)


@pytest.mark.parametrize("value", ["12.34", "-4.50", "$1,200.00", "2000", "15."])
def test_is_amount_value_true(value):
    assert is_amount_value(value)


@pytest.mark.parametrize("value", ["abc", "2024-01-15", "1.234", "(12.00)", "", "12.3.4"])
def test_is_amount_value_false(value):
    assert not is_amount_value(value)


@pytest.mark.parametrize(
    "raw, expected",
    [("4.505", "4.51"), ("-4.505", "-4.51"), ("1.004", "1.00"), ("7", "7.00")],
)
def test_to_cents(raw, expected):
    assert str(to_cents(Decimal(raw))) == expected
