"""Tests for amount and duration parsing."""

import pytest
from decimal import Decimal

from projtrack.domain.errors import InvalidAmountError
from projtrack.utils.amount_parser import format_amount, parse_amount
from projtrack.utils.duration_parser import format_duration, parse_duration


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("1,234.56 USD", Decimal("1234.56")),
        ("(50.00)", Decimal("-50.00")),
        ("0.001", Decimal("0.001")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc12", "1.2.3", "NaN"])
def test_parse_amount_rejects_garbage(text):
    with pytest.raises(InvalidAmountError):
        parse_amount(text)


def test_format_amount():
    assert format_amount(Decimal("1234.5")) == "1,234.50"
    assert format_amount(Decimal("250.5"), "USD") == "250.50 USD"
    assert format_amount(None) == "-"


@pytest.mark.parametrize(
    "text, minutes",
    [("45", 45), ("45m", 45), ("2h", 120), ("1h30m", 90), ("1h 30min", 90), (" 2H 5M ", 125)],
)
def test_parse_duration(text, minutes):
    assert parse_duration(text) == minutes


@pytest.mark.parametrize("text", ["", "h", "1.5h", "ten minutes", "30s"])
def test_parse_duration_rejects_garbage(text):
    with pytest.raises(InvalidAmountError):
        parse_duration(text)


def test_format_duration():
    assert format_duration(45) == "45m"
    assert format_duration(65) == "1h 05m"
    assert format_duration(120) == "2h 00m"
