"""Tests for money presentation helpers."""

from decimal import Decimal

from cyberhunt.utils.money import format_cents, to_major_units


def test_to_major_units():
    assert to_major_units(5000) == Decimal("50.00")
    assert to_major_units(1) == Decimal("0.01")
    assert to_major_units(None) is None


def test_format_cents():
    assert format_cents(5000) == "50.00 USD"
    assert format_cents(123456789, "EUR") == "1,234,567.89 EUR"
    assert format_cents(0) == "0.00 USD"
    assert format_cents(None) is None
