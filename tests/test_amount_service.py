from decimal import Decimal

import pytest

from app.services.amount_service import format_amount, to_major_units, to_minor_units


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("25.50"), 2550),
        (25.5, 2550),
        ("19.99", 1999),
        (0.1 + 0.2, 30),
        (Decimal("0.005"), 0),
        (0.125, 12),
        (Decimal("0.135"), 14),
        (10, 1000),
    ],
)
def test_to_minor_units(amount, expected):
    assert to_minor_units(amount) == expected


def test_to_major_units_keeps_two_places():
    assert to_major_units(2550) == Decimal("25.50")
    assert str(to_major_units(7)) == "0.07"


def test_format_amount_known_currency():
    assert format_amount(2550, "GBP") == "£25.50"
    assert format_amount(123456, "gbp") == "£1,234.56"
    assert format_amount(900, "EUR") == "€9.00"


def test_format_amount_unknown_currency_uses_code():
    assert format_amount(1500, "CHF") == "15.00 CHF"
