from decimal import Decimal, ROUND_HALF_EVEN
from typing import Union

CURRENCY_SYMBOLS = {
    "GBP": "£",
    "EUR": "€",
    "USD": "$",
}

Number = Union[int, float, Decimal, str]


def to_minor_units(amount: Number) -> int:
    """Convert a major-unit amount (25.50) to integer minor units (2550).

    The value goes through ``Decimal(str(...))`` so binary float noise such
    as ``0.1 + 0.2`` never leaks into the stored integer. Halves round to
    even, as ``round()`` does: 0.125 gives 12, 0.135 gives 14.
    """
    value = Decimal(str(amount)) * 100
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_EVEN))


def to_major_units(amount_minor: int) -> Decimal:
    return (Decimal(amount_minor) / 100).quantize(Decimal("0.01"))


def format_amount(amount_minor: int, currency: str) -> str:
    major = to_major_units(amount_minor)
    code = (currency or "").upper()
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol:
        return f"{symbol}{major:,.2f}"
    return f"{major:,.2f} {code}".strip()
