"""
Monetary precision helpers for order totals.

All amounts are handled as Decimal. Floats coming from JSON payloads are
converted through their string form so 0.1 stays 0.1 and never becomes
0.1000000000000000055511151231257827.

Rounding only happens at the persistence boundary (quantize), using
ROUND_HALF_EVEN (banker's rounding) so repeated rounding does not drift
upwards.
"""

from decimal import Decimal, ROUND_HALF_EVEN, InvalidOperation
from typing import Union

Number = Union[Decimal, str, int, float]

# Currency minor unit exponents (how many decimal places)
CURRENCY_EXPONENT = {
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "CAD": 2,
    "AUD": 2,
    "CHF": 2,
    "MXN": 2,
    "INR": 2,
    # Zero-decimal currencies
    "JPY": 0,
    "KRW": 0,
    "CLP": 0,
    # 3-decimal currencies
    "KWD": 3,
    "BHD": 3,
    "OMR": 3,
}

CURRENCY_SYMBOLS = {
    "USD": "$",
    "CAD": "$",
    "AUD": "$",
    "MXN": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "KRW": "₩",
}


def to_decimal(value: Number) -> Decimal:
    """
    Convert a payload number to Decimal without float artefacts.

    Examples:
        >>> to_decimal(0.1)
        Decimal('0.1')
        >>> to_decimal("12.50")
        Decimal('12.50')
        >>> to_decimal(None)
        Decimal('0')

    Raises:
        ValueError: If the value cannot be read as a number
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a monetary amount: {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Not a monetary amount: {value!r}")


def currency_exponent(currency: str) -> int:
    """
    Get the number of decimal places for a currency.

    Unknown currencies default to 2.

    Examples:
        >>> currency_exponent("USD")
        2
        >>> currency_exponent("JPY")
        0
    """
    return CURRENCY_EXPONENT.get((currency or "USD").upper(), 2)


def quantize_decimal(currency: str) -> Decimal:
    """Smallest unit for a currency, e.g. Decimal('0.01') for USD."""
    return Decimal(10) ** -currency_exponent(currency)


def quantize(currency: str, amount: Number) -> Decimal:
    """
    Round to currency decimals using banker's rounding (ROUND_HALF_EVEN).

    Examples:
        >>> quantize("USD", "10.127")
        Decimal('10.13')
        >>> quantize("USD", "10.125")
        Decimal('10.12')
        >>> quantize("JPY", "1234.56")
        Decimal('1235')
    """
    return to_decimal(amount).quantize(quantize_decimal(currency), rounding=ROUND_HALF_EVEN)


def format_money(currency: str, amount: Number) -> str:
    """
    Format an amount as a human-readable currency string (used in emails).

    Examples:
        >>> format_money("USD", "1234.5")
        '$1,234.50'
        >>> format_money("JPY", 1235)
        '¥1,235'
        >>> format_money("CHF", "10")
        'CHF 10.00'
    """
    code = (currency or "USD").upper()
    symbol = CURRENCY_SYMBOLS.get(code, code + " ")
    value = quantize(code, amount)
    exponent = currency_exponent(code)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.{exponent}f}"
