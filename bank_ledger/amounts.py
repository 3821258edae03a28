"""
Monetary Amount Module

Decimal helpers for ledger amounts. NEVER uses float for monetary values:
anything that arrives as int, float or str is converted through its string
form before it touches a balance.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, getcontext
from typing import Union
import re

# Set global decimal context for financial precision
getcontext().prec = 28

CENT = Decimal('0.01')
ZERO = Decimal('0')

# Sums of amounts below this stay exact at the cent under 28-digit precision
MAX_INTEGER_DIGITS = 15

AmountLike = Union[Decimal, int, float, str]


def to_decimal(value: AmountLike) -> Decimal:
    """
    Convert a numeric value to Decimal without binary float artefacts

    Raises:
        ValueError: If the value is not numeric
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Cannot convert {value!r} to Decimal")
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Cannot convert {value!r} to Decimal")
    if not result.is_finite():
        raise ValueError(f"Cannot convert {value!r} to Decimal")
    return result


def quantize_cents(value: Decimal) -> Decimal:
    """
    Round to the cent, half away from zero

    Raises:
        ValueError: If the value carries too many digits to hold cents
    """
    try:
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount is too large to round to the cent: {value}")


def has_cent_precision(value: Decimal) -> bool:
    """Check that a value carries no non-zero digits below the cent"""
    if not value.is_finite():
        return False
    sign, digits, exponent = value.as_tuple()
    if exponent >= -2:
        return True
    # Digits past the second decimal place must all be zero, as in 1.500
    return not any(digits[exponent + 2:])


def within_amount_limit(value: Decimal) -> bool:
    """Check that a value has at most MAX_INTEGER_DIGITS integer digits"""
    return value.is_finite() and value.adjusted() < MAX_INTEGER_DIGITS


def decimal_from_string(value: str) -> Decimal:
    """
    Safely convert user-entered text to Decimal

    Accepts an optional leading sign and a single dot separator; rejects
    thousands separators, currency symbols and exponents so that the
    amount typed is exactly the amount posted.

    Raises:
        ValueError: If the text is not a plain decimal number
    """
    if not value or not isinstance(value, str):
        raise ValueError("Value must be a non-empty string")

    clean_value = value.strip()
    if not re.fullmatch(r'[+-]?(\d+(\.\d*)?|\.\d+)', clean_value):
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    return Decimal(clean_value)


def format_amount(value: Decimal) -> str:
    """Format for display with exactly two decimals"""
    return f"{quantize_cents(value):.2f}"
