"""
Currency Amount Module

Decimal helpers for cash amounts. Balances and transaction amounts are kept
at cent precision with half-up rounding. NEVER uses float for stored values.

Amounts have no upper bound: rounding and balance arithmetic run in a local
context wide enough to hold every digit, so results are always exact.
"""

from decimal import (
    Decimal, DecimalException, InvalidOperation, ROUND_HALF_UP, getcontext, localcontext
)
from typing import Union
import re

# Set global decimal context for financial precision
getcontext().prec = 28

CENT = Decimal('0.01')
ZERO = Decimal('0.00')

AmountLike = Union[Decimal, int, float, str]

# Optional currency symbol and sign, then either comma-grouped thousands with
# an optional ".fraction", or plain digits with ".fraction" or ",cc", then an
# optional exponent.
_AMOUNT_PATTERN = re.compile(
    r'[$€£¥]?(?P<sign>[+-]?)[$€£¥]?'
    r'(?:(?P<grouped>\d{1,3}(?:,\d{3})+)(?P<point>\.\d*)?'
    r'|(?P<plain>\d*)(?P<fraction>\.\d*|,\d{1,2})?)'
    r'(?P<exponent>[eE][+-]?\d+)?'
)


def _exact_precision(*values: Decimal) -> int:
    """Digits needed to hold any of values, or their sum, at cent precision"""
    widest = max(value.adjusted() for value in values)
    return max(getcontext().prec, widest + 5)


def to_amount(value: AmountLike) -> Decimal:
    """
    Convert a value to a Decimal rounded to cents

    Args:
        value: Decimal, int, float or numeric string

    Returns:
        Decimal with exactly two decimal places

    Raises:
        ValueError: If value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Cannot convert {value!r} to an amount")

    if not isinstance(value, Decimal):
        # Go through str() so floats like 0.1 keep their printed value
        try:
            value = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Cannot convert {value!r} to an amount")

    if not value.is_finite():
        raise ValueError(f"Amount must be a finite number, got {value}")

    try:
        with localcontext() as ctx:
            ctx.prec = _exact_precision(value)
            return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except DecimalException as e:
        raise ValueError(f"Amount {value} cannot be held at cent precision") from e


def add_amounts(a: Decimal, b: Decimal) -> Decimal:
    """Exact sum of two cent amounts"""
    with localcontext() as ctx:
        ctx.prec = _exact_precision(a, b)
        return a + b


def subtract_amounts(a: Decimal, b: Decimal) -> Decimal:
    """Exact difference of two cent amounts"""
    with localcontext() as ctx:
        ctx.prec = _exact_precision(a, b)
        return a - b


def format_amount(amount: Decimal) -> str:
    """Format an amount to two decimal places, no grouping"""
    # A cent-quantized Decimal always prints in plain notation
    return str(to_amount(amount))


def decimal_from_string(value: str) -> Decimal:
    """
    Strictly convert keyboard input to Decimal, handling common formats

    Accepts an optional currency symbol and sign, comma-grouped thousands
    ("1,250.50"), a comma decimal separator with up to two digits ("12,50")
    and exponents ("1e5"). Anything else is refused rather than guessed at.

    Args:
        value: String representation of number, e.g. "500", "$1,250.50"

    Returns:
        Decimal value (not rounded)

    Raises:
        ValueError: If string cannot be converted to valid Decimal
    """
    if not value or not isinstance(value, str):
        raise ValueError("Value must be a non-empty string")

    match = _AMOUNT_PATTERN.fullmatch(value.strip())
    if match is None:
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    if match.group('grouped'):
        number = match.group('grouped').replace(',', '') + (match.group('point') or '')
    else:
        number = match.group('plain') + (match.group('fraction') or '').replace(',', '.')

    try:
        return Decimal(match.group('sign') + number + (match.group('exponent') or ''))
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to Decimal")
