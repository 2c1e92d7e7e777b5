"""
Money and ratio arithmetic for intercompany allocation.

All amounts are Decimal. Money is kept at 2 decimals and consultant ratios at
10 decimals, both rounded with ROUND_HALF_EVEN. Division is computed from the
exact rational quotient so that the half-even decision is made once, on the
true value, never on an intermediate already rounded to context precision.
"""
from decimal import Decimal, Context, ROUND_HALF_EVEN
from fractions import Fraction
from typing import Union

SCALE = 2
RATIO_SCALE = 10
ZERO = Decimal("0")

# Wide enough that products of money and ratios are never rounded before quantize
_EXACT = Context(prec=60, rounding=ROUND_HALF_EVEN)

Number = Union[Decimal, int, Fraction]


def to_decimal(value) -> Decimal:
    """
    Convert a stored amount to Decimal.

    Floats go through their shortest repr, so 0.1 becomes Decimal('0.1')
    and not the binary expansion.

    Args:
        value: Decimal, float, int, str or None

    Returns:
        Decimal value (zero for None)
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def quantize(value: Decimal, scale: int) -> Decimal:
    """Round to `scale` decimals, half-even."""
    return value.quantize(Decimal(1).scaleb(-scale), rounding=ROUND_HALF_EVEN, context=_EXACT)


def round_money(value: Decimal) -> Decimal:
    """Round a money amount to 2 decimals, half-even."""
    return quantize(value, SCALE)


def round_ratio(value: Decimal) -> Decimal:
    """Round a ratio to 10 decimals, half-even."""
    return quantize(value, RATIO_SCALE)


def multiply(a: Decimal, b: Decimal) -> Decimal:
    """Exact product of two decimals."""
    return _EXACT.multiply(a, b)


def divide(numerator: Number, denominator: Number, scale: int) -> Decimal:
    """
    Divide and round the exact quotient to `scale` decimals, half-even.

    Args:
        numerator: Dividend
        denominator: Divisor (must be non-zero)
        scale: Number of decimals in the result

    Returns:
        Quotient as Decimal with exactly `scale` decimals

    Raises:
        ZeroDivisionError: If denominator is zero
    """
    exact = Fraction(numerator) / Fraction(denominator)
    return fraction_to_decimal(exact, scale)


def fraction_to_decimal(value: Fraction, scale: int) -> Decimal:
    """Round an exact rational to `scale` decimals, half-even."""
    scaled = value * (10 ** scale)
    sign = -1 if scaled < 0 else 1
    quotient, remainder = divmod(abs(scaled.numerator), scaled.denominator)
    twice = 2 * remainder
    if twice > scaled.denominator or (twice == scaled.denominator and quotient % 2 == 1):
        quotient += 1
    return Decimal(sign * quotient).scaleb(-scale, context=_EXACT)


def clamp_non_negative(value: Decimal) -> Decimal:
    """Replace negative amounts with zero."""
    return value if value >= 0 else ZERO
