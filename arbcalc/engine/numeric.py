"""
Exact number helpers shared by the engine.

Canonical prices and odds are `Fraction`s so that American (-150 -> 5/3)
and fractional (1/6 -> 7/6) quotes keep their exact value and a zero-vig
pair sums to exactly 1. `Decimal` is only produced at the output boundary.
"""

from decimal import Decimal, InvalidOperation, localcontext
from fractions import Fraction
from typing import Union

ONE = Decimal(1)

Number = Union[int, float, str, Decimal]

# Finite values are exact; NaN/Infinity stay Decimal so callers can reject them
Exact = Union[Fraction, Decimal]


def as_decimal(value: Number) -> Decimal:
    """
    Convert a user-facing number to Decimal without binary float artifacts.

    Floats go through str() so 0.4 becomes Decimal("0.4"), not
    Decimal(0.40000000000000002220446...).

    Raises:
        ValueError: if the value is not numeric text or a number
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            raise ValueError(f"Not a number: {value!r}") from None
    raise ValueError(f"Not a number: {value!r}")


def as_exact(value: Union[Number, Fraction]) -> Exact:
    """Exact rational for finite input; non-finite input comes back as a Decimal."""
    if isinstance(value, Fraction):
        return value
    number = as_decimal(value)
    if not number.is_finite():
        return number
    return Fraction(number)


def is_exact(value: Exact) -> bool:
    """True when `value` is a finite exact rational."""
    return isinstance(value, Fraction)


def to_decimal(value: Union[Fraction, int], precision: int = 50) -> Decimal:
    """Unrounded Decimal view of an exact value, to `precision` significant digits."""
    value = Fraction(value)
    with localcontext() as ctx:
        ctx.prec = precision
        return Decimal(value.numerator) / Decimal(value.denominator)


def round_half_up(value: Union[Fraction, Decimal, int], places: int) -> Decimal:
    """
    Round to `places` decimals, ties away from zero. Non-finite values pass through.

    Rounding is exact and independent of the decimal context, so arbitrarily
    large values never trip the context precision.
    """
    if isinstance(value, Decimal):
        if not value.is_finite():
            return value
    elif isinstance(value, float):
        value = as_decimal(value)
    value = Fraction(value)

    units = int(abs(value) * 10 ** places + Fraction(1, 2))
    sign = 1 if value < 0 and units else 0
    return Decimal((sign, tuple(int(d) for d in str(units)), -places))


def format_plain(value: Decimal) -> str:
    """Render without exponent or trailing zeros: 0.4000 -> "0.4", 100 -> "100"."""
    if not value.is_finite():
        return str(value)
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"
