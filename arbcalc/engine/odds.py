"""
Odds conversion utilities.

All bookmaker quotes are normalized to decimal odds (stake-inclusive payout
multiplier, > 1) before any arbitrage math runs. The engine works on the
exact rational value (`exact_odds`); the `*_to_decimal` functions are the
Decimal view of the same numbers for display.
"""

from decimal import Decimal
from fractions import Fraction
from typing import Union

from arbcalc.engine.numeric import Exact, Number, as_exact, is_exact, to_decimal
from arbcalc.models.schemas import OddsFormat


class InvalidOddsError(ValueError):
    """An odds quote could not be read in its declared format."""


def _parse(raw: Number, what: str) -> Exact:
    try:
        return as_exact(raw)
    except ValueError:
        raise InvalidOddsError(f"Invalid {what} odds: {raw!r}") from None


def american_to_exact(american: Number) -> Fraction:
    """American odds as an exact decimal multiplier. -150 -> 5/3."""
    value = _parse(american, "American")
    if not is_exact(value) or value == 0:
        raise InvalidOddsError(f"Invalid American odds: {american!r}")
    if value > 0:
        return 1 + value / 100
    return 1 + 100 / abs(value)


def fractional_to_exact(text: Union[str, Number]) -> Fraction:
    """Fractional odds text as an exact decimal multiplier. "1/6" -> 7/6."""
    parts = str(text).split("/")
    if len(parts) != 2:
        raise InvalidOddsError(f"Invalid fractional odds: {text!r}")
    numerator = _parse(parts[0], "fractional")
    denominator = _parse(parts[1], "fractional")
    if not (is_exact(numerator) and is_exact(denominator)) or denominator == 0:
        raise InvalidOddsError(f"Invalid fractional odds: {text!r}")
    return 1 + numerator / denominator


def exact_odds(fmt: Union[OddsFormat, str], raw: Number) -> Exact:
    """
    Convert a quote in any supported format to exact decimal odds.

    Decimal quotes pass through unchanged (NaN/Infinity as Decimal); the > 1
    check belongs to the consumer so several bad inputs can be reported at
    once.

    Raises:
        InvalidOddsError: malformed quote or unknown format
    """
    try:
        fmt = OddsFormat(fmt)
    except ValueError:
        raise InvalidOddsError(f"Unsupported odds format: {fmt!r}") from None

    if fmt is OddsFormat.AMERICAN:
        return american_to_exact(raw)
    if fmt is OddsFormat.FRACTIONAL:
        return fractional_to_exact(raw)
    return _parse(raw, "decimal")


def _view(value: Exact) -> Decimal:
    return to_decimal(value) if is_exact(value) else value


def american_to_decimal(american: Number) -> Decimal:
    """Convert American odds to Decimal. +150 -> 2.5, -200 -> 1.5."""
    return _view(american_to_exact(american))


def fractional_to_decimal(text: Union[str, Number]) -> Decimal:
    """Convert fractional odds text to Decimal. "3/2" -> 2.5, "5/2" -> 3.5."""
    return _view(fractional_to_exact(text))


def to_decimal_odds(fmt: Union[OddsFormat, str], raw: Number) -> Decimal:
    """
    Convert a quote in any supported format to canonical decimal odds.

    Args:
        fmt: Odds format of `raw`
        raw: The quote as entered (number or text)

    Returns:
        Decimal odds (50 significant digits for repeating values)

    Raises:
        InvalidOddsError: malformed quote or unknown format
    """
    return _view(exact_odds(fmt, raw))


def decimal_to_american(odds: Number) -> Decimal:
    """Convert Decimal odds back to American. 2.5 -> +150, 1.5 -> -200."""
    value = _parse(odds, "decimal")
    if not is_exact(value) or value <= 1:
        raise InvalidOddsError(f"Decimal odds must be > 1, got {odds!r}")
    if value >= 2:
        return to_decimal((value - 1) * 100)
    return to_decimal(-100 / (value - 1))


def implied_probability(odds: Number) -> Decimal:
    """Convert Decimal odds to implied probability. 2.5 -> 0.4."""
    value = _parse(odds, "decimal")
    if not is_exact(value) or value <= 0:
        raise InvalidOddsError(f"Decimal odds must be positive, got {odds!r}")
    return to_decimal(1 / value)
