"""Allocation helpers for exploring an arbitrage result away from the equal-profit split."""

from decimal import Decimal
from fractions import Fraction
from typing import Optional, Union

from arbcalc.engine.evaluator import book_book_profits, cross_market_profits, win_multipliers
from arbcalc.engine.numeric import Number, as_exact, is_exact, round_half_up
from arbcalc.models.schemas import (
    BookBookResult,
    CrossMarketResult,
    InvalidResult,
    NoArbitrageResult,
    ProfitCurvePoint,
)

# Presets move a quarter of the way from y_equal toward either end of the range
LEAN_FRACTION = Fraction(1, 4)

ArbitrageCase = Union[BookBookResult, CrossMarketResult]


def _require_arbitrage(result) -> ArbitrageCase:
    if isinstance(result, (BookBookResult, CrossMarketResult)):
        return result
    if isinstance(result, (NoArbitrageResult, InvalidResult)):
        raise ValueError(f"Allocation is only defined for arbitrage results, got {result.kind.value}")
    raise TypeError(f"Unknown result type: {type(result).__name__}")


def profit_at(
    result: ArbitrageCase,
    y: Number,
    ratio_places: int = 4,
    money_places: int = 2,
) -> ProfitCurvePoint:
    """
    Exact profits at allocation `y`, clamped into the result's range.

    Uses the same profit functions as the sampled curve, so any y (not just
    a sampled one) can be inspected. The active decimal context plays no part.
    """
    result = _require_arbitrage(result)
    value = as_exact(y)
    if not is_exact(value):
        raise ValueError(f"Allocation must be finite, got {y!r}")

    y_min, y_max = (Fraction(bound) for bound in result.y_range)
    value = min(max(value, y_min), y_max)
    budget = Fraction(result.budget)

    inputs = result.inputs_used
    if isinstance(result, BookBookResult):
        profit_a, profit_b = book_book_profits(budget, Fraction(inputs.o1), Fraction(inputs.o2), value)
    else:
        predict_mult, book_mult = win_multipliers(Fraction(inputs.price), Fraction(inputs.odds), inputs.fees)
        profit_a, profit_b = cross_market_profits(budget, predict_mult, book_mult, value)

    return ProfitCurvePoint(
        y=round_half_up(value, ratio_places),
        profit_if_a=round_half_up(profit_a, money_places),
        profit_if_b=round_half_up(profit_b, money_places),
    )


def nearest_curve_point(result: ArbitrageCase, y: Number) -> Optional[ProfitCurvePoint]:
    """Sampled curve point closest to `y` (earliest wins ties); None for an empty curve."""
    result = _require_arbitrage(result)
    if not result.curve:
        return None
    target = as_exact(y)
    return min(result.curve, key=lambda point: abs(Fraction(point.y) - target))


def allocation_presets(result: ArbitrageCase, ratio_places: int = 4) -> dict[str, Decimal]:
    """
    Named allocation fractions: the equal-profit split and a lean toward each leg.

    Returns:
        {"equal": ..., "lean_a": ..., "lean_b": ...}
    """
    result = _require_arbitrage(result)
    y_min, y_max = (Fraction(bound) for bound in result.y_range)
    y_equal = Fraction(result.y_equal)
    return {
        "equal": result.y_equal,
        "lean_a": round_half_up(y_min + (y_equal - y_min) * LEAN_FRACTION, ratio_places),
        "lean_b": round_half_up(y_equal + (y_max - y_equal) * LEAN_FRACTION, ratio_places),
    }


def headroom(result, ratio_places: int = 4) -> Decimal:
    """
    Slack below the arbitrage boundary: 1 - condition.

    Positive means arbitrage holds with that much room; zero or negative
    means it does not.
    """
    if isinstance(result, NoArbitrageResult):
        return round_half_up(1 - Fraction(result.condition_value), ratio_places)
    result = _require_arbitrage(result)

    inputs = result.inputs_used
    if isinstance(result, BookBookResult):
        condition = 1 / Fraction(inputs.o1) + 1 / Fraction(inputs.o2)
    else:
        condition = Fraction(inputs.price) + 1 / Fraction(inputs.odds)
    return round_half_up(1 - condition, ratio_places)
