"""
Pairwise Arbitrage Evaluator.

Classifies two canonical one-sided markets and, when the strict arbitrage
inequality holds, computes the equal-profit allocation, stakes, ROI and a
sampled profit curve.

Two cases are supported:
    Book-Book:     1/O1 + 1/O2 < 1
    Cross-Market:  P + 1/O < 1   (fee-free condition, fee-adjusted profits)

The allocation fraction y is the share of the budget placed on leg A. For
Cross-Market pairs leg A is always the predict leg.

All arithmetic runs on exact rationals: a rounding error at the boundary
would flip the classification (-150 / +150 sums to exactly 1). Values are
rounded to Decimal only when the result models are built.
"""

from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Callable, Optional, Union

import structlog

from arbcalc.engine.markets import normalize_market
from arbcalc.engine.numeric import (
    Exact,
    Number,
    as_decimal,
    as_exact,
    format_plain,
    is_exact,
    round_half_up,
    to_decimal,
)
from arbcalc.engine.odds import InvalidOddsError
from arbcalc.models.schemas import (
    ArbitrageResult,
    BookBookInputs,
    BookBookResult,
    BookLeg,
    CrossMarketInputs,
    CrossMarketResult,
    ErrorKind,
    FeeSchedule,
    InvalidResult,
    NoArbitrageResult,
    OneSidedMarket,
    PairType,
    PredictLeg,
    ProfitCurvePoint,
    StakePair,
    VenueKind,
)

logger = structlog.get_logger()

ProfitFn = Callable[[Fraction], tuple[Fraction, Fraction]]


@dataclass(frozen=True)
class EvaluatorConfig:
    """Numeric policy for pair evaluation."""

    curve_intervals: int = 60  # 61 sampled points
    ratio_places: int = 4
    money_places: int = 2
    precision: int = 50  # Significant digits of reported inputs and of the budget

    @classmethod
    def from_settings(cls, engine_settings) -> "EvaluatorConfig":
        """Build from an `EngineSettings`-shaped object."""
        return cls(
            curve_intervals=engine_settings.curve_intervals,
            ratio_places=engine_settings.ratio_places,
            money_places=engine_settings.money_places,
            precision=engine_settings.decimal_precision,
        )


# =============================================================================
# Profit Functions
# =============================================================================

def book_book_profits(budget: Fraction, o1: Fraction, o2: Fraction, y: Fraction) -> tuple[Fraction, Fraction]:
    """Profit if leg A wins, profit if leg B wins, at allocation y."""
    return budget * y * o1 - budget, budget * (1 - y) * o2 - budget


def win_multipliers(price: Fraction, odds: Fraction, fees: FeeSchedule) -> tuple[Fraction, Fraction]:
    """
    Fee-adjusted profit per unit staked on a winning leg.

    Returns:
        (predict_win_mult, book_win_mult)
    """
    predict_mult = (1 - as_exact(fees.predict_win_fee)) * (1 / price - 1)
    book_mult = (1 - as_exact(fees.book_win_fee)) * (odds - 1)
    return predict_mult, book_mult


def cross_market_profits(
    budget: Fraction,
    predict_mult: Fraction,
    book_mult: Fraction,
    y: Fraction,
) -> tuple[Fraction, Fraction]:
    """Profit if the predict leg wins, profit if the book leg wins, at allocation y."""
    return (
        budget * y * predict_mult - budget * (1 - y),
        budget * (1 - y) * book_mult - budget * y,
    )


def sample_curve(
    y_min: Fraction,
    y_max: Fraction,
    profits: ProfitFn,
    intervals: int = 60,
    ratio_places: int = 4,
    money_places: int = 2,
) -> list[ProfitCurvePoint]:
    """
    Sample `intervals + 1` evenly spaced points across [y_min, y_max].

    Returns an empty curve when the range is empty.
    """
    if y_max <= y_min:
        return []

    width = y_max - y_min
    points = []
    for i in range(intervals + 1):
        y = y_min + width * i / intervals
        profit_a, profit_b = profits(y)
        points.append(ProfitCurvePoint(
            y=round_half_up(y, ratio_places),
            profit_if_a=round_half_up(profit_a, money_places),
            profit_if_b=round_half_up(profit_b, money_places),
        ))
    return points


def _valid_odds(value: Exact) -> bool:
    return is_exact(value) and value > 1


def _valid_price(value: Exact) -> bool:
    return is_exact(value) and 0 < value < 1


# =============================================================================
# Evaluator
# =============================================================================

class PairEvaluator:
    """
    Evaluates one pairing of canonical one-sided markets.

    Holds only immutable configuration, so a single instance can be shared
    by any number of callers.
    """

    def __init__(self, config: Optional[EvaluatorConfig] = None):
        self.config = config or EvaluatorConfig()
        self.logger = logger.bind(component="pair_evaluator")

    def evaluate(
        self,
        market_a: OneSidedMarket,
        market_b: OneSidedMarket,
        budget: Number,
        fees: Optional[FeeSchedule] = None,
    ) -> ArbitrageResult:
        """
        Classify a pair and compute the allocation if arbitrage holds.

        Args:
            market_a: Leg A (for Book-Book, the O1 leg)
            market_b: Leg B
            budget: Total amount to split across both legs
            fees: Win fees per venue (default: none)

        Returns:
            InvalidResult, NoArbitrageResult, BookBookResult or CrossMarketResult
        """
        fees = fees or FeeSchedule()
        total = self._parse_budget(budget)
        if total is None:
            return self._invalid_budget(budget)

        venues = {market_a.venue, market_b.venue}
        if venues == {VenueKind.PREDICT}:
            return InvalidResult(
                error=ErrorKind.UNSUPPORTED,
                reason="Predict-vs-predict arbitrage is not supported",
            )
        if venues == {VenueKind.BOOK}:
            result = self._book_book(market_a, market_b, total)
        else:
            result = self._cross_market(market_a, market_b, total, fees)

        self.logger.debug(
            "pair_evaluated",
            pair=f"{market_a.label} vs {market_b.label}",
            kind=result.kind.value,
            arbitrage=result.arbitrage,
        )
        return result

    def evaluate_legs(
        self,
        leg_a: Union[PredictLeg, BookLeg],
        leg_b: Union[PredictLeg, BookLeg],
        budget: Number,
        fees: Optional[FeeSchedule] = None,
    ) -> ArbitrageResult:
        """Normalize two raw legs, then evaluate them. Bad quotes become `invalid_odds`."""
        if self._parse_budget(budget) is None:
            return self._invalid_budget(budget)

        try:
            market_a = normalize_market(leg_a)
            market_b = normalize_market(leg_b)
        except InvalidOddsError as e:
            return InvalidResult(error=ErrorKind.INVALID_ODDS, reason=str(e))

        return self.evaluate(market_a, market_b, budget, fees)

    # =========================================================================
    # Cases
    # =========================================================================

    def _book_book(self, a: OneSidedMarket, b: OneSidedMarket, budget: Decimal) -> ArbitrageResult:
        if a.side is b.side:
            return InvalidResult(
                error=ErrorKind.INVALID_INPUT,
                reason="Book-Book needs opposite sides (YES vs NO)",
            )
        for market in (a, b):
            if not _valid_odds(market.value):
                return InvalidResult(
                    error=ErrorKind.INVALID_INPUT,
                    reason=f"{market.label} odds must be greater than 1, got {self._show(market.value)}",
                )

        o1, o2 = a.value, b.value
        inv1, inv2 = 1 / o1, 1 / o2
        condition = inv1 + inv2
        condition_text = self._condition_text("1/O1 + 1/O2", inv1, inv2, condition)
        if condition >= 1:
            return NoArbitrageResult(
                pair_type=PairType.BOOK_BOOK,
                condition_text=condition_text,
                condition_value=self._ratio(condition),
            )

        total = Fraction(budget)
        y_min = inv1
        y_max = 1 - inv2
        y_equal = o2 / (o1 + o2)
        roi_equal = o1 * o2 / (o1 + o2) - 1

        stake_a = y_equal * total
        stake_b = (1 - y_equal) * total
        profit_equal = stake_a * o1 - total  # == stake_b * o2 - total
        returned = total + profit_equal

        curve = self._curve(y_min, y_max, lambda y: book_book_profits(total, o1, o2, y))

        return BookBookResult(
            condition_text=condition_text,
            budget=budget,
            y_range=(self._ratio(y_min), self._ratio(y_max)),
            y_equal=self._ratio(y_equal),
            stakes=StakePair(
                a=self._money(stake_a),
                b=self._money(stake_b),
                label_a=a.label,
                label_b=b.label,
            ),
            profit_equal=self._money(profit_equal),
            roi_equal=self._ratio(roi_equal),
            return_if_a=self._money(returned),
            return_if_b=self._money(returned),
            curve=curve,
            chosen_sides=(a.side, b.side),
            inputs_used=BookBookInputs(
                o1=self._view(o1),
                o2=self._view(o2),
                side_a=a.side,
                side_b=b.side,
            ),
        )

    def _cross_market(
        self,
        a: OneSidedMarket,
        b: OneSidedMarket,
        budget: Decimal,
        fees: FeeSchedule,
    ) -> ArbitrageResult:
        pred, book = (a, b) if a.venue is VenueKind.PREDICT else (b, a)

        if pred.side is book.side:
            return InvalidResult(
                error=ErrorKind.INVALID_INPUT,
                reason="Cross-Market needs opposite sides (Predict and Book on different outcomes)",
            )
        if not _valid_price(pred.value):
            return InvalidResult(
                error=ErrorKind.INVALID_INPUT,
                reason=f"{pred.label} price must be between 0 and 1, got {self._show(pred.value)}",
            )
        if not _valid_odds(book.value):
            return InvalidResult(
                error=ErrorKind.INVALID_INPUT,
                reason=f"{book.label} odds must be greater than 1, got {self._show(book.value)}",
            )

        price, odds = pred.value, book.value
        inv_odds = 1 / odds

        # Conventional fee-free condition; fees only shape the profits below
        condition = price + inv_odds
        condition_text = self._condition_text("P + 1/O", price, inv_odds, condition)
        if condition >= 1:
            return NoArbitrageResult(
                pair_type=PairType.CROSS_MARKET,
                condition_text=condition_text,
                condition_value=self._ratio(condition),
            )

        total = Fraction(budget)
        y_min = price
        y_max = 1 - inv_odds
        y_equal = price * odds / (price * odds + 1)

        predict_mult, book_mult = win_multipliers(price, odds, fees)

        stake_a = y_equal * total  # predict spend
        stake_b = (1 - y_equal) * total  # book stake

        profit_if_predict = stake_a * predict_mult - stake_b
        profit_if_book = stake_b * book_mult - stake_a

        # Reported at the fee-free split; identical on both outcomes only without fees
        profit_equal = profit_if_predict
        roi_equal = profit_equal / total

        # Root of y*pm - (1-y) == (1-y)*bm - y
        y_equal_fee_adjusted = (book_mult + 1) / (predict_mult + book_mult + 2)

        curve = self._curve(
            y_min,
            y_max,
            lambda y: cross_market_profits(total, predict_mult, book_mult, y),
        )

        return CrossMarketResult(
            condition_text=condition_text,
            budget=budget,
            y_range=(self._ratio(y_min), self._ratio(y_max)),
            y_equal=self._ratio(y_equal),
            stakes=StakePair(
                a=self._money(stake_a),
                b=self._money(stake_b),
                label_a=pred.label,
                label_b=book.label,
            ),
            profit_equal=self._money(profit_equal),
            roi_equal=self._ratio(roi_equal),
            return_if_a=self._money(total + profit_if_predict),
            return_if_b=self._money(total + profit_if_book),
            curve=curve,
            chosen_sides=(pred.side, book.side),
            inputs_used=CrossMarketInputs(
                price=self._view(price),
                odds=self._view(odds),
                predict_side=pred.side,
                book_side=book.side,
                fees=fees,
            ),
            profit_if_predict_wins=self._money(profit_if_predict),
            profit_if_book_wins=self._money(profit_if_book),
            y_equal_fee_adjusted=self._ratio(y_equal_fee_adjusted),
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _parse_budget(self, budget: Number) -> Optional[Decimal]:
        """Positive finite budget whose money figures fit the configured precision."""
        try:
            value = as_decimal(budget)
        except ValueError:
            return None
        if not value.is_finite() or value <= 0:
            return None
        if value.adjusted() + 1 + self.config.money_places > self.config.precision:
            return None
        return value

    def _invalid_budget(self, budget: Number) -> InvalidResult:
        return InvalidResult(
            error=ErrorKind.INVALID_INPUT,
            reason=(
                f"Invalid budget: {budget!r} (must be positive, finite and "
                f"at most {self.config.precision - self.config.money_places} integer digits)"
            ),
        )

    def _curve(self, y_min: Fraction, y_max: Fraction, profits: ProfitFn) -> list[ProfitCurvePoint]:
        return sample_curve(
            y_min,
            y_max,
            profits,
            intervals=self.config.curve_intervals,
            ratio_places=self.config.ratio_places,
            money_places=self.config.money_places,
        )

    def _condition_text(self, expression: str, left: Fraction, right: Fraction, total: Fraction) -> str:
        parts = (format_plain(self._ratio(v)) for v in (left, right, total))
        return "{} = {} + {} = {}".format(expression, *parts)

    def _show(self, value: Exact) -> str:
        return format_plain(self._ratio(value))

    def _view(self, value: Fraction) -> Decimal:
        return to_decimal(value, self.config.precision)

    def _ratio(self, value: Exact) -> Decimal:
        return round_half_up(value, self.config.ratio_places)

    def _money(self, value: Fraction) -> Decimal:
        return round_half_up(value, self.config.money_places)


_default_evaluator = PairEvaluator()


def evaluate_pair(
    market_a: OneSidedMarket,
    market_b: OneSidedMarket,
    budget: Number,
    fees: Optional[FeeSchedule] = None,
) -> ArbitrageResult:
    """Evaluate one pairing with the default numeric policy."""
    return _default_evaluator.evaluate(market_a, market_b, budget, fees)
