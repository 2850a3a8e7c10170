"""
Near-Arbitrage Advisor.

For every opposite-side pairing of two dual-sided markets, measures the
signed distance to the arbitrage boundary and the cheapest single-quote
change that would cross it:

    Cross-Market:  margin = P + 1/O - 1
                   O_min  = 1 / (1 - P)        (raise the book odds)
                   P_max  = max(0, 1 - 1/O)    (lower the predict price)

    Book-Book:     margin = 1/O1 + 1/O2 - 1
                   O1_min = 1 / (1 - 1/O2)
                   O2_min = 1 / (1 - 1/O1)

A negative margin means arbitrage already holds. Margins are computed on
exact rationals, so a zero-vig pair has a margin of exactly 0.
"""

from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal
from fractions import Fraction
from typing import Optional, Union

import structlog

from arbcalc.engine.enumerator import pairing_sides
from arbcalc.engine.evaluator import EvaluatorConfig
from arbcalc.engine.numeric import (
    ONE,
    Number,
    as_decimal,
    as_exact,
    format_plain,
    is_exact,
    round_half_up,
    to_decimal,
)
from arbcalc.engine.odds import InvalidOddsError, exact_odds
from arbcalc.models.schemas import (
    BookBookTargets,
    CrossMarketTargets,
    DualSidedMarketInput,
    LeverKind,
    NearArbSuggestion,
    OddsFormat,
    PairType,
    Side,
    VenueKind,
)

logger = structlog.get_logger()

INFINITY = float("inf")

Change = Union[Fraction, float]


@dataclass
class _Assessment:
    """Exact figures for one pairing, before output rounding."""
    label: str
    kind: PairType
    margin: Fraction
    change_score: Change
    lever: str
    lever_kind: LeverKind
    targets: Union[CrossMarketTargets, BookBookTargets]


def _raise_change(target: Fraction, current: Fraction, satisfied: bool) -> Change:
    """Relative increase needed to reach `target`; infinite if it would mean lowering."""
    if satisfied:
        return Fraction(0)
    if target >= current:
        return target / current - 1
    return INFINITY


def _lower_change(target: Fraction, current: Fraction, satisfied: bool) -> Change:
    """Relative decrease needed to reach `target`; infinite if it would mean raising."""
    if satisfied:
        return Fraction(0)
    if 0 < target <= current:
        return 1 - target / current
    return INFINITY


def _read_price(dual: DualSidedMarketInput, side: Side) -> Optional[Fraction]:
    raw = dual.value_for(side)
    if raw is None:
        return None
    try:
        price = as_exact(raw)
    except ValueError:
        return None
    if not is_exact(price) or not 0 < price < 1:
        return None
    return price


def _read_odds(dual: DualSidedMarketInput, side: Side) -> Optional[Fraction]:
    raw = dual.value_for(side)
    if raw is None:
        return None
    try:
        odds = exact_odds(dual.odds_format, raw)
    except InvalidOddsError:
        return None
    if not is_exact(odds) or odds <= 1:
        return None
    return odds


class NearArbitrageAdvisor:
    """
    Ranks pairings by how close they are to arbitrage.

    Works on the raw dual-sided inputs and does not care whether arbitrage
    currently holds. Pairings with missing or out-of-range values are
    skipped.
    """

    def __init__(self, config: Optional[EvaluatorConfig] = None):
        self.config = config or EvaluatorConfig()
        self.logger = logger.bind(component="near_arb_advisor")

    def suggest(
        self,
        dual_a: DualSidedMarketInput,
        dual_b: DualSidedMarketInput,
    ) -> list[NearArbSuggestion]:
        """
        Assess every valid pairing and rank them best-first.

        Ordering: pairings already in arbitrage first, then ascending margin,
        then ascending change score. All three keys use the exact values.
        """
        venues = (dual_a.venue, dual_b.venue)
        if venues == (VenueKind.PREDICT, VenueKind.PREDICT):
            return []

        assessments = []
        for side_a, side_b in pairing_sides(dual_a, dual_b):
            if venues == (VenueKind.BOOK, VenueKind.BOOK):
                assessment = self._book_book(dual_a, side_a, dual_b, side_b)
            elif dual_a.venue is VenueKind.PREDICT:
                assessment = self._cross_market(dual_a, side_a, dual_b, side_b)
            else:
                assessment = self._cross_market(dual_b, side_b, dual_a, side_a)
            if assessment is not None:
                assessments.append(assessment)

        assessments.sort(key=lambda s: (s.margin >= 0, s.margin, s.change_score))
        suggestions = [self._to_model(s) for s in assessments]

        self.logger.debug(
            "suggestions_ranked",
            count=len(suggestions),
            best=suggestions[0].label if suggestions else None,
        )
        return suggestions

    # =========================================================================
    # Pairings
    # =========================================================================

    def _cross_market(
        self,
        predict: DualSidedMarketInput,
        predict_side: Side,
        book: DualSidedMarketInput,
        book_side: Side,
    ) -> Optional[_Assessment]:
        price = _read_price(predict, predict_side)
        odds = _read_odds(book, book_side)
        if price is None or odds is None:
            return None

        margin = price + 1 / odds - 1
        odds_min = 1 / (1 - price)
        price_max = max(Fraction(0), 1 - 1 / odds)
        satisfied = margin < 0

        change_odds = _raise_change(odds_min, odds, satisfied)
        change_price = _lower_change(price_max, price, satisfied)
        if change_odds <= change_price:
            lever_kind = LeverKind.RAISE_BOOK_ODDS
            lever = f"Raise Book {book_side.value} odds to >= {format_plain(self._ratio(odds_min))}"
        else:
            lever_kind = LeverKind.LOWER_PREDICT_PRICE
            lever = f"Lower Predict {predict_side.value} price to <= {format_plain(self._ratio(price_max))}"

        return _Assessment(
            label=f"Predict {predict_side.value} vs Book {book_side.value}",
            kind=PairType.CROSS_MARKET,
            margin=margin,
            change_score=min(change_odds, change_price),
            lever=lever,
            lever_kind=lever_kind,
            targets=CrossMarketTargets(
                price=self._view(price),
                odds=self._view(odds),
                price_max=self._ratio(price_max),
                odds_min=self._ratio(odds_min),
                predict_side=predict_side,
                book_side=book_side,
            ),
        )

    def _book_book(
        self,
        dual_a: DualSidedMarketInput,
        side_a: Side,
        dual_b: DualSidedMarketInput,
        side_b: Side,
    ) -> Optional[_Assessment]:
        o1 = _read_odds(dual_a, side_a)
        o2 = _read_odds(dual_b, side_b)
        if o1 is None or o2 is None:
            return None

        margin = 1 / o1 + 1 / o2 - 1
        o1_min = 1 / (1 - 1 / o2)
        o2_min = 1 / (1 - 1 / o1)
        satisfied = margin < 0

        change_1 = _raise_change(o1_min, o1, satisfied)
        change_2 = _raise_change(o2_min, o2, satisfied)
        if change_1 <= change_2:
            lever_kind = LeverKind.RAISE_ODDS_A
            lever = f"Raise Book {side_a.value} odds to >= {format_plain(self._ratio(o1_min))}"
        else:
            lever_kind = LeverKind.RAISE_ODDS_B
            lever = f"Raise Book {side_b.value} odds to >= {format_plain(self._ratio(o2_min))}"

        return _Assessment(
            label=f"Book {side_a.value} vs Book {side_b.value}",
            kind=PairType.BOOK_BOOK,
            margin=margin,
            change_score=min(change_1, change_2),
            lever=lever,
            lever_kind=lever_kind,
            targets=BookBookTargets(
                o1=self._view(o1),
                o2=self._view(o2),
                o1_min=self._ratio(o1_min),
                o2_min=self._ratio(o2_min),
                side_a=side_a,
                side_b=side_b,
            ),
        )

    def _to_model(self, assessment: _Assessment) -> NearArbSuggestion:
        score = assessment.change_score
        return NearArbSuggestion(
            label=assessment.label,
            kind=assessment.kind,
            margin=self._ratio(assessment.margin),
            targets=assessment.targets,
            change_score=Decimal("Infinity") if score == INFINITY else self._ratio(score),
            lever=assessment.lever,
            lever_kind=assessment.lever_kind,
            arbitrage=assessment.margin < 0,
        )

    def _view(self, value: Fraction) -> Decimal:
        return to_decimal(value, self.config.precision)

    def _ratio(self, value: Fraction) -> Decimal:
        return round_half_up(value, self.config.ratio_places)


# =============================================================================
# Applying a Target
# =============================================================================

def _with_side(dual: DualSidedMarketInput, side: Side, value: Decimal) -> DualSidedMarketInput:
    """Copy of `dual` with `side` set to `value`, converting book odds to decimal format."""
    update: dict = {"yes" if side is Side.YES else "no": float(value)}

    if dual.venue is VenueKind.BOOK and dual.odds_format is not OddsFormat.DECIMAL:
        other = side.opposite
        converted = _read_odds(dual, other)
        # An unreadable opposite quote is left as entered
        if converted is not None:
            update["yes" if other is Side.YES else "no"] = float(converted)
        update["odds_format"] = OddsFormat.DECIMAL

    return dual.model_copy(update=update)


def apply_target(
    dual_a: DualSidedMarketInput,
    dual_b: DualSidedMarketInput,
    suggestion: NearArbSuggestion,
    lever_kind: Optional[LeverKind] = None,
    safety_margin: Number = Decimal("0.001"),
    places: int = 4,
) -> tuple[DualSidedMarketInput, DualSidedMarketInput]:
    """
    Write a suggestion's boundary target back into the inputs.

    Odds targets are pushed up by `safety_margin` and rounded up; price
    targets are pushed down and rounded down, so the applied value lands
    strictly on the arbitrage side of the boundary.

    Args:
        dual_a: First market as entered
        dual_b: Second market as entered
        suggestion: Output of `suggest_near_arbitrage` for the same inputs
        lever_kind: Lever to apply (default: the suggestion's own lever)
        safety_margin: Fractional overshoot past the boundary
        places: Decimal places kept in the written value

    Returns:
        The updated (dual_a, dual_b)

    Raises:
        ValueError: lever does not belong to the suggestion's pairing type
    """
    lever_kind = lever_kind or suggestion.lever_kind
    margin = as_decimal(safety_margin)
    step = Decimal(1).scaleb(-places)
    targets = suggestion.targets

    if isinstance(targets, CrossMarketTargets):
        if lever_kind is LeverKind.RAISE_BOOK_ODDS:
            value = (targets.odds_min * (ONE + margin)).quantize(step, rounding=ROUND_CEILING)
            venue, side = VenueKind.BOOK, targets.book_side
        elif lever_kind is LeverKind.LOWER_PREDICT_PRICE:
            value = (targets.price_max * (ONE - margin)).quantize(step, rounding=ROUND_FLOOR)
            venue, side = VenueKind.PREDICT, targets.predict_side
        else:
            raise ValueError(f"Lever {lever_kind.value} does not apply to a Cross-Market pairing")

        if dual_a.venue is venue:
            return _with_side(dual_a, side, value), dual_b
        return dual_a, _with_side(dual_b, side, value)

    if lever_kind is LeverKind.RAISE_ODDS_A:
        value = (targets.o1_min * (ONE + margin)).quantize(step, rounding=ROUND_CEILING)
        return _with_side(dual_a, targets.side_a, value), dual_b
    if lever_kind is LeverKind.RAISE_ODDS_B:
        value = (targets.o2_min * (ONE + margin)).quantize(step, rounding=ROUND_CEILING)
        return dual_a, _with_side(dual_b, targets.side_b, value)
    raise ValueError(f"Lever {lever_kind.value} does not apply to a Book-Book pairing")


_default_advisor = NearArbitrageAdvisor()


def suggest_near_arbitrage(
    dual_a: DualSidedMarketInput,
    dual_b: DualSidedMarketInput,
) -> list[NearArbSuggestion]:
    """Ranked near-arbitrage suggestions with the default numeric policy."""
    return _default_advisor.suggest(dual_a, dual_b)
