"""
Candidate Enumerator.

Expands two dual-sided market inputs into every fully specified
opposite-side pairing, evaluates each one and keeps the best by ROI.
"""

from typing import NamedTuple, Optional, Union

import structlog

from arbcalc.engine.evaluator import PairEvaluator
from arbcalc.engine.numeric import Number
from arbcalc.models.schemas import (
    ArbitrageResult,
    BookLeg,
    DualSidedMarketInput,
    ErrorKind,
    FeeSchedule,
    InvalidResult,
    PredictLeg,
    Side,
    VenueKind,
)

logger = structlog.get_logger()


class Candidate(NamedTuple):
    """One opposite-side pairing built from dual-sided inputs."""
    label: str
    leg_a: Union[PredictLeg, BookLeg]
    leg_b: Union[PredictLeg, BookLeg]


def _leg_label(leg: Union[PredictLeg, BookLeg]) -> str:
    venue = "Predict" if leg.venue is VenueKind.PREDICT else "Book"
    return f"{venue} {leg.side.value}"


def pairing_sides(dual_a: DualSidedMarketInput, dual_b: DualSidedMarketInput) -> list[tuple[Side, Side]]:
    """
    Side combinations to try, as (side taken on A, side taken on B).

    The order is fixed so that the fallback result is stable: the predict
    market's YES leg comes first whenever one of the markets is predict.
    """
    if dual_a.venue is VenueKind.BOOK and dual_b.venue is VenueKind.PREDICT:
        return [(Side.NO, Side.YES), (Side.YES, Side.NO)]
    return [(Side.YES, Side.NO), (Side.NO, Side.YES)]


class CandidateEnumerator:
    """
    Picks the best pairing out of two dual-sided markets.

    At most two candidates exist for any pair of inputs, so evaluation is
    always bounded.
    """

    def __init__(self, evaluator: Optional[PairEvaluator] = None):
        self.evaluator = evaluator or PairEvaluator()
        self.logger = logger.bind(component="candidate_enumerator")

    def candidates(
        self,
        dual_a: DualSidedMarketInput,
        dual_b: DualSidedMarketInput,
    ) -> list[Candidate]:
        """
        Build every opposite-side pairing whose two values are present.

        Predict-vs-predict yields no candidates. Pairings missing a value are
        skipped rather than reported.
        """
        if dual_a.venue is VenueKind.PREDICT and dual_b.venue is VenueKind.PREDICT:
            return []

        found = []
        for side_a, side_b in pairing_sides(dual_a, dual_b):
            leg_a = dual_a.leg(side_a)
            leg_b = dual_b.leg(side_b)
            if leg_a is None or leg_b is None:
                continue
            found.append(Candidate(
                label=f"{_leg_label(leg_a)} vs {_leg_label(leg_b)}",
                leg_a=leg_a,
                leg_b=leg_b,
            ))
        return found

    def best(
        self,
        dual_a: DualSidedMarketInput,
        dual_b: DualSidedMarketInput,
        budget: Number,
        fees: Optional[FeeSchedule] = None,
    ) -> ArbitrageResult:
        """
        Evaluate all candidates and return the highest-ROI arbitrage.

        When no candidate is an arbitrage, the first evaluated result is
        returned unchanged; non-arbitrage outcomes are not ranked.
        """
        if dual_a.venue is VenueKind.PREDICT and dual_b.venue is VenueKind.PREDICT:
            return InvalidResult(
                error=ErrorKind.UNSUPPORTED,
                reason="Predict-vs-predict arbitrage is not supported",
            )

        candidates = self.candidates(dual_a, dual_b)
        if not candidates:
            return InvalidResult(
                error=ErrorKind.INSUFFICIENT_INPUT,
                reason="Enter at least one opposite-side value for each market",
            )

        results = []
        for candidate in candidates:
            result = self.evaluator.evaluate_legs(candidate.leg_a, candidate.leg_b, budget, fees)
            self.logger.debug(
                "candidate_evaluated",
                candidate=candidate.label,
                kind=result.kind.value,
                arbitrage=result.arbitrage,
            )
            results.append(result)

        best = None
        for result in results:
            if not result.arbitrage:
                continue
            if best is None or result.roi_equal > best.roi_equal:
                best = result

        return best if best is not None else results[0]


_default_enumerator = CandidateEnumerator()


def enumerate_best(
    dual_a: DualSidedMarketInput,
    dual_b: DualSidedMarketInput,
    budget: Number,
    fees: Optional[FeeSchedule] = None,
) -> ArbitrageResult:
    """Best pairing from two dual-sided inputs with the default evaluator."""
    return _default_enumerator.best(dual_a, dual_b, budget, fees)
