"""Arbitrage decision and allocation engine."""

from arbcalc.engine.odds import (
    InvalidOddsError,
    exact_odds,
    to_decimal_odds,
    american_to_decimal,
    fractional_to_decimal,
    decimal_to_american,
    implied_probability,
)
from arbcalc.engine.markets import normalize_market
from arbcalc.engine.evaluator import EvaluatorConfig, PairEvaluator, evaluate_pair
from arbcalc.engine.enumerator import Candidate, CandidateEnumerator, enumerate_best
from arbcalc.engine.advisor import NearArbitrageAdvisor, apply_target, suggest_near_arbitrage
from arbcalc.engine.allocation import profit_at, nearest_curve_point, allocation_presets, headroom

__all__ = [
    "InvalidOddsError",
    "exact_odds",
    "to_decimal_odds",
    "american_to_decimal",
    "fractional_to_decimal",
    "decimal_to_american",
    "implied_probability",
    "normalize_market",
    "EvaluatorConfig",
    "PairEvaluator",
    "evaluate_pair",
    "Candidate",
    "CandidateEnumerator",
    "enumerate_best",
    "NearArbitrageAdvisor",
    "apply_target",
    "suggest_near_arbitrage",
    "profit_at",
    "nearest_curve_point",
    "allocation_presets",
    "headroom",
]
