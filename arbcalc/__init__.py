"""
Two-leg arbitrage calculator for binary events.

Compares a prediction-market price and/or bookmaker odds on opposite
outcomes of the same event:
- engine/: odds normalization, pair evaluation, candidate enumeration,
  near-arbitrage advice
- models/: input, result and suggestion schemas
- utils/: logging and report rendering

Every evaluation is a pure function of its inputs; nothing here keeps state
between calls.
"""

from arbcalc.engine import (
    InvalidOddsError,
    to_decimal_odds,
    normalize_market,
    evaluate_pair,
    enumerate_best,
    suggest_near_arbitrage,
)
from arbcalc.models import (
    DualSidedMarketInput,
    FeeSchedule,
    OddsFormat,
    Side,
)

__version__ = "0.1.0"

__all__ = [
    "InvalidOddsError",
    "to_decimal_odds",
    "normalize_market",
    "evaluate_pair",
    "enumerate_best",
    "suggest_near_arbitrage",
    "DualSidedMarketInput",
    "FeeSchedule",
    "OddsFormat",
    "Side",
]
