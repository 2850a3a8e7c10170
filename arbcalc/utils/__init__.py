"""Utility modules."""

from arbcalc.utils.logging import setup_logging, EvaluationLogger
from arbcalc.utils.report import (
    format_money,
    format_pct,
    describe_result,
    order_ticket,
    describe_suggestion,
    curve_to_csv,
)

__all__ = [
    "setup_logging",
    "EvaluationLogger",
    "format_money",
    "format_pct",
    "describe_result",
    "order_ticket",
    "describe_suggestion",
    "curve_to_csv",
]
