"""
Arbitrage Calculator - Command Line Entry Point.

Evaluates two markets on the same binary event and prints the best
arbitrage pairing, or the closest near-arbitrage suggestion when none holds.

Usage:
    arbcalc --a-venue predict --a-yes 0.4 --b-venue book --b-no 2.0
    arbcalc --a-venue book --a-yes +150 --a-format american \\
            --b-venue book --b-no 5/2 --b-format fractional --budget 500

Environment Variables:
    ARBCALC_LOG_LEVEL             - DEBUG|INFO|WARNING|ERROR (default: INFO)
    ARBCALC_LOG_DIR               - Write evaluations as JSONL here
    ARBCALC_DEFAULT_BUDGET        - Budget when --budget is omitted
    ARBCALC_FEES__BOOK_WIN_FEE    - Default book win fee (fraction)
    ARBCALC_FEES__PREDICT_WIN_FEE - Default predict win fee (fraction)
"""

import argparse
import json
import sys
from typing import Optional

import structlog
from pydantic import ValidationError

from arbcalc.engine.advisor import NearArbitrageAdvisor, apply_target
from arbcalc.engine.enumerator import CandidateEnumerator
from arbcalc.engine.evaluator import EvaluatorConfig, PairEvaluator
from arbcalc.models.schemas import (
    DualSidedMarketInput,
    FeeSchedule,
    InvalidResult,
    OddsFormat,
    VenueKind,
)
from arbcalc.utils.logging import EvaluationLogger, setup_logging
from arbcalc.utils.report import curve_to_csv, describe_result, describe_suggestion, order_ticket
from config.settings import settings

logger = structlog.get_logger()

VENUES = [v.value for v in VenueKind]
FORMATS = [f.value for f in OddsFormat]


def build_parser() -> argparse.ArgumentParser:
    """CLI arguments; defaults come from settings."""
    parser = argparse.ArgumentParser(
        prog="arbcalc",
        description="Two-leg arbitrage calculator for prediction markets and bookmakers",
    )

    for leg in ("a", "b"):
        group = parser.add_argument_group(f"market {leg.upper()}")
        group.add_argument(f"--{leg}-venue", choices=VENUES, required=True, help="predict or book")
        group.add_argument(f"--{leg}-yes", default=None, help="YES price (predict) or odds (book)")
        group.add_argument(f"--{leg}-no", default=None, help="NO price (predict) or odds (book)")
        group.add_argument(
            f"--{leg}-format",
            choices=FORMATS,
            default=settings.default_odds_format.value,
            help="Odds format for a book market",
        )

    parser.add_argument("--budget", type=float, default=settings.default_budget)
    parser.add_argument("--book-fee", type=float, default=settings.fees.book_win_fee)
    parser.add_argument("--predict-fee", type=float, default=settings.fees.predict_win_fee)
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--csv", action="store_true", help="Also print the profit curve as CSV")
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Apply the top suggestion's lever and re-evaluate when there is no arbitrage",
    )
    parser.add_argument("--log-dir", default=settings.log_dir, help="Append evaluations to JSONL files here")
    return parser


def _dual(venue: str, yes: Optional[str], no: Optional[str], odds_format: str) -> DualSidedMarketInput:
    return DualSidedMarketInput(
        venue=VenueKind(venue),
        yes=yes,
        no=no,
        odds_format=OddsFormat(odds_format),
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(settings.log_level)
    log = logger.bind(component="cli")

    try:
        dual_a = _dual(args.a_venue, args.a_yes, args.a_no, args.a_format)
        dual_b = _dual(args.b_venue, args.b_yes, args.b_no, args.b_format)
        fees = FeeSchedule(book_win_fee=args.book_fee, predict_win_fee=args.predict_fee)
    except ValidationError as e:
        print(f"Invalid arguments:\n{e}", file=sys.stderr)
        return 2

    config = EvaluatorConfig.from_settings(settings.engine)
    enumerator = CandidateEnumerator(PairEvaluator(config))
    advisor = NearArbitrageAdvisor(config)

    result = enumerator.best(dual_a, dual_b, args.budget, fees)
    suggestions = [] if result.arbitrage else advisor.suggest(dual_a, dual_b)

    adjusted = None
    if args.apply and suggestions and not suggestions[0].arbitrage:
        top = suggestions[0]
        applied_a, applied_b = apply_target(
            dual_a, dual_b, top, safety_margin=str(settings.advisor.safety_margin)
        )
        adjusted = enumerator.best(applied_a, applied_b, args.budget, fees)
        log.info("target_applied", lever=top.lever, arbitrage=adjusted.arbitrage)

    if args.log_dir:
        evaluation_log = EvaluationLogger(args.log_dir)
        try:
            evaluation_log.log_result(result, label="cli")
            if suggestions:
                evaluation_log.log_suggestion(suggestions[0])
            if adjusted is not None:
                evaluation_log.log_result(adjusted, label="applied")
        finally:
            evaluation_log.close()

    if args.json:
        payload = {
            "result": result.model_dump(mode="json"),
            "suggestions": [s.model_dump(mode="json") for s in suggestions],
        }
        if adjusted is not None:
            payload["applied"] = adjusted.model_dump(mode="json")
        print(json.dumps(payload, indent=2))
    else:
        print(describe_result(result))
        if result.arbitrage:
            print()
            print(order_ticket(result))
        elif suggestions:
            print()
            print(describe_suggestion(suggestions[0]))
        if adjusted is not None:
            print()
            print(f"After applying: {describe_result(adjusted)}")
            if adjusted.arbitrage:
                print(order_ticket(adjusted))

    if args.csv and result.arbitrage:
        print()
        print(curve_to_csv(result), end="")

    log.info(
        "evaluation_complete",
        kind=result.kind.value,
        arbitrage=result.arbitrage,
        suggestions=len(suggestions),
    )
    return 1 if isinstance(result, InvalidResult) else 0


if __name__ == "__main__":
    sys.exit(main())
