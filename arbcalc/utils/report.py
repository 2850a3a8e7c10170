"""
Text and CSV renderings of engine output.

These are what a front end shows or copies to the clipboard; the engine
itself never formats anything beyond its condition text.
"""

import csv
import io

from arbcalc.engine.numeric import Number, as_decimal, format_plain, round_half_up
from arbcalc.models.schemas import (
    BookBookResult,
    BookBookTargets,
    CrossMarketResult,
    CrossMarketTargets,
    InvalidResult,
    NearArbSuggestion,
    NoArbitrageResult,
)

PAIR_NAMES = {
    BookBookResult: "Book-Book",
    CrossMarketResult: "Cross-Market",
}


def format_money(value: Number) -> str:
    """1234.5 -> "1,234.50"."""
    return f"{round_half_up(as_decimal(value), 2):,.2f}"


def format_pct(ratio: Number) -> str:
    """0.0155 -> "1.55%"."""
    return f"{round_half_up(as_decimal(ratio) * 100, 2):.2f}%"


def describe_result(result) -> str:
    """One-line status banner for any result variant."""
    if isinstance(result, (BookBookResult, CrossMarketResult)):
        return (
            f"Arbitrage ({PAIR_NAMES[type(result)]}) | "
            f"fixed profit ${format_money(result.profit_equal)} | "
            f"ROI {format_pct(result.roi_equal)}"
        )
    if isinstance(result, NoArbitrageResult):
        return f"No arbitrage: {result.condition_text} (needs < 1)"
    if isinstance(result, InvalidResult):
        return f"Invalid ({result.error.value}): {result.reason}"
    raise TypeError(f"Unknown result type: {type(result).__name__}")


def order_ticket(result) -> str:
    """
    The order list a user copies to place both legs.

    Raises:
        ValueError: the result is not an arbitrage
    """
    if not isinstance(result, (BookBookResult, CrossMarketResult)):
        raise ValueError("Only arbitrage results have an order ticket")

    stakes = result.stakes
    return "\n".join([
        f"Pair: {stakes.label_a} vs {stakes.label_b}",
        f"Budget: {format_plain(result.budget)}",
        f"Stakes: {stakes.a} / {stakes.b}",
        f"ROI: {format_pct(result.roi_equal)}",
        f"Profit: ${format_money(result.profit_equal)}",
        f"Condition: {result.condition_text}",
    ])


def describe_suggestion(suggestion: NearArbSuggestion) -> str:
    """Multi-line advice for the closest pairing."""
    if suggestion.arbitrage:
        return f"{suggestion.label}: arbitrage already holds (margin {format_plain(suggestion.margin)})"

    targets = suggestion.targets
    if isinstance(targets, CrossMarketTargets):
        lines = [
            f"Closest pairing: {suggestion.label}",
            f"Threshold: P + 1/O < 1, current gap {format_plain(suggestion.margin)}",
            f"Target: {targets.book_side.value} odds >= {format_plain(targets.odds_min)}",
            f"Or: {targets.predict_side.value} price <= {format_plain(targets.price_max)}",
        ]
    elif isinstance(targets, BookBookTargets):
        lines = [
            f"Closest pairing: {suggestion.label}",
            f"Threshold: 1/O1 + 1/O2 < 1, current gap {format_plain(suggestion.margin)}",
            f"Target: Book {targets.side_a.value} odds >= {format_plain(targets.o1_min)}",
            f"Or: Book {targets.side_b.value} odds >= {format_plain(targets.o2_min)}",
        ]
    else:
        raise TypeError(f"Unknown targets type: {type(targets).__name__}")

    lines.append(f"Suggested first: {suggestion.lever}")
    return "\n".join(lines)


def curve_to_csv(result) -> str:
    """Export the sampled profit curve as CSV text."""
    if not isinstance(result, (BookBookResult, CrossMarketResult)):
        raise ValueError("Only arbitrage results have a profit curve")

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["y", "profit_if_a", "profit_if_b"])
    for point in result.curve:
        writer.writerow([str(point.y), str(point.profit_if_a), str(point.profit_if_b)])
    return buffer.getvalue()
