"""Tests for the pairwise arbitrage evaluator."""

from decimal import Decimal
from fractions import Fraction

import pytest

from arbcalc.engine.allocation import profit_at
from arbcalc.engine.evaluator import EvaluatorConfig, PairEvaluator, evaluate_pair, sample_curve
from arbcalc.engine.markets import normalize_market
from arbcalc.models.schemas import (
    BookBookResult,
    BookLeg,
    CrossMarketResult,
    ErrorKind,
    FeeSchedule,
    InvalidResult,
    NoArbitrageResult,
    OddsFormat,
    PairType,
    PredictLeg,
    ResultKind,
    Side,
)


def book(side, odds):
    return normalize_market(BookLeg(side=side, odds=odds))


def predict(side, price):
    return normalize_market(PredictLeg(side=side, price=price))


@pytest.fixture
def evaluator():
    """Create an evaluator with the default numeric policy."""
    return PairEvaluator()


class TestBookBook:
    """Tests for Book-Book pairings."""

    def test_equal_odds_arbitrage(self, evaluator):
        """Test the 2.5 / 2.5 reference case."""
        result = evaluator.evaluate(book(Side.YES, 2.5), book(Side.NO, 2.5), 1000)

        assert isinstance(result, BookBookResult)
        assert result.kind is ResultKind.BOOK_BOOK
        assert result.arbitrage is True
        assert result.condition_text == "1/O1 + 1/O2 = 0.4 + 0.4 = 0.8"
        assert result.y_range == (Decimal("0.4"), Decimal("0.6"))
        assert result.y_equal == Decimal("0.5")
        assert result.stakes.a == Decimal("500")
        assert result.stakes.b == Decimal("500")
        assert result.profit_equal == Decimal("250")
        assert result.roi_equal == Decimal("0.25")
        assert result.return_if_a == result.return_if_b == Decimal("1250")
        assert result.chosen_sides == (Side.YES, Side.NO)

    def test_stake_labels(self, evaluator):
        """Test that stakes are labeled with the leg names."""
        result = evaluator.evaluate(book(Side.NO, 3.0), book(Side.YES, 2.0), 100)

        assert result.stakes.label_a == "Book NO"
        assert result.stakes.label_b == "Book YES"

    def test_profit_curve(self, evaluator):
        """Test that the curve spans the allocation range in 61 points."""
        result = evaluator.evaluate(book(Side.YES, 2.5), book(Side.NO, 2.5), 1000)
        curve = result.curve

        assert len(curve) == 61
        assert curve[0].y == Decimal("0.4")
        assert curve[0].profit_if_a == Decimal("0")
        assert curve[0].profit_if_b == Decimal("500")
        assert curve[30].y == Decimal("0.5")
        assert curve[30].profit_if_a == curve[30].profit_if_b == Decimal("250")
        assert curve[-1].y == Decimal("0.6")
        assert curve[-1].profit_if_b == Decimal("0")

    def test_no_arbitrage(self, evaluator):
        """Test that 1.5 / 1.5 is not an arbitrage."""
        result = evaluator.evaluate(book(Side.YES, 1.5), book(Side.NO, 1.5), 1000)

        assert isinstance(result, NoArbitrageResult)
        assert result.arbitrage is False
        assert result.pair_type is PairType.BOOK_BOOK
        assert result.condition_value == Decimal("1.3333")
        assert result.condition_text == "1/O1 + 1/O2 = 0.6667 + 0.6667 = 1.3333"

    def test_exact_boundary_is_not_arbitrage(self, evaluator):
        """Test that a condition of exactly 1 is not an arbitrage."""
        result = evaluator.evaluate(book(Side.YES, 2.0), book(Side.NO, 2.0), 1000)

        assert isinstance(result, NoArbitrageResult)
        assert result.condition_value == Decimal("1")

    def test_repeating_decimal_boundary(self, evaluator):
        """Test that 1/3 + 2/3 lands exactly on the boundary."""
        result = evaluator.evaluate(book(Side.YES, 3.0), book(Side.NO, 1.5), 1000)
        assert isinstance(result, NoArbitrageResult)

    def test_zero_vig_american_pair(self, evaluator):
        """Test that -150 / +150 (5/3 and 5/2) sits exactly on the boundary."""
        result = evaluator.evaluate_legs(
            BookLeg(side=Side.YES, odds="-150", odds_format=OddsFormat.AMERICAN),
            BookLeg(side=Side.NO, odds="+150", odds_format=OddsFormat.AMERICAN),
            1000,
        )

        assert isinstance(result, NoArbitrageResult)
        assert result.condition_value == Decimal("1")

    @pytest.mark.parametrize("a, b", [(1, 6), (1, 3), (2, 7), (5, 11), (1, 12), (7, 9)])
    def test_reciprocal_fractional_pair(self, evaluator, a, b):
        """Test that a/b against b/a is never an arbitrage."""
        result = evaluator.evaluate_legs(
            BookLeg(side=Side.YES, odds=f"{a}/{b}", odds_format=OddsFormat.FRACTIONAL),
            BookLeg(side=Side.NO, odds=f"{b}/{a}", odds_format=OddsFormat.FRACTIONAL),
            1000,
        )

        assert isinstance(result, NoArbitrageResult)
        assert result.arbitrage is False

    def test_same_side_rejected(self, evaluator):
        """Test that two bets on the same outcome are invalid."""
        result = evaluator.evaluate(book(Side.YES, 2.5), book(Side.YES, 2.5), 1000)

        assert isinstance(result, InvalidResult)
        assert result.error is ErrorKind.INVALID_INPUT

    @pytest.mark.parametrize("odds", [1.0, 0.5, -2])
    def test_degenerate_odds_rejected(self, evaluator, odds):
        """Test that odds <= 1 are invalid input."""
        result = evaluator.evaluate(book(Side.YES, odds), book(Side.NO, 2.5), 1000)

        assert isinstance(result, InvalidResult)
        assert result.error is ErrorKind.INVALID_INPUT


class TestCrossMarket:
    """Tests for Cross-Market pairings."""

    def test_reference_case(self, evaluator):
        """Test predict YES 0.4 against book NO 2.0."""
        result = evaluator.evaluate(predict(Side.YES, 0.4), book(Side.NO, 2.0), 1000)

        assert isinstance(result, CrossMarketResult)
        assert result.arbitrage is True
        assert result.condition_text == "P + 1/O = 0.4 + 0.5 = 0.9"
        assert result.y_range == (Decimal("0.4"), Decimal("0.5"))
        assert result.y_equal == Decimal("0.4444")
        assert result.stakes.a == Decimal("444.44")
        assert result.stakes.b == Decimal("555.56")
        assert result.stakes.label_a == "Predict YES"
        assert result.stakes.label_b == "Book NO"
        assert result.profit_equal == Decimal("111.11")
        assert result.roi_equal == Decimal("0.1111")
        assert result.profit_if_predict_wins == Decimal("111.11")
        assert result.profit_if_book_wins == Decimal("111.11")
        assert result.return_if_a == Decimal("1111.11")

    def test_fee_free_roots_agree(self, evaluator):
        """Test that without fees the fee-adjusted split equals y_equal."""
        result = evaluator.evaluate(predict(Side.YES, 0.4), book(Side.NO, 2.0), 1000)
        assert result.y_equal_fee_adjusted == result.y_equal

    def test_book_first_order(self, evaluator):
        """Test that leg A is always the predict leg."""
        result = evaluator.evaluate(book(Side.NO, 2.0), predict(Side.YES, 0.4), 1000)

        assert isinstance(result, CrossMarketResult)
        assert result.stakes.label_a == "Predict YES"
        assert result.chosen_sides == (Side.YES, Side.NO)
        assert result.inputs_used.predict_side is Side.YES
        assert result.inputs_used.book_side is Side.NO

    def test_fees(self, evaluator):
        """Test that fees change profits but not the reported split."""
        fees = FeeSchedule(book_win_fee=0.1)
        result = evaluator.evaluate(predict(Side.YES, 0.4), book(Side.NO, 2.0), 1000, fees)

        assert result.y_equal == Decimal("0.4444")
        assert result.profit_if_predict_wins == Decimal("111.11")
        assert result.profit_if_book_wins == Decimal("55.56")
        assert result.profit_equal == result.profit_if_predict_wins
        assert result.y_equal_fee_adjusted == Decimal("0.4318")

    def test_fee_adjusted_split_balances_profits(self, evaluator):
        """Test that the fee-adjusted split gives (nearly) equal profits."""
        fees = FeeSchedule(book_win_fee=0.1, predict_win_fee=0.02)
        result = evaluator.evaluate(predict(Side.YES, 0.4), book(Side.NO, 2.0), 1000, fees)
        point = profit_at(result, result.y_equal_fee_adjusted)

        assert abs(point.profit_if_a - point.profit_if_b) < Decimal("0.2")

    def test_no_arbitrage(self, evaluator):
        """Test that P + 1/O >= 1 is not an arbitrage."""
        result = evaluator.evaluate(predict(Side.YES, 0.6), book(Side.NO, 2.0), 1000)

        assert isinstance(result, NoArbitrageResult)
        assert result.pair_type is PairType.CROSS_MARKET
        assert result.condition_value == Decimal("1.1")

    def test_same_side_rejected(self, evaluator):
        """Test that predict and book on the same outcome are invalid."""
        result = evaluator.evaluate(predict(Side.YES, 0.4), book(Side.YES, 2.0), 1000)
        assert result.error is ErrorKind.INVALID_INPUT

    @pytest.mark.parametrize("price", [0, 1, 1.2, -0.1])
    def test_price_out_of_range(self, evaluator, price):
        """Test that prices outside (0, 1) are invalid input."""
        result = evaluator.evaluate(predict(Side.YES, price), book(Side.NO, 2.0), 1000)

        assert isinstance(result, InvalidResult)
        assert result.error is ErrorKind.INVALID_INPUT

    def test_float_price_is_exact(self, evaluator):
        """Test that a float price is used exactly as written."""
        result = evaluator.evaluate(predict(Side.YES, 0.4), book(Side.NO, 2.0), 1000)
        assert result.inputs_used.price == Decimal("0.4")

    def test_repeating_odds_on_the_boundary(self, evaluator):
        """Test that price 0.4 against fractional 2/3 (odds 5/3) is not an arbitrage."""
        result = evaluator.evaluate_legs(
            PredictLeg(side=Side.YES, price=0.4),
            BookLeg(side=Side.NO, odds="2/3", odds_format=OddsFormat.FRACTIONAL),
            1000,
        )

        assert isinstance(result, NoArbitrageResult)
        assert result.pair_type is PairType.CROSS_MARKET
        assert result.condition_value == Decimal("1")


class TestInvalidInputs:
    """Tests for rejected inputs."""

    def test_predict_vs_predict(self, evaluator):
        """Test that two predict legs are unsupported."""
        result = evaluator.evaluate(predict(Side.YES, 0.4), predict(Side.NO, 0.5), 1000)

        assert isinstance(result, InvalidResult)
        assert result.error is ErrorKind.UNSUPPORTED
        assert result.arbitrage is False

    @pytest.mark.parametrize("budget", [0, -5, "abc", float("inf"), "nan"])
    def test_bad_budget(self, evaluator, budget):
        """Test that non-positive or non-numeric budgets are invalid input."""
        result = evaluator.evaluate(book(Side.YES, 2.5), book(Side.NO, 2.5), budget)

        assert isinstance(result, InvalidResult)
        assert result.error is ErrorKind.INVALID_INPUT

    @pytest.mark.parametrize("budget", ["1e60", 1e60, Decimal("1E+48")])
    def test_budget_beyond_precision(self, evaluator, budget):
        """Test that a budget too large for the configured precision is invalid input."""
        result = evaluator.evaluate(book(Side.YES, 2.5), book(Side.NO, 2.5), budget)

        assert isinstance(result, InvalidResult)
        assert result.error is ErrorKind.INVALID_INPUT
        assert "integer digits" in result.reason

    def test_large_budget_is_exact(self, evaluator):
        """Test that a budget near the precision limit keeps exact money figures."""
        result = evaluator.evaluate(book(Side.YES, 2.5), book(Side.NO, 2.5), "1e40")

        assert isinstance(result, BookBookResult)
        assert result.profit_equal == Decimal("2.5E+39")
        assert result.stakes.a == Decimal("5E+39")
        assert result.curve[0].profit_if_b == Decimal("5E+39")

    def test_unparseable_odds_via_legs(self, evaluator):
        """Test that evaluate_legs reports bad quotes as invalid odds."""
        result = evaluator.evaluate_legs(
            BookLeg(side=Side.YES, odds=0, odds_format=OddsFormat.AMERICAN),
            BookLeg(side=Side.NO, odds=2.5),
            1000,
        )

        assert isinstance(result, InvalidResult)
        assert result.error is ErrorKind.INVALID_ODDS

    def test_mixed_formats_via_legs(self, evaluator):
        """Test that evaluate_legs normalizes each leg's own format."""
        result = evaluator.evaluate_legs(
            BookLeg(side=Side.YES, odds="+150", odds_format=OddsFormat.AMERICAN),
            BookLeg(side=Side.NO, odds="3/2", odds_format=OddsFormat.FRACTIONAL),
            1000,
        )

        assert isinstance(result, BookBookResult)
        assert result.roi_equal == Decimal("0.25")


class TestEvaluatorConfig:
    """Tests for the numeric policy."""

    def test_curve_resolution(self):
        """Test that the curve has intervals + 1 points."""
        evaluator = PairEvaluator(EvaluatorConfig(curve_intervals=4))
        result = evaluator.evaluate(book(Side.YES, 2.5), book(Side.NO, 2.5), 1000)

        assert [p.y for p in result.curve] == [
            Decimal("0.4"), Decimal("0.45"), Decimal("0.5"), Decimal("0.55"), Decimal("0.6"),
        ]

    def test_empty_range_gives_empty_curve(self):
        """Test that sample_curve returns nothing for an empty range."""
        profits = lambda y: (y, y)
        assert sample_curve(Fraction(1, 2), Fraction(1, 2), profits) == []
        assert sample_curve(Fraction(3, 5), Fraction(1, 2), profits) == []

    def test_deterministic(self):
        """Test that identical inputs give identical results."""
        first = evaluate_pair(predict(Side.YES, 0.4), book(Side.NO, 2.0), 1000)
        second = evaluate_pair(predict(Side.YES, 0.4), book(Side.NO, 2.0), 1000)

        assert first == second
        assert first.model_dump() == second.model_dump()
