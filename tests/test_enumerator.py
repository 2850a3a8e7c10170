"""Tests for candidate enumeration."""

from decimal import Decimal

import pytest

from arbcalc.engine.enumerator import CandidateEnumerator, enumerate_best, pairing_sides
from arbcalc.models.schemas import (
    BookBookResult,
    CrossMarketResult,
    DualSidedMarketInput,
    ErrorKind,
    InvalidResult,
    NoArbitrageResult,
    Side,
)


@pytest.fixture
def enumerator():
    """Create an enumerator with the default evaluator."""
    return CandidateEnumerator()


class TestCandidates:
    """Tests for pairing construction."""

    def test_book_book_order(self, enumerator):
        """Test that book-book pairs A.yes/B.no before A.no/B.yes."""
        candidates = enumerator.candidates(
            DualSidedMarketInput.book(yes=2.5, no=1.5),
            DualSidedMarketInput.book(yes=1.5, no=2.5),
        )
        assert [c.label for c in candidates] == ["Book YES vs Book NO", "Book NO vs Book YES"]

    def test_predict_book_order(self, enumerator):
        """Test ordering with the predict market first."""
        candidates = enumerator.candidates(
            DualSidedMarketInput.predict(yes=0.4, no=0.6),
            DualSidedMarketInput.book(yes=1.8, no=2.0),
        )
        assert [c.label for c in candidates] == ["Predict YES vs Book NO", "Predict NO vs Book YES"]

    def test_book_predict_order(self, enumerator):
        """Test that the predict YES leg still comes first when the book market is A."""
        candidates = enumerator.candidates(
            DualSidedMarketInput.book(yes=1.8, no=2.0),
            DualSidedMarketInput.predict(yes=0.4, no=0.6),
        )
        assert [c.label for c in candidates] == ["Book NO vs Predict YES", "Book YES vs Predict NO"]

    def test_predict_predict_has_none(self, enumerator):
        """Test that two predict markets give no candidates."""
        candidates = enumerator.candidates(
            DualSidedMarketInput.predict(yes=0.4, no=0.6),
            DualSidedMarketInput.predict(yes=0.4, no=0.6),
        )
        assert candidates == []

    def test_missing_side_skipped(self, enumerator):
        """Test that a pairing needing a missing value is left out."""
        candidates = enumerator.candidates(
            DualSidedMarketInput.book(yes=2.5),
            DualSidedMarketInput.book(yes=2.5, no=2.5),
        )

        assert len(candidates) == 1
        assert candidates[0].leg_a.side is Side.YES
        assert candidates[0].leg_b.side is Side.NO

    def test_pairing_sides(self):
        """Test the side order for each venue combination."""
        book = DualSidedMarketInput.book(yes=2.0)
        predict = DualSidedMarketInput.predict(yes=0.5)

        assert pairing_sides(book, book) == [(Side.YES, Side.NO), (Side.NO, Side.YES)]
        assert pairing_sides(predict, book) == [(Side.YES, Side.NO), (Side.NO, Side.YES)]
        assert pairing_sides(book, predict) == [(Side.NO, Side.YES), (Side.YES, Side.NO)]


class TestBest:
    """Tests for best-candidate selection."""

    def test_missing_no_still_evaluates(self, enumerator):
        """Test that one remaining pairing is enough."""
        result = enumerator.best(
            DualSidedMarketInput.book(yes=2.5),
            DualSidedMarketInput.book(yes=1.2, no=2.5),
            1000,
        )

        assert isinstance(result, BookBookResult)
        assert result.chosen_sides == (Side.YES, Side.NO)

    def test_insufficient_input(self, enumerator):
        """Test that no complete pairing is reported as insufficient input."""
        result = enumerator.best(
            DualSidedMarketInput.book(yes=2.5),
            DualSidedMarketInput.book(yes=2.5),
            1000,
        )

        assert isinstance(result, InvalidResult)
        assert result.error is ErrorKind.INSUFFICIENT_INPUT

    def test_predict_predict_unsupported(self, enumerator):
        """Test that two predict markets are unsupported."""
        result = enumerator.best(
            DualSidedMarketInput.predict(yes=0.4),
            DualSidedMarketInput.predict(no=0.4),
            1000,
        )
        assert result.error is ErrorKind.UNSUPPORTED

    def test_highest_roi_wins(self, enumerator):
        """Test that the arbitrage with the higher ROI is returned."""
        result = enumerator.best(
            DualSidedMarketInput.book(yes=2.5, no=3.0),
            DualSidedMarketInput.book(yes=2.2, no=2.5),
            1000,
        )

        assert isinstance(result, BookBookResult)
        assert result.chosen_sides == (Side.NO, Side.YES)
        assert result.roi_equal == Decimal("0.2692")

    def test_fallback_is_first_result(self, enumerator):
        """Test that without arbitrage the first evaluated result comes back."""
        result = enumerator.best(
            DualSidedMarketInput.book(yes="abc", no=1.5),
            DualSidedMarketInput.book(yes=1.5, no=1.5),
            1000,
        )

        assert isinstance(result, InvalidResult)
        assert result.error is ErrorKind.INVALID_ODDS

    def test_arbitrage_beats_invalid(self, enumerator):
        """Test that an arbitrage is found even when another pairing is invalid."""
        result = enumerator.best(
            DualSidedMarketInput.book(yes="abc", no=2.5),
            DualSidedMarketInput.book(yes=2.5, no=2.0),
            1000,
        )

        assert isinstance(result, BookBookResult)
        assert result.chosen_sides == (Side.NO, Side.YES)

    def test_no_arbitrage(self, enumerator):
        """Test that balanced books give a no-arbitrage result."""
        result = enumerator.best(
            DualSidedMarketInput.book(yes=1.5, no=1.5),
            DualSidedMarketInput.book(yes=1.5, no=1.5),
            1000,
        )
        assert isinstance(result, NoArbitrageResult)

    def test_cross_market(self):
        """Test the module-level helper on a cross-market pair."""
        result = enumerate_best(
            DualSidedMarketInput.predict(yes=0.4, no=0.6),
            DualSidedMarketInput.book(yes=1.8, no=2.0),
            1000,
        )

        assert isinstance(result, CrossMarketResult)
        assert result.inputs_used.predict_side is Side.YES
        assert result.roi_equal == Decimal("0.1111")
