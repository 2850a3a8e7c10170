"""
Data models and schemas for the arbitrage engine.

Inputs and results are defined using Pydantic for validation and
serialization. Normalized one-sided markets are plain dataclasses since
they only live for the duration of a single evaluation.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field


class OddsFormat(str, Enum):
    """Odds format types."""
    DECIMAL = "decimal"        # 2.50, 1.50
    AMERICAN = "american"      # +150, -200
    FRACTIONAL = "fractional"  # 3/2, 1/2


class Side(str, Enum):
    """Outcome of the binary event."""
    YES = "YES"
    NO = "NO"

    @property
    def opposite(self) -> "Side":
        return Side.NO if self is Side.YES else Side.YES


class VenueKind(str, Enum):
    """Where a quote comes from."""
    PREDICT = "predict"  # Prediction market, quoted as a price in (0, 1)
    BOOK = "book"        # Bookmaker, quoted as odds


class ErrorKind(str, Enum):
    """Why an evaluation could not produce a classification."""
    INVALID_ODDS = "invalid_odds"
    INVALID_INPUT = "invalid_input"
    UNSUPPORTED = "unsupported"
    INSUFFICIENT_INPUT = "insufficient_input"


class ResultKind(str, Enum):
    """Tag of the arbitrage result variant."""
    INVALID = "invalid"
    NO_ARBITRAGE = "no_arbitrage"
    BOOK_BOOK = "book_book"
    CROSS_MARKET = "cross_market"


class PairType(str, Enum):
    """Which arbitrage inequality applies to a pairing."""
    BOOK_BOOK = "book_book"        # 1/O1 + 1/O2 < 1
    CROSS_MARKET = "cross_market"  # P + 1/O < 1


class LeverKind(str, Enum):
    """Single-quote adjustment that moves a pairing across the boundary."""
    RAISE_BOOK_ODDS = "raise_book_odds"
    LOWER_PREDICT_PRICE = "lower_predict_price"
    RAISE_ODDS_A = "raise_odds_a"
    RAISE_ODDS_B = "raise_odds_b"


# Raw user-entered number: 0.4, 150, "-200", "5/2"
RawValue = Union[int, float, str]


# --- Input Models ---

class PredictLeg(BaseModel):
    """One prediction-market leg: buy `side` at `price`."""
    model_config = ConfigDict(frozen=True)

    venue: Literal[VenueKind.PREDICT] = VenueKind.PREDICT
    side: Side
    price: RawValue


class BookLeg(BaseModel):
    """One bookmaker leg: back `side` at `odds`."""
    model_config = ConfigDict(frozen=True)

    venue: Literal[VenueKind.BOOK] = VenueKind.BOOK
    side: Side
    odds: RawValue
    odds_format: OddsFormat = OddsFormat.DECIMAL


MarketLeg = Annotated[Union[PredictLeg, BookLeg], Field(discriminator="venue")]


@dataclass(frozen=True)
class OneSidedMarket:
    """
    Canonical leg: a price for predict venues, decimal odds for books.

    `value` is exact; a NaN or infinite quote is kept as a Decimal so the
    evaluator can report it.
    """
    venue: VenueKind
    side: Side
    value: Union[Fraction, Decimal]
    label: str


class DualSidedMarketInput(BaseModel):
    """
    A market as the user enters it.

    Either side may be missing. The enumerator projects it into zero, one or
    two one-sided legs; it is never evaluated directly.
    """
    model_config = ConfigDict(frozen=True)

    venue: VenueKind
    yes: Optional[RawValue] = None
    no: Optional[RawValue] = None
    odds_format: OddsFormat = OddsFormat.DECIMAL  # Ignored for predict venues

    @classmethod
    def predict(
        cls,
        yes: Optional[RawValue] = None,
        no: Optional[RawValue] = None,
    ) -> "DualSidedMarketInput":
        return cls(venue=VenueKind.PREDICT, yes=yes, no=no)

    @classmethod
    def book(
        cls,
        yes: Optional[RawValue] = None,
        no: Optional[RawValue] = None,
        odds_format: OddsFormat = OddsFormat.DECIMAL,
    ) -> "DualSidedMarketInput":
        return cls(venue=VenueKind.BOOK, yes=yes, no=no, odds_format=odds_format)

    def value_for(self, side: Side) -> Optional[RawValue]:
        """Raw quote for one side, or None if it was not entered."""
        return self.yes if side is Side.YES else self.no

    def leg(self, side: Side) -> Optional[Union[PredictLeg, BookLeg]]:
        """Build the one-sided leg for `side`, or None if it is missing."""
        value = self.value_for(side)
        if value is None:
            return None
        if self.venue is VenueKind.PREDICT:
            return PredictLeg(side=side, price=value)
        return BookLeg(side=side, odds=value, odds_format=self.odds_format)


class FeeSchedule(BaseModel):
    """Fees charged on the profit portion of a winning leg, per venue."""
    model_config = ConfigDict(frozen=True)

    book_win_fee: float = Field(default=0.0, ge=0.0, le=1.0)
    predict_win_fee: float = Field(default=0.0, ge=0.0, le=1.0)


# --- Result Models ---

class StakePair(BaseModel):
    """How the budget is split across the two legs."""
    a: Decimal
    b: Decimal
    label_a: str
    label_b: str


class ProfitCurvePoint(BaseModel):
    """Profit under each outcome at allocation fraction `y`."""
    y: Decimal
    profit_if_a: Decimal
    profit_if_b: Decimal


class BookBookInputs(BaseModel):
    """Canonical values a Book-Book result was computed from."""
    o1: Decimal
    o2: Decimal
    side_a: Side
    side_b: Side


class CrossMarketInputs(BaseModel):
    """Canonical values a Cross-Market result was computed from."""
    price: Decimal
    odds: Decimal
    predict_side: Side
    book_side: Side
    fees: FeeSchedule = Field(default_factory=FeeSchedule)


class InvalidResult(BaseModel):
    """The inputs could not be classified."""
    kind: Literal[ResultKind.INVALID] = ResultKind.INVALID
    error: ErrorKind
    reason: str

    @computed_field
    @property
    def arbitrage(self) -> bool:
        return False


class NoArbitrageResult(BaseModel):
    """A valid pairing that does not satisfy the strict inequality."""
    kind: Literal[ResultKind.NO_ARBITRAGE] = ResultKind.NO_ARBITRAGE
    pair_type: PairType
    condition_text: str
    condition_value: Decimal

    @computed_field
    @property
    def arbitrage(self) -> bool:
        return False


class ArbitrageDetails(BaseModel):
    """Attributes shared by both arbitrage cases."""
    condition_text: str
    budget: Decimal
    y_range: tuple[Decimal, Decimal]
    y_equal: Decimal
    stakes: StakePair
    profit_equal: Decimal
    roi_equal: Decimal  # Fraction, 0.0155 == 1.55%
    return_if_a: Decimal
    return_if_b: Decimal
    curve: list[ProfitCurvePoint] = Field(default_factory=list)
    chosen_sides: tuple[Side, Side]

    @computed_field
    @property
    def arbitrage(self) -> bool:
        return True


class BookBookResult(ArbitrageDetails):
    """Arbitrage between two bookmaker quotes on opposite outcomes."""
    kind: Literal[ResultKind.BOOK_BOOK] = ResultKind.BOOK_BOOK
    inputs_used: BookBookInputs


class CrossMarketResult(ArbitrageDetails):
    """
    Arbitrage between a prediction-market price and a bookmaker quote.

    Leg A is always the predict leg, leg B the book leg.
    """
    kind: Literal[ResultKind.CROSS_MARKET] = ResultKind.CROSS_MARKET
    inputs_used: CrossMarketInputs
    profit_if_predict_wins: Decimal
    profit_if_book_wins: Decimal
    y_equal_fee_adjusted: Decimal  # Allocation that equalizes fee-adjusted profits


ArbitrageResult = Annotated[
    Union[InvalidResult, NoArbitrageResult, BookBookResult, CrossMarketResult],
    Field(discriminator="kind"),
]


# --- Advisor Models ---

class CrossMarketTargets(BaseModel):
    """Boundary values for P + 1/O < 1, holding the other leg fixed."""
    kind: Literal[PairType.CROSS_MARKET] = PairType.CROSS_MARKET
    price: Decimal
    odds: Decimal
    price_max: Decimal
    odds_min: Decimal
    predict_side: Side
    book_side: Side


class BookBookTargets(BaseModel):
    """Boundary values for 1/O1 + 1/O2 < 1, holding the other leg fixed."""
    kind: Literal[PairType.BOOK_BOOK] = PairType.BOOK_BOOK
    o1: Decimal
    o2: Decimal
    o1_min: Decimal
    o2_min: Decimal
    side_a: Side
    side_b: Side


class NearArbSuggestion(BaseModel):
    """How far one pairing is from arbitrage and the cheapest way across."""
    label: str
    kind: PairType
    margin: Decimal  # Rounded signed gap to the boundary
    targets: Annotated[Union[CrossMarketTargets, BookBookTargets], Field(discriminator="kind")]
    change_score: Decimal = Field(allow_inf_nan=True)  # Relative change of the easiest lever
    lever: str
    lever_kind: LeverKind
    arbitrage: bool  # Sign of the unrounded margin; a margin of -0.00001 shows as 0.0000
