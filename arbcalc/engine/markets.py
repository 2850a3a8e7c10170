"""Canonicalize user-declared market legs."""

from typing import Union

from arbcalc.engine.numeric import as_exact
from arbcalc.engine.odds import InvalidOddsError, exact_odds
from arbcalc.models.schemas import BookLeg, OneSidedMarket, PredictLeg, VenueKind


def normalize_market(leg: Union[PredictLeg, BookLeg]) -> OneSidedMarket:
    """
    Turn one leg into a canonical one-sided market.

    No range checks happen here: a price of 1.2 or odds of 0.9 come through
    untouched and are rejected by the evaluator.

    Raises:
        InvalidOddsError: book odds that cannot be parsed in their format,
            or a predict price that is not a number
    """
    if isinstance(leg, PredictLeg):
        try:
            price = as_exact(leg.price)
        except ValueError:
            raise InvalidOddsError(f"Invalid price: {leg.price!r}") from None
        return OneSidedMarket(
            venue=VenueKind.PREDICT,
            side=leg.side,
            value=price,
            label=f"Predict {leg.side.value}",
        )

    odds = exact_odds(leg.odds_format, leg.odds)
    return OneSidedMarket(
        venue=VenueKind.BOOK,
        side=leg.side,
        value=odds,
        label=f"Book {leg.side.value}",
    )
