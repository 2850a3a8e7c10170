"""Engine data models and schemas."""

from arbcalc.models.schemas import (
    OddsFormat,
    Side,
    VenueKind,
    ErrorKind,
    ResultKind,
    PairType,
    LeverKind,
    PredictLeg,
    BookLeg,
    MarketLeg,
    OneSidedMarket,
    DualSidedMarketInput,
    FeeSchedule,
    StakePair,
    ProfitCurvePoint,
    BookBookInputs,
    CrossMarketInputs,
    InvalidResult,
    NoArbitrageResult,
    BookBookResult,
    CrossMarketResult,
    ArbitrageResult,
    CrossMarketTargets,
    BookBookTargets,
    NearArbSuggestion,
)

__all__ = [
    "OddsFormat",
    "Side",
    "VenueKind",
    "ErrorKind",
    "ResultKind",
    "PairType",
    "LeverKind",
    "PredictLeg",
    "BookLeg",
    "MarketLeg",
    "OneSidedMarket",
    "DualSidedMarketInput",
    "FeeSchedule",
    "StakePair",
    "ProfitCurvePoint",
    "BookBookInputs",
    "CrossMarketInputs",
    "InvalidResult",
    "NoArbitrageResult",
    "BookBookResult",
    "CrossMarketResult",
    "ArbitrageResult",
    "CrossMarketTargets",
    "BookBookTargets",
    "NearArbSuggestion",
]
