"""
Configuration settings for the arbitrage calculator.
Uses pydantic-settings for validation and environment variable loading.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from arbcalc.models.schemas import OddsFormat


class EngineSettings(BaseSettings):
    """Numeric policy for the evaluation engine."""

    # Profit curve resolution: 60 intervals -> 61 sampled points
    curve_intervals: int = Field(default=60, ge=1)

    # Output rounding (ROUND_HALF_UP, applied only when building results)
    ratio_places: int = Field(default=4, ge=0)
    money_places: int = Field(default=2, ge=0)

    # Significant digits for the decimal context used by every comparison
    decimal_precision: int = Field(default=50, ge=28)


class FeeSettings(BaseSettings):
    """Default fee schedule, as a fraction of the winning leg's profit."""

    book_win_fee: float = Field(default=0.0, ge=0.0, le=1.0)
    predict_win_fee: float = Field(default=0.0, ge=0.0, le=1.0)


class AdvisorSettings(BaseSettings):
    """Near-arbitrage advisor settings."""

    # Applied targets overshoot the boundary by this fraction
    safety_margin: float = Field(default=0.001, ge=0.0, lt=1.0)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ARBCALC_",
        env_nested_delimiter="__",
        extra="ignore"
    )

    # Logging
    log_level: str = "INFO"
    log_dir: str = Field(default="", description="Directory for evaluation JSONL logs (empty = disabled)")

    # Input defaults for the CLI
    default_budget: float = Field(default=1000.0, gt=0.0)
    default_odds_format: OddsFormat = OddsFormat.DECIMAL

    # Sub-settings
    engine: EngineSettings = Field(default_factory=EngineSettings)
    fees: FeeSettings = Field(default_factory=FeeSettings)
    advisor: AdvisorSettings = Field(default_factory=AdvisorSettings)


# Global settings instance
settings = Settings()
