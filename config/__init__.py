"""Configuration module."""

from config.settings import settings, Settings, EngineSettings, FeeSettings, AdvisorSettings

__all__ = [
    "settings",
    "Settings",
    "EngineSettings",
    "FeeSettings",
    "AdvisorSettings",
]
