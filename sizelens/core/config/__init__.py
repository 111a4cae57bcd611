"""Configuration management for SizeLens."""

from sizelens.core.config.loader import ConfigLoader
from sizelens.core.config.settings import (
    LoggingSettings,
    ParserSettings,
    Settings,
    get_settings,
)

__all__ = [
    "ConfigLoader",
    "LoggingSettings",
    "ParserSettings",
    "Settings",
    "get_settings",
]
