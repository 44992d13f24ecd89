"""Configuration module for parkhub."""

from .settings import ParkhubSettings, get_settings, reset_settings_cache
from .logging_config import (
    setup_logging,
    LogLevel,
    LogVerbosity,
    LogFormat,
    LoggingConfig,
)

__all__ = [
    "ParkhubSettings",
    "get_settings",
    "reset_settings_cache",
    "setup_logging",
    "LogLevel",
    "LogVerbosity",
    "LogFormat",
    "LoggingConfig",
]
