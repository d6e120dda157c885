"""
Configuration Module
====================

Centralized configuration management using Pydantic Settings.
Loads from environment variables (and an optional .env file) with type
validation and defaults.

Usage:
    from zksubmit.config import get_settings

    settings = get_settings()
    print(settings.relayer.base_url)
    print(settings.circuit.zkey_path)
"""

from zksubmit.config.settings import (
    CircuitSettings,
    LogLevel,
    PacingSettings,
    RelayerSettings,
    Settings,
    get_settings,
)


__all__ = [
    "Settings",
    "get_settings",
    "LogLevel",
    "RelayerSettings",
    "PacingSettings",
    "CircuitSettings",
]
