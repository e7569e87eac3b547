"""Configuration package."""

from vehicle_ledger.config.settings import (
    GoogleSheetsSettings,
    ImportSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "GoogleSheetsSettings",
    "ImportSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
