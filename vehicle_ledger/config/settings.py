"""
Configuration Management for Vehicle Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Import defaults (currency, units, duplicate tolerances) live next to the
storage settings so the whole pipeline can be tuned from one .env file.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # Sheet names within the spreadsheet
    vehicles_sheet_name: str = Field(
        default="Vehicles",
        description="Name of the sheet holding the vehicle roster"
    )
    fuel_sheet_name: str = Field(
        default="FuelEntries",
        description="Name of the sheet for fuel entries"
    )
    expense_sheet_name: str = Field(
        default="ExpenseEntries",
        description="Name of the sheet for expense entries"
    )
    income_sheet_name: str = Field(
        default="IncomeEntries",
        description="Name of the sheet for income entries"
    )
    audit_sheet_name: str = Field(
        default="AuditLog",
        description="Name of the sheet for audit logs"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class ImportSettings(BaseSettings):
    """
    Defaults and thresholds for the CSV import pipeline.

    Loads configuration from environment variables (LEDGER_ prefix)
    and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Defaults applied to optional columns
    default_currency: str = Field(
        default="HKD",
        min_length=1,
        description="Currency used when the Currency column is empty"
    )
    default_time: str = Field(
        default="12:00",
        pattern=r"^([01]\d|2[0-3]):[0-5]\d$",
        description="Time of day used when the Time column is empty"
    )
    default_distance_unit: str = Field(default="km")
    default_volume_unit: str = Field(default="liters")
    default_tyre_pressure_unit: str = Field(default="psi")

    # Duplicate detection windows (strictly-less-than comparisons)
    duplicate_mileage_tolerance: float = Field(
        default=10.0,
        gt=0,
        description="Mileage difference below which fuel entries look alike"
    )
    duplicate_cost_tolerance: float = Field(
        default=1.0,
        gt=0,
        description="Cost difference below which fuel entries look alike"
    )
    duplicate_amount_tolerance: float = Field(
        default=1.0,
        gt=0,
        description="Amount difference below which expense/income entries look alike"
    )

    # Batch import pacing
    row_delay_seconds: float = Field(
        default=0.0,
        ge=0.0,
        le=5.0,
        description="Pause between row submissions"
    )

    # Upload limits
    max_upload_size_mb: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum CSV upload size in MB"
    )

    @field_validator('default_currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        """Currency codes are stored upper-case."""
        return v.strip().upper()

    @property
    def max_upload_size_bytes(self) -> int:
        """Get max upload size in bytes."""
        return self.max_upload_size_mb * 1024 * 1024


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def imports(self) -> ImportSettings:
        return ImportSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.google_sheets
        results["google_sheets"] = True
    except Exception as e:
        results["google_sheets"] = False
        results["google_sheets_error"] = str(e)

    try:
        _ = settings.imports
        results["imports"] = True
    except Exception as e:
        results["imports"] = False
        results["imports_error"] = str(e)

    return results
