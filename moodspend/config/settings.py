"""
Configuration Management for MoodSpend

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here, including the data
policies (what an unparseable amount means, what to do with a corrupt
persisted blob).
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from moodspend.models.expense import AmountFallback


class StorageSettings(BaseSettings):
    """Where and how expense records are persisted."""

    model_config = SettingsConfigDict(
        env_prefix="MOODSPEND_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="file",
        pattern="^(file|memory)$",
        description="Storage backend: a JSON file on disk or an in-memory slot"
    )
    data_dir: Path = Field(
        default=Path(".data"),
        description="Directory holding the persisted slot"
    )
    storage_key: str = Field(
        default="emotional_expenses_v1",
        min_length=1,
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="Name of the single persisted slot"
    )

    @property
    def slot_path(self) -> Path:
        """Path of the JSON file backing the slot."""
        return self.data_dir / f"{self.storage_key}.json"


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="MOODSPEND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Level for the standard library root logger"
    )

    # Display
    currency_symbol: str = Field(
        default="₹",
        max_length=5,
        description="Currency symbol prefixed to amounts"
    )

    # Data policies
    amount_fallback: AmountFallback = Field(
        default=AmountFallback.REJECT,
        description="What to do with amounts that cannot be parsed"
    )
    recover_corrupt_data: bool = Field(
        default=True,
        description="Treat an unreadable persisted blob as an empty store"
    )
    min_records_for_insights: int = Field(
        default=3,
        ge=1,
        description="Minimum number of expenses before insights are derived"
    )

    # Import / export
    max_import_size_mb: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum JSON import file size in MB"
    )
    export_filename: str = Field(
        default="emotional-expenses.csv",
        description="Download name for the CSV export"
    )

    @field_validator('log_level')
    @classmethod
    def normalise_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v

    @property
    def max_import_size_bytes(self) -> int:
        """Get max import size in bytes."""
        return self.max_import_size_mb * 1024 * 1024


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

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid} plus `<name>_error` entries
    describing what went wrong. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
