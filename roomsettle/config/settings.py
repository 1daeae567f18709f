"""
Configuration Management for Room Settle

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The settlement rounding policy (cents, 0.01 tolerance) is deliberately
NOT configurable; it lives in roomsettle.settlement.money so results
stay identical everywhere.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettlementSettings(BaseSettings):
    """Display and summary options for settlement results."""

    model_config = SettingsConfigDict(
        env_prefix="SETTLEMENT_",
        extra="ignore"
    )

    default_currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="Currency used when a room does not specify one"
    )
    runner_up_count: int = Field(
        default=3,
        ge=0,
        le=10,
        description="How many runner-up dates the share summary lists"
    )

    @field_validator('default_currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.upper()


class RetentionSettings(BaseSettings):
    """Stale-room cleanup configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETENTION_",
        extra="ignore"
    )

    max_age_days: int = Field(
        default=30,
        ge=1,
        description="Rooms older than this are purged with all their records"
    )


class StoreSettings(BaseSettings):
    """Retry policy for reads from the room store."""

    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        extra="ignore"
    )

    retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per snapshot load before giving up"
    )
    retry_max_wait_seconds: float = Field(
        default=10.0,
        ge=0.0,
        description="Upper bound on exponential backoff between attempts"
    )


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
    def settlement(self) -> SettlementSettings:
        return SettlementSettings()

    @property
    def retention(self) -> RetentionSettings:
        return RetentionSettings()

    @property
    def store(self) -> StoreSettings:
        return StoreSettings()


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

    Returns a dict of {setting_name: is_valid}, with an extra
    "<name>_error" entry for each failure.
    """
    results = {}

    settings = get_settings()

    for name in ("settlement", "retention", "store"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
