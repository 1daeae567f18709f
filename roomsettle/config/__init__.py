"""Configuration package."""

from roomsettle.config.settings import (
    RetentionSettings,
    SettlementSettings,
    Settings,
    StoreSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "RetentionSettings",
    "SettlementSettings",
    "Settings",
    "StoreSettings",
    "get_settings",
    "validate_all_settings",
]
