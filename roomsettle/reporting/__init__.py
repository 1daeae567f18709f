"""Reporting package: currency formatting and share summaries."""

from roomsettle.reporting.currency import (
    CURRENCY_SYMBOLS,
    format_currency,
)
from roomsettle.reporting.summary import (
    UNKNOWN_MEMBER,
    build_share_text,
    format_long_date,
    format_short_date,
    member_name,
)

__all__ = [
    "CURRENCY_SYMBOLS",
    "format_currency",
    "UNKNOWN_MEMBER",
    "build_share_text",
    "format_long_date",
    "format_short_date",
    "member_name",
]
