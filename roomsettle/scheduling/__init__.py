"""Date scheduling package."""

from roomsettle.scheduling.scorer import score_dates

__all__ = ["score_dates"]
