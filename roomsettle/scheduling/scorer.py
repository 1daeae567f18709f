"""
Date Scoring

Ranks calendar dates by how many members said they are free.

Only dates somebody marked available are scored; there is no
zero-availability entry. Ranking is most-available first, earlier
date first among ties.

Membership is not cross-checked: a user who has availability but is
not in ``member_ids`` is still tallied. Callers drop departed members
from ``member_ids`` before scoring.
"""

from datetime import date
from typing import Iterable

import structlog

from roomsettle.models.results import DateScore
from roomsettle.models.room import AvailabilityRecord


logger = structlog.get_logger(__name__)


def _chronological_key(date_string: str) -> tuple:
    # Unparseable dates sort after real ones, by their raw text.
    try:
        return (0, date.fromisoformat(date_string))
    except ValueError:
        return (1, date_string)


def score_dates(
    availabilities: Iterable[AvailabilityRecord],
    member_ids: Iterable[str],
) -> list[DateScore]:
    """
    Tally availability per date and rank the result.

    Args:
        availabilities: One record per member
        member_ids: Current room members, used to seed ``missing_users``

    Returns:
        DateScores, highest ``available_count`` first, then chronological
    """
    member_ids = list(member_ids)
    tally: dict[str, DateScore] = {}

    for record in availabilities:
        for date_string, day in record.dates.items():
            if not day.is_available:
                continue

            score = tally.get(date_string)
            if score is None:
                score = DateScore(date=date_string, missing_users=list(member_ids))
                tally[date_string] = score

            score.available_count += 1
            score.available_users.append(record.user_id)
            score.missing_users = [
                uid for uid in score.missing_users if uid != record.user_id
            ]

    ranked = sorted(
        tally.values(),
        key=lambda s: (-s.available_count, _chronological_key(s.date)),
    )

    logger.debug("dates_scored", date_count=len(ranked))
    return ranked
