"""
Tests for date scoring.

Ranking must be deterministic: most members free first, then the
earlier date.
"""

import pytest

from roomsettle.models.room import AvailabilityRecord, DayAvailability
from roomsettle.scheduling import score_dates


def _record(user_id: str, free: list[str], busy: list[str] = ()) -> AvailabilityRecord:
    dates = {d: DayAvailability(is_available=True) for d in free}
    dates.update({d: DayAvailability(is_available=False) for d in busy})
    return AvailabilityRecord(user_id=user_id, dates=dates)


MEMBERS = ["alice", "bob", "charlie"]


class TestScoreDates:
    """Tests for score_dates."""

    def test_example_scenario(self):
        """Alice and Bob free on the 1st, only Alice on the 2nd."""
        records = [
            _record("alice", ["2024-06-01", "2024-06-02"]),
            _record("bob", ["2024-06-01"]),
        ]
        scores = score_dates(records, MEMBERS)

        assert [s.date for s in scores] == ["2024-06-01", "2024-06-02"]
        assert scores[0].available_count == 2
        assert scores[0].available_users == ["alice", "bob"]
        assert scores[0].missing_users == ["charlie"]
        assert scores[1].available_count == 1
        assert scores[1].missing_users == ["bob", "charlie"]

    def test_empty_input(self):
        """No availability records means no scores."""
        assert score_dates([], MEMBERS) == []

    def test_unavailable_dates_never_appear(self):
        """A date only ever marked busy gets no entry."""
        records = [
            _record("alice", ["2024-06-01"], busy=["2024-06-05"]),
            _record("bob", [], busy=["2024-06-05"]),
        ]
        scores = score_dates(records, MEMBERS)
        assert [s.date for s in scores] == ["2024-06-01"]

    def test_ties_break_chronologically(self):
        """Equal counts are ordered earliest first, whatever the input order."""
        records = [
            _record("alice", ["2024-07-10", "2024-06-20", "2024-06-03"]),
        ]
        scores = score_dates(records, MEMBERS)
        assert [s.date for s in scores] == ["2024-06-03", "2024-06-20", "2024-07-10"]

    def test_count_beats_date(self):
        """A later date with more people free ranks first."""
        records = [
            _record("alice", ["2024-06-01", "2024-12-31"]),
            _record("bob", ["2024-12-31"]),
            _record("charlie", ["2024-12-31"]),
        ]
        scores = score_dates(records, MEMBERS)
        assert scores[0].date == "2024-12-31"
        assert scores[0].available_count == 3
        assert scores[0].missing_users == []

    def test_available_and_missing_partition_members(self):
        """Available and missing users are disjoint and cover every member."""
        records = [
            _record("alice", ["2024-06-01", "2024-06-02"]),
            _record("bob", ["2024-06-02", "2024-06-03"]),
            _record("charlie", ["2024-06-03"]),
        ]
        for score in score_dates(records, MEMBERS):
            available = set(score.available_users)
            missing = set(score.missing_users)
            assert available.isdisjoint(missing)
            assert available | missing == set(MEMBERS)

    def test_non_member_is_still_tallied(self):
        """Membership is the caller's job; unknown users still count."""
        records = [_record("stranger", ["2024-06-01"])]
        scores = score_dates(records, MEMBERS)
        assert scores[0].available_count == 1
        assert scores[0].available_users == ["stranger"]
        assert scores[0].missing_users == MEMBERS

    def test_malformed_dates_pass_through(self):
        """Unparseable dates are kept as opaque strings, after real dates."""
        records = [_record("alice", ["someday", "2024-06-01"])]
        scores = score_dates(records, MEMBERS)
        assert [s.date for s in scores] == ["2024-06-01", "someday"]

    def test_input_records_are_not_modified(self):
        """Scoring twice gives the same answer."""
        records = [
            _record("alice", ["2024-06-01"]),
            _record("bob", ["2024-06-01"]),
        ]
        assert score_dates(records, MEMBERS) == score_dates(records, MEMBERS)

    @pytest.mark.parametrize("member_ids", [[], ["alice"]])
    def test_missing_users_seeded_from_members(self, member_ids):
        """missing_users starts from the given member list."""
        scores = score_dates([_record("alice", ["2024-06-01"])], member_ids)
        assert scores[0].missing_users == []

    def test_accepts_store_documents(self):
        """camelCase store documents validate straight into records."""
        record = AvailabilityRecord.model_validate({
            "userId": "alice",
            "dates": {
                "2024-06-01": {"isAvailable": True, "timeSlots": ["evening"]},
            },
        })
        scores = score_dates([record], ["alice"])
        assert scores[0].available_users == ["alice"]
