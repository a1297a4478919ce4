"""Tests for listing filters and counts."""

from datetime import date, datetime

import pytest

from clubdesk.core.activity import (
    Activity,
    ApprovalStatus,
    DaySlot,
    InvalidInputError,
    Participant,
    ScheduleDay,
    SlotName,
)
from clubdesk.core.listing import (
    build_entries,
    count_by_approval,
    count_by_bucket,
    filter_entries,
    my_registrations,
)
from clubdesk.core.temporal import TemporalStatus
from clubdesk.core.timewindow import TimeWindow

NOW = datetime(2025, 6, 10, 9, 0)
ME = "me"


def make_activity(activity_id: str, day: date, participants=(), **kwargs) -> Activity:
    return Activity(
        id=activity_id,
        name=activity_id,
        date=day,
        time_slots=[TimeWindow("08:00", "10:00")],
        participants=list(participants),
        **kwargs,
    )


@pytest.fixture
def activities():
    return [
        make_activity("past", date(2025, 6, 1), [Participant(ME, approval_status=ApprovalStatus.APPROVED)]),
        make_activity("today", date(2025, 6, 10), [Participant({"_id": ME}, approval_status=ApprovalStatus.PENDING)]),
        make_activity("soon", date(2025, 6, 20), [Participant("someone-else")]),
        make_activity("later", date(2025, 7, 1), [Participant(ME, approval_status=ApprovalStatus.REJECTED)]),
        make_activity(
            "camp",
            date(2025, 6, 15),
            [Participant(ME, approval_status=ApprovalStatus.APPROVED)],
            end_date=date(2025, 6, 16),
            activity_type="multiple_days",
            schedule=[ScheduleDay(1, date(2025, 6, 15)), ScheduleDay(2, date(2025, 6, 16))],
        ),
    ]


@pytest.fixture
def entries(activities):
    return build_entries(activities, ME, NOW)


class TestBuildEntries:
    def test_classifies_each_activity(self, entries):
        statuses = {e.activity.id: e.classification.status for e in entries}
        assert statuses == {
            "past": TemporalStatus.PAST,
            "today": TemporalStatus.ONGOING,
            "soon": TemporalStatus.UPCOMING,
            "later": TemporalStatus.UPCOMING,
            "camp": TemporalStatus.UPCOMING,
        }

    def test_view_only_where_user_participates(self, entries):
        with_view = {e.activity.id for e in entries if e.view is not None}
        assert with_view == {"past", "today", "later", "camp"}
        assert all(e.view.is_registered for e in entries if e.view)

    def test_no_user(self, activities):
        assert all(e.view is None for e in build_entries(activities, None, NOW))


class TestFilterEntries:
    def test_all(self, entries):
        assert filter_entries(entries) == entries

    def test_by_bucket(self, entries):
        upcoming = filter_entries(entries, bucket="upcoming")
        assert [e.activity.id for e in upcoming] == ["soon", "later", "camp"]

    def test_by_approval(self, entries):
        approved = filter_entries(entries, approval="approved")
        assert [e.activity.id for e in approved] == ["past", "camp"]

    def test_combined(self, entries):
        result = filter_entries(entries, bucket="upcoming", approval="rejected")
        assert [e.activity.id for e in result] == ["later"]

    def test_case_insensitive(self, entries):
        assert len(filter_entries(entries, bucket="PAST")) == 1

    def test_unknown_filter_raises(self, entries):
        with pytest.raises(InvalidInputError):
            filter_entries(entries, bucket="tomorrow")
        with pytest.raises(InvalidInputError):
            filter_entries(entries, approval="maybe")


class TestCounts:
    def test_bucket_counts(self, entries):
        assert count_by_bucket(entries) == {"all": 5, "upcoming": 3, "ongoing": 1, "past": 1}

    def test_counts_independent_of_selected_tab(self, entries):
        """Tab badges come from the unfiltered list, whatever tab is selected."""
        before = count_by_bucket(entries)
        filter_entries(entries, bucket="past")
        assert count_by_bucket(entries) == before

    def test_approval_counts(self, entries):
        assert count_by_approval(entries) == {
            "all": 4,
            "pending": 1,
            "approved": 2,
            "rejected": 1,
            "removed": 0,
        }

    def test_empty(self):
        assert count_by_bucket([]) == {"all": 0, "upcoming": 0, "ongoing": 0, "past": 0}


class TestMyRegistrations:
    def test_multi_day_without_slots_excluded(self, entries):
        assert [e.activity.id for e in my_registrations(entries)] == ["past", "today", "later"]

    def test_multi_day_with_slots_included(self, activities):
        camp = activities[-1]
        camp.participants[0].registered_day_slots = [DaySlot(1, SlotName.MORNING)]
        ids = [e.activity.id for e in my_registrations(build_entries(activities, ME, NOW))]
        assert "camp" in ids
