"""Tests for activity records and time windows."""

from datetime import date, time

import pytest

from clubdesk.core.activity import (
    Activity,
    ApprovalStatus,
    DaySlot,
    Participant,
    SlotName,
    extract_id,
    parse_day,
)
from clubdesk.core.timewindow import TimeWindow, active_bounds, parse_hhmm


class TestParseHhmm:
    def test_valid(self):
        assert parse_hhmm("08:30") == time(8, 30)
        assert parse_hhmm("8:05") == time(8, 5)
        assert parse_hhmm(" 23:59 ") == time(23, 59)

    @pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "", None, "12"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_hhmm(value)


class TestTimeWindow:
    def test_bounds(self):
        assert TimeWindow("08:00", "10:30").bounds() == (time(8, 0), time(10, 30))

    def test_inverted_window_rejected(self):
        with pytest.raises(ValueError):
            TimeWindow("10:00", "08:00").bounds()

    def test_active_bounds(self):
        windows = [
            TimeWindow("13:00", "17:00"),
            TimeWindow("07:00", "11:00"),
            TimeWindow("18:00", "21:00", is_active=False),
        ]
        assert active_bounds(windows) == (time(7, 0), time(17, 0))

    def test_active_bounds_none_when_all_inactive(self):
        assert active_bounds([TimeWindow("07:00", "11:00", is_active=False)]) is None

    def test_inactive_malformed_window_ignored(self):
        windows = [TimeWindow("07:00", "11:00"), TimeWindow("bad", "worse", is_active=False)]
        assert active_bounds(windows) == (time(7, 0), time(11, 0))

    def test_from_api_defaults_active(self):
        window = TimeWindow.from_api({"startTime": "08:00", "endTime": "11:00", "name": "Morning"})
        assert window == TimeWindow("08:00", "11:00", True, "Morning")

    def test_from_api_non_dict(self):
        assert TimeWindow.from_api(None) is None
        assert TimeWindow.from_api("08:00-11:00") is None

    def test_overlaps(self):
        morning = TimeWindow("07:00", "11:00")
        assert morning.overlaps(TimeWindow("10:00", "12:00")) is True
        assert morning.overlaps(TimeWindow("11:00", "12:00")) is False
        assert TimeWindow("08:00", "09:00").overlaps(morning) is True

    def test_slot_matches_window_names(self):
        assert SlotName.MORNING.matches(TimeWindow("07:00", "11:00", name="Buổi Sáng"))
        assert SlotName.EVENING.matches(TimeWindow("18:00", "21:00", name=" Evening "))
        assert not SlotName.AFTERNOON.matches(TimeWindow("07:00", "11:00", name="Buổi Sáng"))
        assert not SlotName.MORNING.matches(TimeWindow("07:00", "11:00"))


class TestExtractId:
    @pytest.mark.parametrize(
        "ref",
        ["abc123", " abc123\n", {"_id": "abc123"}, {"$oid": "abc123"}, {"_id": {"$oid": "abc123"}}, {"id": "abc123"}],
    )
    def test_shapes(self, ref):
        assert extract_id(ref) == "abc123"

    def test_empty(self):
        assert extract_id(None) == ""
        assert extract_id({}) == ""

    def test_numbers_become_strings(self):
        assert extract_id(42) == "42"


class TestParseDay:
    def test_date_and_timestamp_strings(self):
        assert parse_day("2025-06-10") == date(2025, 6, 10)
        assert parse_day("2025-06-10T17:00:00.000Z") == date(2025, 6, 10)

    def test_garbage(self):
        assert parse_day("next tuesday") is None
        assert parse_day("") is None
        assert parse_day(None) is None


class TestApprovalStatus:
    def test_parse(self):
        assert ApprovalStatus.parse("Approved") == ApprovalStatus.APPROVED
        assert ApprovalStatus.parse(None) == ApprovalStatus.PENDING
        assert ApprovalStatus.parse("archived") == ApprovalStatus.PENDING


class TestParticipantFromApi:
    def test_full_record(self):
        participant = Participant.from_api({
            "userId": {"_id": "u1", "name": "Lan"},
            "name": "Lan",
            "email": "lan@example.edu",
            "approvalStatus": "approved",
            "registeredDaySlots": [
                {"day": 1, "slot": "morning"},
                {"day": "2", "slot": "EVENING"},
                {"day": 3, "slot": "midnight"},
            ],
            "joinedAt": "2025-06-01T08:00:00Z",
            "checkedIn": True,
        })
        assert participant.user_id == "u1"
        assert participant.approval_status == ApprovalStatus.APPROVED
        assert participant.registered_day_slots == [
            DaySlot(1, SlotName.MORNING),
            DaySlot(2, SlotName.EVENING),
        ]
        assert participant.joined_at.year == 2025
        assert participant.checked_in is True

    def test_approval_metadata(self):
        participant = Participant.from_api({
            "userId": "u1",
            "approvalStatus": "approved",
            "approvedBy": {"_id": "officer1"},
            "approvedAt": "2025-06-02T09:30:00.000Z",
        })
        assert participant.approved_by == "officer1"
        assert participant.approved_at.date() == date(2025, 6, 2)
        assert participant.rejected_by is None

    def test_missing_approval_metadata(self):
        participant = Participant.from_api({"userId": "u1"})
        assert participant.approved_by is None
        assert participant.approved_at is None

    def test_non_dict_entry(self):
        assert Participant.from_api(None) is None
        assert Participant.from_api("u1") is None


class TestActivityFromApi:
    def test_single_day(self):
        activity = Activity.from_api({
            "_id": "a1",
            "name": "Blood drive",
            "date": "2025-06-10T00:00:00.000Z",
            "type": "single_day",
            "status": "published",
            "maxParticipants": 30,
            "timeSlots": [{"startTime": "08:00", "endTime": "10:00", "isActive": True}],
            "participants": [{"userId": "u1"}, None],
        })
        assert activity.id == "a1"
        assert activity.date == date(2025, 6, 10)
        assert activity.is_multi_day is False
        assert activity.last_date == date(2025, 6, 10)
        assert activity.max_participants == 30
        assert activity.registration_threshold == 80
        assert len(activity.participants) == 1

    def test_multi_day_uses_start_date(self):
        activity = Activity.from_api({
            "_id": "m1",
            "name": "Camp",
            "type": "multiple_days",
            "startDate": "2025-06-01",
            "endDate": "2025-06-03",
            "registrationThreshold": 150,
            "schedule": [
                {"day": 1, "date": "2025-06-01"},
                {"day": 2, "date": "2025-06-02"},
                {"day": 3, "date": "2025-06-03"},
            ],
        })
        assert activity.is_multi_day is True
        assert activity.date == date(2025, 6, 1)
        assert activity.last_date == date(2025, 6, 3)
        assert activity.registration_threshold == 100
        assert activity.schedule_day_for(date(2025, 6, 2)).day == 2

    def test_end_date_implies_multi_day(self):
        activity = Activity(id="x", name="x", date=date(2025, 6, 1), end_date=date(2025, 6, 2))
        assert activity.is_multi_day is True

    def test_malformed_fields_do_not_raise(self):
        activity = Activity.from_api({
            "_id": "bad",
            "date": "soon",
            "maxParticipants": "lots",
            "registrationThreshold": None,
        })
        assert activity.date is None
        assert activity.max_participants is None
        assert activity.registration_threshold == 80

    def test_non_dict_entries_skipped(self):
        activity = Activity.from_api({
            "_id": "m2",
            "type": "multiple_days",
            "startDate": "2025-06-01",
            "endDate": "2025-06-02",
            "timeSlots": [None, {"startTime": "08:00", "endTime": "10:00"}, "evening"],
            "schedule": [None, "x", {"day": 2, "date": "2025-06-02", "timeSlots": [None]}],
            "participants": [None, 5, {"userId": "u1", "registeredDaySlots": "all"}],
        })
        assert activity.time_slots == [TimeWindow("08:00", "10:00")]
        assert [(d.day, d.time_slots) for d in activity.schedule] == [(2, [])]
        assert [p.user_id for p in activity.participants] == ["u1"]
        assert activity.participants[0].registered_day_slots == []

    def test_non_list_collections_ignored(self):
        activity = Activity.from_api({"_id": "a3", "timeSlots": {"startTime": "08:00"}, "participants": "u1"})
        assert activity.time_slots == []
        assert activity.participants == []
