"""Functional core - pure business logic with no I/O."""

from .activity import (
    Activity,
    ApprovalStatus,
    DaySlot,
    InvalidInputError,
    Participant,
    ScheduleDay,
    SlotName,
    extract_id,
)
from .timewindow import TimeWindow, active_bounds, parse_hhmm
from .temporal import Classification, TemporalStatus, classify
from .participation import ParticipationView, SlotConflict, evaluate, find_participant, find_slot_conflicts
from .listing import ListingEntry, build_entries, count_by_bucket, filter_entries, my_registrations
from .dashboard import DashboardData, assemble_dashboard, format_dashboard

__all__ = [
    # Records
    "Activity",
    "ApprovalStatus",
    "DaySlot",
    "InvalidInputError",
    "Participant",
    "ScheduleDay",
    "SlotName",
    "extract_id",
    # Time windows
    "TimeWindow",
    "active_bounds",
    "parse_hhmm",
    # Temporal
    "Classification",
    "TemporalStatus",
    "classify",
    # Participation
    "ParticipationView",
    "SlotConflict",
    "evaluate",
    "find_participant",
    "find_slot_conflicts",
    # Listing
    "ListingEntry",
    "build_entries",
    "count_by_bucket",
    "filter_entries",
    "my_registrations",
    # Dashboard
    "DashboardData",
    "assemble_dashboard",
    "format_dashboard",
]
