"""Pure dashboard assembly and formatting logic - no I/O dependencies."""

from dataclasses import dataclass

from .activity import ApprovalStatus, Participant
from .listing import (
    ALL,
    ListingEntry,
    count_by_approval,
    count_by_bucket,
    filter_entries,
)
from .participation import ParticipationView, approval_counts

_STATUS_LABELS = {
    "upcoming": "Upcoming",
    "ongoing": "Ongoing",
    "past": "Past",
}


@dataclass
class DashboardData:
    """Assembled dashboard data ready for formatting."""

    bucket: str
    approval: str
    bucket_counts: dict[str, int]
    approval_counts: dict[str, int]
    pending_participants: int
    entries: list[ListingEntry]


def assemble_dashboard(
    entries: list[ListingEntry],
    bucket: str = ALL,
    approval: str = ALL,
) -> DashboardData:
    """
    Assemble dashboard data from classified entries.

    Pure function - no I/O. Counts are taken before filtering.
    """
    pending = sum(approval_counts(e.activity)[ApprovalStatus.PENDING] for e in entries)
    return DashboardData(
        bucket=bucket,
        approval=approval,
        bucket_counts=count_by_bucket(entries),
        approval_counts=count_by_approval(entries),
        pending_participants=pending,
        entries=filter_entries(entries, bucket, approval),
    )


def format_slot_summary(summary: dict[int, list[str]]) -> str:
    """e.g. "Day 1: Morning, Afternoon; Day 2: Evening"."""
    return "; ".join(f"Day {day}: {', '.join(slots)}" for day, slots in summary.items())


def format_activity_line(entry: ListingEntry) -> str:
    """
    Format a single activity for display.

    Pure function - no I/O.
    """
    activity = entry.activity
    status = _STATUS_LABELS[entry.classification.status.value]
    if entry.classification.progress_percent is not None:
        status = f"{status} {entry.classification.progress_percent}%"

    when = activity.date.isoformat() if activity.date else "no date"
    if activity.is_multi_day and activity.end_date:
        when = f"{when} to {activity.end_date.isoformat()}"

    line = f"- [{status}] {activity.name} ({when})"
    view = entry.view
    if view is not None:
        line += f" - {view.effective_approval_status.value}"
        if view.registered_slot_summary:
            line += f", {format_slot_summary(view.registered_slot_summary)}"
    return line


def format_participant_line(participant: Participant, view: ParticipationView) -> str:
    """Format one participant entry with the actions available on it."""
    actions = [
        name
        for name, allowed in (
            ("approve", view.can_approve),
            ("reject", view.can_reject),
            ("remove", view.can_remove),
            ("check-in", view.can_check_in),
        )
        if allowed
    ]
    line = f"- {participant.name or participant.user_id} <{participant.email}> [{view.effective_approval_status.value}]"
    if view.registered_slot_summary:
        line += f" {format_slot_summary(view.registered_slot_summary)}"
    if view.rejection_reason:
        line += f" (reason: {view.rejection_reason})"
    if actions:
        line += f" actions: {', '.join(actions)}"
    return line


def format_dashboard(data: DashboardData) -> str:
    """
    Format dashboard data as plain text.

    Pure function - no I/O.
    """
    tabs = " | ".join(f"{name}: {count}" for name, count in data.bucket_counts.items())
    lines = [f"Activities - {tabs}"]
    if data.approval_counts[ALL]:
        mine = " | ".join(f"{name}: {count}" for name, count in data.approval_counts.items())
        lines.append(f"My registrations - {mine}")
    lines.append(f"Participants awaiting approval: {data.pending_participants}")
    lines.append("")
    lines.extend(format_activity_line(e) for e in data.entries)
    if not data.entries:
        lines.append("No activities.")
    return "\n".join(lines)
