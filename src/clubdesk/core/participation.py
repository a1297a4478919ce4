"""Participant approval lifecycle and registration view - pure, no I/O."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime

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
from .temporal import Classification, TemporalStatus, classify
from .timewindow import TimeWindow

logger = logging.getLogger(__name__)

# Only registrations on these activities can clash with a new session
CONFLICT_STATUSES = ("published", "ongoing")


@dataclass(frozen=True)
class ParticipationView:
    """Normalized view of one participant entry on one activity."""

    is_registered: bool
    effective_approval_status: ApprovalStatus
    temporal_status: TemporalStatus
    registered_slot_summary: dict[int, list[str]] = field(default_factory=dict)
    capacity_percent: int | None = None
    slot_completeness_percent: int | None = None
    meets_threshold: bool | None = None
    is_active_registration: bool = False
    can_unregister: bool = False
    can_approve: bool = False
    can_reject: bool = False
    can_remove: bool = False
    can_check_in: bool = False
    approved_by: str | None = None
    approved_at: datetime | None = None
    rejection_reason: str | None = None
    rejected_by: str | None = None
    rejected_at: datetime | None = None
    checked_in: bool = False


def summarize_slots(slots: list[DaySlot]) -> dict[int, list[str]]:
    """Group selected slots by day, labels in Morning/Afternoon/Evening order."""
    by_day: dict[int, set] = {}
    for s in slots:
        by_day.setdefault(s.day, set()).add(s.slot)
    return {
        day: [slot.label for slot in sorted(by_day[day], key=lambda s: s.order)]
        for day in sorted(by_day)
    }


def active_participant_count(activity: Activity) -> int:
    """Participants that count against capacity (removed ones are soft-deleted)."""
    return sum(1 for p in activity.participants if p.approval_status != ApprovalStatus.REMOVED)


def capacity_percent(activity: Activity) -> int | None:
    """Share of capacity used, or None when capacity is unbounded."""
    if not activity.max_participants or activity.max_participants <= 0:
        return None
    return round(100 * active_participant_count(activity) / activity.max_participants)


def slot_completeness_percent(participant: Participant, activity: Activity) -> int | None:
    """Selected sessions as a share of all sessions offered. None for single-day."""
    if not activity.is_multi_day:
        return None
    available = sum(d.available_slots() for d in activity.schedule)
    if available <= 0:
        return None
    picked: dict[int, set[SlotName]] = {}
    for s in participant.registered_day_slots:
        picked.setdefault(s.day, set()).add(s.slot)
    # Sessions on days missing from the schedule are not offered
    selected = sum(min(len(picked.pop(d.day, ())), d.available_slots()) for d in activity.schedule)
    return round(100 * selected / available)


def is_active_registration(participant: Participant, activity: Activity) -> bool:
    """
    Whether the entry counts as a registration in "my activities" views.

    Joining a multi-day activity and picking sessions are separate steps; an
    entry with no sessions picked yet is not an active registration.
    """
    if activity.is_multi_day:
        return bool(participant.registered_day_slots)
    return True


def find_participant(activity: Activity, user_id: str) -> Participant | None:
    """First participant entry matching a user id, after normalization."""
    target = extract_id(user_id)
    if not target:
        return None
    return next((p for p in activity.participants if p.user_id == target), None)


def approval_counts(activity: Activity) -> dict[ApprovalStatus, int]:
    """Number of participant entries per approval status."""
    counts = Counter(p.approval_status for p in activity.participants)
    return {status: counts.get(status, 0) for status in ApprovalStatus}


def evaluate(
    participant: Participant,
    activity: Activity,
    current_user_id: str | None,
    now: datetime | None = None,
    classification: Classification | None = None,
) -> ParticipationView:
    """
    Derive the participation view for one participant entry.

    Pure function - no I/O. Missing optional fields fall back to defaults;
    only a missing participant or activity raises InvalidInputError.
    Pass ``classification`` to reuse an existing classify() result.
    """
    if participant is None:
        raise InvalidInputError("participant is required")
    if activity is None:
        raise InvalidInputError("activity is required")

    status = ApprovalStatus.parse(participant.approval_status)
    temporal = (classification or classify(activity, now)).status
    user_id = extract_id(current_user_id)
    is_registered = bool(user_id) and participant.user_id == user_id

    completeness = slot_completeness_percent(participant, activity)
    meets = None if completeness is None else completeness >= activity.registration_threshold
    summary = summarize_slots(participant.registered_day_slots) if activity.is_multi_day else {}
    closed = status in (ApprovalStatus.REJECTED, ApprovalStatus.REMOVED)

    return ParticipationView(
        is_registered=is_registered,
        effective_approval_status=status,
        temporal_status=temporal,
        registered_slot_summary=summary,
        capacity_percent=capacity_percent(activity),
        slot_completeness_percent=completeness,
        meets_threshold=meets,
        is_active_registration=is_registered and is_active_registration(participant, activity),
        can_unregister=temporal == TemporalStatus.UPCOMING and not closed,
        can_approve=status == ApprovalStatus.PENDING,
        can_reject=status == ApprovalStatus.PENDING,
        can_remove=status != ApprovalStatus.REMOVED,
        can_check_in=temporal == TemporalStatus.ONGOING and status == ApprovalStatus.APPROVED,
        approved_by=participant.approved_by,
        approved_at=participant.approved_at,
        rejection_reason=participant.rejection_reason,
        rejected_by=participant.rejected_by,
        rejected_at=participant.rejected_at,
        checked_in=participant.checked_in,
    )


@dataclass(frozen=True)
class SlotConflict:
    """A registration on another activity that clashes with a session.

    ``day`` is the day number on the other activity (1 for single-day ones).
    """

    activity: Activity
    day: int
    slot: SlotName
    date: date
    start_time: str = ""
    end_time: str = ""


def _schedule_day(activity: Activity, day: int) -> ScheduleDay | None:
    return next((d for d in activity.schedule if d.day == day), None)


def _day_date(activity: Activity, day: int) -> date | None:
    if not activity.is_multi_day:
        return activity.date
    scheduled = _schedule_day(activity, day)
    return scheduled.date if scheduled else None


def _day_windows(activity: Activity, day: int) -> list[TimeWindow]:
    scheduled = _schedule_day(activity, day) if activity.is_multi_day else None
    if scheduled and scheduled.time_slots:
        return scheduled.time_slots
    return activity.time_slots


def _slot_window(windows: list[TimeWindow], slot: SlotName) -> TimeWindow | None:
    return next((w for w in windows if w.is_active and slot.matches(w)), None)


def _usable(window: TimeWindow, activity: Activity) -> bool:
    try:
        window.bounds()
    except ValueError as e:
        logger.debug(f"Ignoring malformed window on activity {activity.id!r}: {e}")
        return False
    return True


def _times(window: TimeWindow | None) -> tuple[str, str]:
    return (window.start_time, window.end_time) if window else ("", "")


def _multi_day_conflict(
    other: Activity,
    participant: Participant,
    when: date,
    slot: SlotName,
    session: TimeWindow | None,
) -> SlotConflict | None:
    for picked in participant.registered_day_slots:
        if picked.slot != slot or _day_date(other, picked.day) != when:
            continue
        window = _slot_window(_day_windows(other, picked.day), slot) or session
        return SlotConflict(other, picked.day, slot, when, *_times(window))
    return None


def _single_day_conflict(
    other: Activity,
    when: date,
    slot: SlotName,
    session: TimeWindow | None,
) -> SlotConflict | None:
    if other.date != when:
        return None
    windows = [w for w in other.time_slots if w.is_active and _usable(w, other)]
    if session is None or not windows:
        return SlotConflict(other, 1, slot, when, *_times(session))

    window = next((w for w in windows if session.overlaps(w)), None)
    if window is None:
        return None
    return SlotConflict(other, 1, slot, when, window.start_time, window.end_time)


def find_slot_conflicts(
    activities: list[Activity],
    user_id: str | None,
    activity: Activity,
    day: int,
    slot: SlotName | str,
) -> list[SlotConflict]:
    """
    Find the user's other registrations that clash with one session.

    A multi-day registration clashes when the user picked the same session on
    the same calendar date. A single-day activity clashes when it falls on that
    date and one of its active windows overlaps the session's window; if either
    side has no usable window, the shared date is enough.

    Pure function - no I/O. Skips the activity itself, activities that are not
    published or ongoing, and rejected or removed entries.
    """
    if activity is None:
        raise InvalidInputError("activity is required")
    if not isinstance(slot, SlotName):
        try:
            slot = SlotName(str(slot).strip().lower())
        except ValueError:
            raise InvalidInputError(f"Unknown slot {slot!r}") from None

    target = extract_id(user_id)
    when = _day_date(activity, day)
    if not target or when is None:
        return []

    session = _slot_window(_day_windows(activity, day), slot)
    if session is not None and not _usable(session, activity):
        session = None

    conflicts = []
    for other in activities:
        if other is None or other.id == activity.id:
            continue
        if (other.status or "").lower() not in CONFLICT_STATUSES:
            continue
        participant = find_participant(other, target)
        if participant is None:
            continue
        status = ApprovalStatus.parse(participant.approval_status)
        if status in (ApprovalStatus.REJECTED, ApprovalStatus.REMOVED):
            continue

        if other.is_multi_day:
            conflict = _multi_day_conflict(other, participant, when, slot, session)
        else:
            conflict = _single_day_conflict(other, when, slot, session)
        if conflict is not None:
            conflicts.append(conflict)

    logger.debug(f"{len(conflicts)} conflict(s) for day {day} {slot.value} on activity {activity.id!r}")
    return conflicts
