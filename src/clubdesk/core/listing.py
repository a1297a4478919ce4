"""Filter and count combinators for activity listings - pure, no I/O."""

from dataclasses import dataclass
from datetime import datetime

from .activity import Activity, ApprovalStatus, InvalidInputError
from .participation import ParticipationView, evaluate, find_participant
from .temporal import Classification, TemporalStatus, classify

ALL = "all"
BUCKETS = (ALL,) + tuple(s.value for s in TemporalStatus)
APPROVAL_FILTERS = (ALL,) + tuple(s.value for s in ApprovalStatus)


@dataclass(frozen=True)
class ListingEntry:
    """An activity with its classification and the current user's view, if any."""

    activity: Activity
    classification: Classification
    view: ParticipationView | None = None


def build_entries(
    activities: list[Activity],
    current_user_id: str | None = None,
    now: datetime | None = None,
) -> list[ListingEntry]:
    """
    Classify each activity once and evaluate the current user's entry.

    Pure function - no I/O.
    """
    now = now or datetime.now()
    entries = []
    for activity in activities:
        classification = classify(activity, now)
        participant = find_participant(activity, current_user_id) if current_user_id else None
        view = None
        if participant is not None:
            view = evaluate(participant, activity, current_user_id, now, classification)
        entries.append(ListingEntry(activity, classification, view))
    return entries


def _check(value: str, allowed: tuple[str, ...], what: str) -> str:
    value = (value or ALL).lower()
    if value not in allowed:
        raise InvalidInputError(f"Unknown {what} filter {value!r}, expected one of {', '.join(allowed)}")
    return value


def filter_entries(
    entries: list[ListingEntry],
    bucket: str = ALL,
    approval: str = ALL,
) -> list[ListingEntry]:
    """
    Keep entries in a temporal bucket and with an approval status.

    Entries without a participation view never match a specific approval
    status.
    """
    bucket = _check(bucket, BUCKETS, "temporal")
    approval = _check(approval, APPROVAL_FILTERS, "approval")

    def matches(e: ListingEntry) -> bool:
        if bucket != ALL and e.classification.status.value != bucket:
            return False
        if approval == ALL:
            return True
        return e.view is not None and e.view.effective_approval_status.value == approval

    return [e for e in entries if matches(e)]


def count_by_bucket(entries: list[ListingEntry]) -> dict[str, int]:
    """Entries per temporal bucket. Pass the unfiltered list so tab counts stay stable."""
    counts = {b: 0 for b in BUCKETS}
    counts[ALL] = len(entries)
    for e in entries:
        counts[e.classification.status.value] += 1
    return counts


def count_by_approval(entries: list[ListingEntry]) -> dict[str, int]:
    """Entries per approval status of the current user's view."""
    counts = {a: 0 for a in APPROVAL_FILTERS}
    for e in entries:
        if e.view is None:
            continue
        counts[ALL] += 1
        counts[e.view.effective_approval_status.value] += 1
    return counts


def my_registrations(entries: list[ListingEntry]) -> list[ListingEntry]:
    """Entries the current user is actively registered for."""
    return [e for e in entries if e.view is not None and e.view.is_active_registration]
