"""Shared workflow layer between the CLI and the watcher.

Each function fetches from a repository, runs the pure core over the
snapshot, and returns plain data. Nothing here is cached between calls.
"""

import logging
from datetime import datetime

from .adapters.club_api import ClubApiAdapter
from .adapters.file_store import FileActivityStore
from .config import Config
from .core.activity import InvalidInputError, Participant
from .core.dashboard import DashboardData, assemble_dashboard
from .core.listing import ALL, APPROVAL_FILTERS, build_entries, my_registrations
from .core.participation import ParticipationView, SlotConflict, evaluate, find_slot_conflicts
from .core.temporal import classify
from .ports.activity_repo import ActivityRepository

logger = logging.getLogger(__name__)


def get_repository(config: Config, activities_file: str | None = None) -> ActivityRepository:
    """Resolve the activity source: a JSON export if given, else the API."""
    path = activities_file or config.activities_file
    if path:
        return FileActivityStore(path)
    return ClubApiAdapter(config)


def build_dashboard(
    repo: ActivityRepository,
    user_id: str | None,
    bucket: str = ALL,
    approval: str = ALL,
    mine: bool = False,
    now: datetime | None = None,
) -> DashboardData:
    """Fetch activities and assemble the listing dashboard."""
    now = now or datetime.now()
    activities = repo.fetch_activities()
    entries = build_entries(activities, user_id, now)
    if mine:
        entries = my_registrations(entries)
    logger.debug(f"Classified {len(entries)} activities at {now.isoformat()}")
    return assemble_dashboard(entries, bucket, approval)


def participant_views(
    repo: ActivityRepository,
    activity_id: str,
    user_id: str | None = None,
    approval: str = ALL,
    now: datetime | None = None,
) -> list[tuple[Participant, ParticipationView]]:
    """Evaluate every participant entry of one activity, optionally by approval status."""
    approval = (approval or ALL).lower()
    if approval not in APPROVAL_FILTERS:
        raise InvalidInputError(f"Unknown approval filter {approval!r}")

    activity = repo.fetch_activity(activity_id)
    if activity is None:
        raise LookupError(f"Activity {activity_id} not found")

    now = now or datetime.now()
    classification = classify(activity, now)
    rows = [(p, evaluate(p, activity, user_id, now, classification)) for p in activity.participants]
    if approval != ALL:
        rows = [(p, v) for p, v in rows if v.effective_approval_status.value == approval]
    return rows


def slot_conflicts(
    repo: ActivityRepository,
    activity_id: str,
    user_id: str | None,
    day: int,
    slot: str,
) -> list[SlotConflict]:
    """Check whether picking a session would clash with the user's other registrations."""
    activity = repo.fetch_activity(activity_id)
    if activity is None:
        raise LookupError(f"Activity {activity_id} not found")
    return find_slot_conflicts(repo.fetch_activities(), user_id, activity, day, slot)
