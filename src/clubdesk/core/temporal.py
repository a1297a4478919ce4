"""Temporal classification of activities - pure, no I/O.

An activity is Upcoming, Ongoing or Past according to the wall clock only.
The persisted ``status`` field on the record is deliberately ignored since
it is edited by hand and drifts from reality.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum

from .activity import Activity, InvalidInputError
from .timewindow import TimeWindow, active_bounds, combine

logger = logging.getLogger(__name__)


class TemporalStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    PAST = "past"


@dataclass(frozen=True)
class Classification:
    """Result of classify(). progress_percent is only set while inside the window."""

    status: TemporalStatus
    progress_percent: int | None = None


UPCOMING = Classification(TemporalStatus.UPCOMING)
PAST = Classification(TemporalStatus.PAST)


def windows_for_day(activity: Activity, today: date) -> list[TimeWindow]:
    """
    Time windows that apply to ``today``.

    Multi-day activities use the schedule entry for that date (its own
    windows, else the activity-level ones). No schedule entry means no
    windows.
    """
    if not activity.is_multi_day:
        return activity.time_slots
    schedule_day = activity.schedule_day_for(today)
    if schedule_day is None:
        return []
    return schedule_day.time_slots or activity.time_slots


def progress_percent(now: datetime, start: datetime, end: datetime) -> int | None:
    """Elapsed share of [start, end] as 0-100. None for a zero-length window."""
    total = (end - start).total_seconds()
    if total <= 0:
        return None
    elapsed = (now - start).total_seconds()
    return max(0, min(100, round(100 * elapsed / total)))


def classify(activity: Activity, now: datetime | None = None) -> Classification:
    """
    Classify an activity as upcoming, ongoing or past.

    Pure function - no I/O. Malformed dates (including an end date before
    the start date) or time windows degrade to Upcoming instead of raising.
    """
    if activity is None:
        raise InvalidInputError("activity is required")
    now = now or datetime.now()
    today = now.date()

    start_day = activity.date
    last_day = activity.last_date
    if start_day is None or last_day is None:
        logger.debug(f"Activity {activity.id!r} has no usable date, defaulting to upcoming")
        return UPCOMING
    if last_day < start_day:
        logger.debug(f"Activity {activity.id!r} ends before it starts, defaulting to upcoming")
        return UPCOMING

    if last_day < today:
        return PAST
    if start_day > today:
        return UPCOMING

    try:
        bounds = active_bounds(windows_for_day(activity, today))
    except ValueError as e:
        logger.debug(f"Activity {activity.id!r} has a malformed time window: {e}")
        return UPCOMING
    if bounds is None:
        return UPCOMING

    return _classify_within_day(activity, now, today, bounds)


def _classify_within_day(
    activity: Activity,
    now: datetime,
    today: date,
    bounds: tuple[time, time],
) -> Classification:
    start = combine(today, bounds[0], now.tzinfo)
    end = combine(today, bounds[1], now.tzinfo)

    # Between sessions of a multi-day activity it has started but is not over
    started_earlier = activity.is_multi_day and today > activity.date
    continues_later = activity.is_multi_day and today < activity.last_date

    if now < start:
        return Classification(TemporalStatus.ONGOING) if started_earlier else UPCOMING
    if now > end:
        return Classification(TemporalStatus.ONGOING) if continues_later else PAST
    return Classification(TemporalStatus.ONGOING, progress_percent(now, start, end))
