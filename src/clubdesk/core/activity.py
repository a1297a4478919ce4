"""Activity and participant records - read-only snapshots of backend data."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from .timewindow import TimeWindow

logger = logging.getLogger(__name__)

DEFAULT_REGISTRATION_THRESHOLD = 80


class InvalidInputError(ValueError):
    """Raised when a required argument is missing (caller bug, not bad data)."""

    pass


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    REMOVED = "removed"

    @classmethod
    def parse(cls, value) -> "ApprovalStatus":
        """Parse a raw status, defaulting to PENDING when absent or unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            if value:
                logger.debug(f"Unknown approval status {value!r}, treating as pending")
            return cls.PENDING


class SlotName(str, Enum):
    """Session of a day. Declaration order is the display order."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def order(self) -> int:
        return list(SlotName).index(self)

    def matches(self, window: TimeWindow) -> bool:
        """Whether a named time window is this session."""
        name = (window.name or "").strip().lower()
        return name in (self.value, SLOT_WINDOW_NAMES[self].lower())


# Window names the backend gives each session's time slot
SLOT_WINDOW_NAMES = {
    SlotName.MORNING: "Buổi Sáng",
    SlotName.AFTERNOON: "Buổi Chiều",
    SlotName.EVENING: "Buổi Tối",
}


def extract_id(ref) -> str:
    """
    Normalize a user reference to a trimmed string identifier.

    The backend returns either a bare id or a populated object
    (``{"_id": ...}``, ``{"$oid": ...}``, ``{"id": ...}``).
    """
    if ref is None:
        return ""
    if isinstance(ref, dict):
        for key in ("_id", "$oid", "id"):
            if ref.get(key) is not None:
                return extract_id(ref[key])
        return ""
    return str(ref).strip()


def parse_day(value) -> date | None:
    """Parse a date, ISO timestamp or date-like value. None if unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip().split("T")[0])
    except ValueError:
        logger.debug(f"Unparseable date {value!r}")
        return None


def _parse_timestamp(value) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f"Unparseable timestamp {value!r}")
        return None


def _as_list(value, what: str) -> list:
    if isinstance(value, list):
        return value
    if value:
        logger.debug(f"Ignoring non-list {what} {value!r}")
    return []


def _parse_windows(raw) -> list[TimeWindow]:
    windows = [TimeWindow.from_api(w) for w in _as_list(raw, "timeSlots")]
    return [w for w in windows if w is not None]


@dataclass(frozen=True)
class DaySlot:
    """One session a participant picked on a day of a multi-day activity."""

    day: int
    slot: SlotName

    @classmethod
    def from_api(cls, data: dict) -> "DaySlot | None":
        try:
            return cls(day=int(data["day"]), slot=SlotName(str(data["slot"]).lower()))
        except (KeyError, TypeError, ValueError):
            logger.debug(f"Skipping malformed day slot {data!r}")
            return None


@dataclass(frozen=True)
class ScheduleDay:
    """A calendar day of a multi-day activity."""

    day: int
    date: date | None
    time_slots: list[TimeWindow] = field(default_factory=list)

    def available_slots(self) -> int:
        """Number of sessions offered on this day (all three if none declared)."""
        if not self.time_slots:
            return len(SlotName)
        return sum(1 for w in self.time_slots if w.is_active)

    @classmethod
    def from_api(cls, data: dict, index: int = 0) -> "ScheduleDay | None":
        if not isinstance(data, dict):
            logger.debug(f"Skipping malformed schedule day {data!r}")
            return None
        try:
            day = int(data.get("day", index + 1))
        except (TypeError, ValueError):
            day = index + 1
        return cls(
            day=day,
            date=parse_day(data.get("date")),
            time_slots=_parse_windows(data.get("timeSlots")),
        )


@dataclass
class Participant:
    """A participant entry on an activity."""

    user_ref: str | dict | None
    name: str = ""
    email: str = ""
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    registered_day_slots: list[DaySlot] = field(default_factory=list)
    approved_by: str | None = None
    approved_at: datetime | None = None
    rejection_reason: str | None = None
    rejected_by: str | None = None
    rejected_at: datetime | None = None
    removed_by: str | None = None
    removed_at: datetime | None = None
    joined_at: datetime | None = None
    checked_in: bool = False

    @property
    def user_id(self) -> str:
        return extract_id(self.user_ref)

    @classmethod
    def from_api(cls, data: dict) -> "Participant | None":
        if not isinstance(data, dict):
            logger.debug(f"Skipping malformed participant entry {data!r}")
            return None
        raw_slots = _as_list(data.get("registeredDaySlots"), "registeredDaySlots")
        slots = [DaySlot.from_api(s) for s in raw_slots]
        return cls(
            user_ref=data.get("userId"),
            name=data.get("name") or "",
            email=data.get("email") or "",
            approval_status=ApprovalStatus.parse(data.get("approvalStatus")),
            registered_day_slots=[s for s in slots if s is not None],
            approved_by=extract_id(data.get("approvedBy")) or None,
            approved_at=_parse_timestamp(data.get("approvedAt")),
            rejection_reason=data.get("rejectionReason"),
            rejected_by=extract_id(data.get("rejectedBy")) or None,
            rejected_at=_parse_timestamp(data.get("rejectedAt")),
            removed_by=extract_id(data.get("removedBy")) or None,
            removed_at=_parse_timestamp(data.get("removedAt")),
            joined_at=_parse_timestamp(data.get("joinedAt")),
            checked_in=bool(data.get("checkedIn", False)),
        )


@dataclass
class Activity:
    """An activity snapshot. The core reads it and never mutates it."""

    id: str
    name: str
    date: date | None
    end_date: date | None = None
    time_slots: list[TimeWindow] = field(default_factory=list)
    schedule: list[ScheduleDay] = field(default_factory=list)
    max_participants: int | None = None
    registration_threshold: int = DEFAULT_REGISTRATION_THRESHOLD
    status: str = ""
    activity_type: str = "single_day"
    participants: list[Participant] = field(default_factory=list)

    @property
    def is_multi_day(self) -> bool:
        if self.activity_type == "multiple_days":
            return True
        return bool(self.end_date and self.date and self.end_date > self.date)

    @property
    def last_date(self) -> date | None:
        """Day after which the activity is over."""
        if self.is_multi_day and self.end_date:
            return self.end_date
        return self.date

    def schedule_day_for(self, target: date) -> ScheduleDay | None:
        """The schedule entry covering a calendar date, if any."""
        return next((d for d in self.schedule if d.date == target), None)

    @classmethod
    def from_api(cls, data: dict) -> "Activity":
        """Create Activity from the club backend's JSON shape."""
        max_participants = data.get("maxParticipants")
        try:
            max_participants = int(max_participants) if max_participants is not None else None
        except (TypeError, ValueError):
            max_participants = None

        threshold = data.get("registrationThreshold")
        try:
            threshold = max(0, min(100, int(threshold)))
        except (TypeError, ValueError):
            threshold = DEFAULT_REGISTRATION_THRESHOLD

        raw_schedule = _as_list(data.get("schedule"), "schedule")
        raw_participants = _as_list(data.get("participants"), "participants")
        schedule = [ScheduleDay.from_api(d, i) for i, d in enumerate(raw_schedule)]
        participants = [Participant.from_api(p) for p in raw_participants]

        return cls(
            id=extract_id(data.get("_id") or data.get("id")),
            name=data.get("name") or "",
            date=parse_day(data.get("date") or data.get("startDate")),
            end_date=parse_day(data.get("endDate")),
            time_slots=_parse_windows(data.get("timeSlots")),
            schedule=[d for d in schedule if d is not None],
            max_participants=max_participants,
            registration_threshold=threshold,
            status=data.get("status") or "",
            activity_type=data.get("type") or "single_day",
            participants=[p for p in participants if p is not None],
        )
