"""Pure time-window helpers - no I/O dependencies."""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo

logger = logging.getLogger(__name__)

_HHMM_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def parse_hhmm(value: str) -> time:
    """Parse an ``HH:MM`` string into a time. Raises ValueError if malformed."""
    match = _HHMM_PATTERN.match((value or "").strip())
    if not match:
        raise ValueError(f"Invalid time: {value!r}")
    return time(int(match.group(1)), int(match.group(2)))


@dataclass(frozen=True)
class TimeWindow:
    """A period within a single calendar day."""

    start_time: str
    end_time: str
    is_active: bool = True
    name: str = ""

    def bounds(self) -> tuple[time, time]:
        """Parsed (start, end). Raises ValueError if malformed or inverted."""
        start = parse_hhmm(self.start_time)
        end = parse_hhmm(self.end_time)
        if end < start:
            raise ValueError(f"Window ends before it starts: {self.start_time}-{self.end_time}")
        return start, end

    def format(self) -> str:
        return f"{self.start_time}-{self.end_time}"

    def overlaps(self, other: "TimeWindow") -> bool:
        """Check if two windows overlap. Windows that only touch do not."""
        start, end = self.bounds()
        other_start, other_end = other.bounds()
        return start < other_end and other_start < end

    @classmethod
    def from_api(cls, data: dict) -> "TimeWindow | None":
        if not isinstance(data, dict):
            logger.debug(f"Skipping malformed time window {data!r}")
            return None
        is_active = data.get("isActive")
        return cls(
            start_time=str(data.get("startTime") or ""),
            end_time=str(data.get("endTime") or ""),
            is_active=True if is_active is None else bool(is_active),
            name=data.get("name") or "",
        )


def active_windows(windows: list[TimeWindow]) -> list[TimeWindow]:
    """Only the windows that take part in classification."""
    return [w for w in windows if w.is_active]


def active_bounds(windows: list[TimeWindow]) -> tuple[time, time] | None:
    """
    Earliest start and latest end across active windows.

    Returns None when there is no active window. Raises ValueError if any
    active window is malformed.
    """
    bounds = [w.bounds() for w in active_windows(windows)]
    if not bounds:
        return None
    return min(b[0] for b in bounds), max(b[1] for b in bounds)


def combine(day: date, at: time, tz: tzinfo | None = None) -> datetime:
    """Absolute instant for a time of day on a given date."""
    return datetime.combine(day, at, tzinfo=tz)
