"""File-based activity store adapter."""

import json
from pathlib import Path

from clubdesk.core.activity import Activity, extract_id


class FileActivityStore:
    """
    Read-only activity store backed by a JSON export.

    Implements ActivityRepository protocol. The file holds either a list of
    activities or the API envelope ``{"data": {"activities": [...]}}``.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def _load_raw(self) -> list[dict]:
        data = json.loads(self.path.read_text())
        if isinstance(data, dict):
            data = data.get("data", data)
            if isinstance(data, dict):
                data = data.get("activities", [])
        return [a for a in data if isinstance(a, dict)]

    def fetch_activities(self) -> list[Activity]:
        """Read all activities from the file."""
        return [Activity.from_api(a) for a in self._load_raw()]

    def fetch_activity(self, activity_id: str) -> Activity | None:
        """Find one activity by id."""
        target = extract_id(activity_id)
        for raw in self._load_raw():
            if extract_id(raw.get("_id") or raw.get("id")) == target:
                return Activity.from_api(raw)
        return None
