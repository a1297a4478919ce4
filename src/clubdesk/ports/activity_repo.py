"""Activity repository interface."""

from typing import Protocol

from clubdesk.core.activity import Activity


class ActivityRepository(Protocol):
    """Interface for fetching activity snapshots from any backend."""

    def fetch_activities(self) -> list[Activity]:
        """Fetch all activities visible to the current user."""
        ...

    def fetch_activity(self, activity_id: str) -> Activity | None:
        """Fetch one activity with its participants. None if not found."""
        ...
