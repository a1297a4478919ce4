"""Ports - interfaces/protocols for external dependencies."""

from .activity_repo import ActivityRepository

__all__ = [
    "ActivityRepository",
]
