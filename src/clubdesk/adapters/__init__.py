"""Adapters - I/O implementations of ports."""

from .club_api import ClubApiAdapter, AuthenticationError
from .file_store import FileActivityStore

__all__ = [
    "ClubApiAdapter",
    "AuthenticationError",
    "FileActivityStore",
]
