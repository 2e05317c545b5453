"""Adapters - I/O implementations of ports."""

from .file_store import FileStore, StoreError
from .google_calendar import GoogleCalendarAdapter

__all__ = [
    "FileStore",
    "StoreError",
    "GoogleCalendarAdapter",
]
