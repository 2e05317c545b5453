"""External calendar sync interface."""

from datetime import date
from typing import Protocol

from dayslot.core.calendar import Event


class CalendarSync(Protocol):
    """Interface for a third-party calendar that mirrors planned events."""

    def fetch_day(self, target_date: date) -> list[Event]:
        """Fetch events for a specific date."""
        ...

    def create_event(self, event: Event) -> str | None:
        """Push an event. Returns the external id, if one was assigned."""
        ...

    def delete_event(self, external_id: str) -> None:
        """Remove a previously pushed event by its external id."""
        ...
