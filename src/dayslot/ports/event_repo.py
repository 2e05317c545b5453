"""Event repository interface."""

from datetime import date
from typing import Protocol

from dayslot.core.calendar import Event


class EventRepository(Protocol):
    """Interface for durable calendar events."""

    def fetch_day(self, target_date: date) -> list[Event]:
        """Fetch events for a specific date."""
        ...

    def create_event(self, event: Event) -> Event:
        """Persist a new event and return it."""
        ...

    def set_external_id(self, event_id: str, external_id: str) -> None:
        """Record the id an external calendar assigned to an event."""
        ...

    def delete_event(self, event_id: str) -> Event | None:
        """Remove an event. Returns the removed event, or None if unknown."""
        ...
