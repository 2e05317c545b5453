"""Pure calendar domain logic - no I/O dependencies."""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime

MINUTES_PER_DAY = 24 * 60


@dataclass
class Event:
    """An event already on the calendar."""

    title: str
    start: datetime
    end: datetime | None
    location: str = ""
    all_day: bool = False
    source: str = "local"
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    task_id: str | None = None
    external_id: str | None = None

    def format_time(self) -> str:
        """Format the event time for display."""
        if self.all_day:
            return "All day"
        return self.start.strftime("%H:%M")

    def duration_minutes(self) -> int | None:
        """Event duration in minutes, or None if no end time."""
        if not self.end:
            return None
        return int((self.end - self.start).total_seconds() / 60)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat() if self.end else None,
            "location": self.location,
            "all_day": self.all_day,
            "source": self.source,
            "task_id": self.task_id,
            "external_id": self.external_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        """Create Event from its stored JSON form."""
        return cls(
            id=data.get("id") or uuid.uuid4().hex,
            title=data.get("title", "Untitled"),
            start=datetime.fromisoformat(data["start"]),
            end=datetime.fromisoformat(data["end"]) if data.get("end") else None,
            location=data.get("location") or "",
            all_day=bool(data.get("all_day", False)),
            source=data.get("source") or "local",
            task_id=data.get("task_id"),
            external_id=data.get("external_id"),
        )


def minute_of_day(dt: datetime) -> int:
    """Minutes since midnight, seconds ignored."""
    return dt.hour * 60 + dt.minute


def format_minutes(minutes: int) -> str:
    """Format a minute-of-day offset as HH:MM."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_hhmm(value: str) -> int:
    """Parse "HH:MM" to minute-of-day. Raises ValueError on bad input."""
    hours, sep, minutes = value.strip().partition(":")
    if not sep:
        raise ValueError(f"Expected HH:MM, got {value!r}")
    h, m = int(hours), int(minutes)
    if not (0 <= h < 24 and 0 <= m < 60):
        raise ValueError(f"Time out of range: {value!r}")
    return h * 60 + m


def filter_events_by_date(
    events: list[Event],
    start_date: date,
    end_date: date | None = None,
) -> list[Event]:
    """
    Filter events to those within a date range.

    Pure function - no I/O.
    """
    end_date = end_date or start_date
    return [e for e in events if start_date <= e.start.date() <= end_date]


def sort_events_by_start(events: list[Event]) -> list[Event]:
    """Sort events by start time."""
    return sorted(events, key=lambda e: e.start)


def find_conflicts(events: list[Event]) -> list[tuple[Event, Event]]:
    """
    Find overlapping events.

    Returns list of (event1, event2) tuples that conflict.
    Pure function - no I/O.
    """
    conflicts = []
    sorted_events = sort_events_by_start(events)

    for i, e1 in enumerate(sorted_events):
        if e1.all_day or not e1.end:
            continue
        for e2 in sorted_events[i + 1 :]:
            if e2.all_day or not e2.end:
                continue
            # e2 starts after e1 ends - no more conflicts possible
            if e2.start >= e1.end:
                break
            conflicts.append((e1, e2))

    return conflicts
