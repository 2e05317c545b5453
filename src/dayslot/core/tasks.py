"""Pure task domain logic - no I/O dependencies."""

import uuid
from dataclasses import dataclass

DEFAULT_DURATION = 30
DEFAULT_PRIORITY = 999


@dataclass
class Task:
    """A backlog task waiting to be placed on the calendar."""

    id: str
    title: str
    duration: int
    priority: int
    time_preference: str | None = None
    location: str | None = None

    @property
    def is_schedulable(self) -> bool:
        return self.duration > 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "duration": self.duration,
            "priority": self.priority,
            "time_preference": self.time_preference,
            "location": self.location,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """
        Create Task from an extraction or storage payload.

        Durations snap to 5 minutes (minimum 5); a missing priority sorts last.
        """
        raw_duration = data.get("duration") or DEFAULT_DURATION
        duration = max(5, round(raw_duration / 5) * 5)
        priority = data.get("priority")
        return cls(
            id=data.get("id") or uuid.uuid4().hex,
            title=data.get("title", ""),
            duration=duration,
            priority=DEFAULT_PRIORITY if priority is None else int(priority),
            time_preference=data.get("time_preference") or data.get("timePreference") or None,
            location=data.get("location") or None,
        )


def sort_by_priority(tasks: list[Task]) -> list[Task]:
    """
    Sort tasks by priority, most urgent (lowest number) first.

    Stable: equal priorities keep their input order. Pure function - no I/O.
    """
    return sorted(tasks, key=lambda t: t.priority)


def find_task(tasks: list[Task], task_id: str) -> Task | None:
    """Look up a task by id."""
    for task in tasks:
        if task.id == task_id:
            return task
    return None
