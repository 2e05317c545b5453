"""Scheduling output types."""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterator

from .calendar import format_minutes


@dataclass
class ScheduleAssignment:
    """A task placed at a start minute on the target day."""

    task_id: str
    start_minute: int
    duration: int

    @property
    def end_minute(self) -> int:
        return self.start_minute + self.duration

    @property
    def start_time(self) -> str:
        return format_minutes(self.start_minute)

    @property
    def end_time(self) -> str:
        return format_minutes(self.end_minute)

    def overlaps(self, other: "ScheduleAssignment") -> bool:
        return self.start_minute < other.end_minute and other.start_minute < self.end_minute

    def start_datetime(self, target_date: date, tz: tzinfo | None = None) -> datetime:
        midnight = datetime.combine(target_date, time(0, 0), tzinfo=tz)
        return midnight + timedelta(minutes=self.start_minute)

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration": self.duration,
        }


@dataclass
class SchedulePlan:
    """Ordered assignments for one day, tagged with the strategy that built them."""

    target_date: date
    assignments: list[ScheduleAssignment] = field(default_factory=list)
    strategy: str = "greedy"

    def __iter__(self) -> Iterator[ScheduleAssignment]:
        return iter(self.assignments)

    def __len__(self) -> int:
        return len(self.assignments)

    def task_ids(self) -> list[str]:
        return [a.task_id for a in self.assignments]

    def to_dicts(self) -> list[dict]:
        return [a.to_dict() for a in self.assignments]
