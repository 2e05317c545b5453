"""Scheduling strategy interface."""

from datetime import date, datetime
from typing import Protocol

from dayslot.core.calendar import Event
from dayslot.core.plan import SchedulePlan
from dayslot.core.tasks import Task


class SchedulingStrategy(Protocol):
    """Interface for anything that turns a backlog into a day plan.

    The plan's strategy tag records which implementation produced it.
    """

    name: str

    def schedule(
        self,
        tasks: list[Task],
        events: list[Event],
        target_date: date | None = None,
        now: datetime | None = None,
    ) -> SchedulePlan:
        """Plan tasks around events on target_date. Must not mutate inputs."""
        ...
