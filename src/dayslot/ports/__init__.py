"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import TaskRepository
from .event_repo import EventRepository
from .calendar_sync import CalendarSync
from .plan_store import PlanStore
from .scheduling_strategy import SchedulingStrategy

__all__ = [
    "TaskRepository",
    "EventRepository",
    "CalendarSync",
    "PlanStore",
    "SchedulingStrategy",
]
