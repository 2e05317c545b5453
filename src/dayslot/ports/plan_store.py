"""Combined backlog + event store interface."""

from typing import Protocol

from .event_repo import EventRepository
from .task_repo import TaskRepository


class PlanStore(TaskRepository, EventRepository, Protocol):
    """A store that can both create events and retire the tasks behind them."""
