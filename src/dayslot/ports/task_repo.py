"""Task repository interface."""

from typing import Protocol

from dayslot.core.tasks import Task


class TaskRepository(Protocol):
    """Interface for the backlog of unplaced tasks."""

    def fetch_backlog(self) -> list[Task]:
        """Fetch all backlog tasks."""
        ...

    def add_task(self, task: Task) -> None:
        """Add a task to the backlog."""
        ...

    def remove_task(self, task_id: str) -> None:
        """Remove a task from the backlog once it has been placed."""
        ...
