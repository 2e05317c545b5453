"""File-based backlog and event storage adapter."""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Callable, TypeVar

from dayslot.core.calendar import Event, filter_events_by_date, sort_events_by_start
from dayslot.core.tasks import Task

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreError(Exception):
    """Raised when a store file cannot be read or written."""

    pass


class FileStore:
    """
    JSON file storage.

    Implements TaskRepository and EventRepository protocols. The backlog
    lives in backlog.json and placed events in events.json.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def backlog_path(self) -> Path:
        return self.data_dir / "backlog.json"

    @property
    def events_path(self) -> Path:
        return self.data_dir / "events.json"

    def _read(self, path: Path) -> list[dict]:
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            raise StoreError(f"Corrupt store file {path}: {e}") from e
        if not isinstance(data, list):
            raise StoreError(f"Expected a JSON list in {path}")
        return data

    def _load(self, path: Path, from_dict: Callable[[dict], T]) -> list[T]:
        items = self._read(path)
        try:
            return [from_dict(item) for item in items]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Bad entry in {path}: {e}") from e

    def _write(self, path: Path, items: list[dict]) -> None:
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(items, indent=2))
        tmp.replace(path)

    # Backlog

    def fetch_backlog(self) -> list[Task]:
        """Fetch all backlog tasks."""
        return self._load(self.backlog_path, Task.from_dict)

    def add_task(self, task: Task) -> None:
        """Add a task to the backlog, replacing any task with the same id."""
        items = [i for i in self._read(self.backlog_path) if i.get("id") != task.id]
        items.append(task.to_dict())
        self._write(self.backlog_path, items)

    def remove_task(self, task_id: str) -> None:
        """Remove a task from the backlog. Unknown ids are ignored."""
        items = self._read(self.backlog_path)
        remaining = [i for i in items if i.get("id") != task_id]
        if len(remaining) == len(items):
            logger.warning(f"Task {task_id} not in backlog")
            return
        self._write(self.backlog_path, remaining)

    # Events

    def fetch_events(self) -> list[Event]:
        return self._load(self.events_path, Event.from_dict)

    def fetch_day(self, target_date: date) -> list[Event]:
        """Fetch events for a specific date."""
        return sort_events_by_start(filter_events_by_date(self.fetch_events(), target_date))

    def create_event(self, event: Event) -> Event:
        """Persist a new event and return it."""
        items = self._read(self.events_path)
        items.append(event.to_dict())
        self._write(self.events_path, items)
        return event

    def set_external_id(self, event_id: str, external_id: str) -> None:
        """Record the id an external calendar assigned to an event."""
        items = self._read(self.events_path)
        for item in items:
            if item.get("id") == event_id:
                item["external_id"] = external_id
                self._write(self.events_path, items)
                return
        logger.warning(f"Event {event_id} not found; external id {external_id} not recorded")

    def delete_event(self, event_id: str) -> Event | None:
        """Remove an event. Returns the removed event, or None if unknown."""
        events = self.fetch_events()
        for event in events:
            if event.id == event_id:
                self._write(self.events_path, [e.to_dict() for e in events if e is not event])
                return event
        logger.warning(f"Event {event_id} not found")
        return None
