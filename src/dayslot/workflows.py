"""Workflow layer between the CLI and the core.

Gathers inputs from the stores, runs a scheduling strategy, and commits the
resulting plan: persistence first, external calendar sync after.
"""

import logging
from datetime import date, datetime, timedelta, tzinfo

from .adapters.file_store import FileStore
from .adapters.google_calendar import GoogleCalendarAdapter
from .config import Config
from .core.calendar import Event, find_conflicts
from .core.plan import SchedulePlan
from .core.scheduler import GreedyIntervalScheduler
from .core.tasks import Task, find_task
from .ports import CalendarSync, EventRepository, PlanStore, SchedulingStrategy

logger = logging.getLogger(__name__)


class ApplyError(Exception):
    """Raised when a plan could only be partly saved."""

    def __init__(self, message: str, created: list[Event]):
        super().__init__(message)
        self.created = created


def get_store(config: Config) -> FileStore:
    """Resolve the data directory from config."""
    return FileStore(config.data_path)


def get_google_calendar(config: Config) -> GoogleCalendarAdapter:
    """Google Calendar adapter built from config."""
    return GoogleCalendarAdapter(
        config_folder=config.google_folder_path,
        calendar_id=config.google_calendar_id,
        client_secret_file=config.google_client_secret_file,
        timezone=config.timezone,
    )


def get_sync(config: Config) -> GoogleCalendarAdapter | None:
    """Google Calendar adapter, or None when sync is off."""
    if not config.calendar_sync:
        return None
    return get_google_calendar(config)


def gather_events(
    events_repo: EventRepository,
    sync: CalendarSync | None,
    target_date: date,
) -> list[Event]:
    """Local events for the day plus any external ones not already mirrored."""
    events = events_repo.fetch_day(target_date)

    if sync is not None:
        mirrored = {e.external_id for e in events if e.external_id}
        try:
            external = sync.fetch_day(target_date)
        except Exception as e:
            logger.warning(f"Calendar sync read failed, planning with local events only: {e}")
            external = []
        events.extend(e for e in external if not e.external_id or e.external_id not in mirrored)

    for first, second in find_conflicts(events):
        logger.debug(f"Existing events overlap: {first.title!r} and {second.title!r}")

    return events


def plan_day(
    tasks: list[Task],
    events: list[Event],
    target_date: date | None = None,
    now: datetime | None = None,
    strategy: SchedulingStrategy | None = None,
) -> SchedulePlan:
    """Run a scheduling strategy (greedy by default)."""
    strategy = strategy or GreedyIntervalScheduler()
    logger.debug(f"Planning {len(tasks)} tasks with the {strategy.name} strategy")
    return strategy.schedule(tasks, events, target_date=target_date, now=now)


def unscheduled_tasks(tasks: list[Task], plan: SchedulePlan) -> list[Task]:
    """Tasks the plan left out, in input order."""
    placed = set(plan.task_ids())
    return [t for t in tasks if t.id not in placed]


def apply_plan(
    plan: SchedulePlan,
    tasks: list[Task],
    store: PlanStore,
    sync: CalendarSync | None = None,
    tz: tzinfo | None = None,
) -> list[Event]:
    """
    Commit a plan: one durable event per assignment, then drop the task
    from the backlog.

    A persistence error stops the run and is re-raised as ApplyError,
    which carries the events saved before it. Sync is best-effort:
    failures are logged and never undo what was already stored.
    """
    created: list[Event] = []

    try:
        for assignment in plan:
            task = find_task(tasks, assignment.task_id)
            if task is None:
                logger.warning(f"Plan references unknown task {assignment.task_id}; skipping")
                continue

            start = assignment.start_datetime(plan.target_date, tz)
            event = Event(
                title=task.title,
                start=start,
                end=start + timedelta(minutes=assignment.duration),
                location=task.location or "",
                source=plan.strategy,
                task_id=task.id,
            )
            created.append(store.create_event(event))
            store.remove_task(task.id)
    except Exception as e:
        message = f"Saved {len(created)} of {len(plan)} planned events before failing: {e}"
        logger.error(message)
        raise ApplyError(message, created) from e

    if sync is None:
        return created

    for event in created:
        try:
            external_id = sync.create_event(event)
        except Exception as e:
            logger.warning(f"Failed to sync {event.title!r} to external calendar: {e}")
            continue
        if external_id:
            event.external_id = external_id
            store.set_external_id(event.id, external_id)

    return created


def remove_event(
    event_id: str,
    store: EventRepository,
    sync: CalendarSync | None = None,
) -> Event | None:
    """
    Delete a placed event locally, then from the external calendar.

    Returns the removed event, or None if the id is unknown. The external
    delete is best-effort, like sync on apply. The task is not returned to
    the backlog.
    """
    event = store.delete_event(event_id)
    if event is None:
        return None

    if sync is not None and event.external_id:
        try:
            sync.delete_event(event.external_id)
        except Exception as e:
            logger.warning(f"Failed to delete {event.title!r} from external calendar: {e}")

    return event
