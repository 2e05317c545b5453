"""
Greedy same-day scheduler.

Places pinned tasks at their exact clock time first, then walks the remaining
tasks in priority order and drops each into the earliest free 15-minute-aligned
slot. Pure logic - no I/O, no state kept between calls.
"""

import logging
import math
from datetime import date, datetime

from .calendar import Event, format_minutes, minute_of_day
from .occupancy import IntervalOccupancyTracker
from .plan import ScheduleAssignment, SchedulePlan
from .preferences import WORK_DAY_START, TimePreferenceParser
from .tasks import Task

logger = logging.getLogger(__name__)

WORK_END = 22 * 60
SLOT_STEP = 15
BUFFER_MINUTES = 5


class SchedulingInputError(ValueError):
    """Raised when the scheduler is called with structurally invalid input."""

    pass


def round_up(minutes: int, step: int = SLOT_STEP) -> int:
    """Round a minute offset up to the next multiple of step."""
    return math.ceil(minutes / step) * step


def work_start_for(target_date: date, now: datetime) -> int:
    """Earliest start minute: rounded-up current time today, 08:00 otherwise."""
    if target_date == now.date():
        return round_up(minute_of_day(now))
    return WORK_DAY_START


def schedule_tasks(
    tasks: list[Task],
    events: list[Event],
    target_date: date | None = None,
    now: datetime | None = None,
) -> SchedulePlan:
    """
    Assign start times to as many tasks as fit on target_date.

    Args:
        tasks: Backlog tasks, any order
        events: Existing events; those not on target_date are ignored
        target_date: Day to plan (defaults to now's date)
        now: Current time (defaults to the wall clock)

    Returns:
        SchedulePlan with pinned assignments first, then flexible ones,
        each group in commit order. Tasks that do not fit are left out.
    """
    if tasks is None:
        raise SchedulingInputError("tasks is required")
    if events is None:
        raise SchedulingInputError("events is required")

    now = now or datetime.now()
    target_date = target_date or now.date()

    work_start = work_start_for(target_date, now)
    floor = work_start if target_date == now.date() else 0
    occupancy = IntervalOccupancyTracker.from_events(events, target_date)
    plan = SchedulePlan(target_date=target_date, strategy=GreedyIntervalScheduler.name)

    parser = TimePreferenceParser()
    pinned: list[tuple[Task, int]] = []
    flexible: list[tuple[Task, int | None]] = []
    for task in tasks:
        pref = parser.parse(task.time_preference)
        if pref and pref.exact:
            pinned.append((task, pref.anchor_minute))
        else:
            flexible.append((task, pref.anchor_minute if pref else None))

    for task, anchor in pinned:
        end = anchor + task.duration
        if not task.is_schedulable or anchor < floor or end > WORK_END:
            logger.debug(f"Dropping pinned task {task.id}: {format_minutes(anchor)} is outside the work window")
            continue
        if occupancy.conflicts(anchor, end):
            logger.debug(f"Dropping pinned task {task.id}: {format_minutes(anchor)} is taken")
            continue
        plan.assignments.append(ScheduleAssignment(task.id, anchor, task.duration))
        occupancy.insert(anchor, end)

    cursor = work_start
    for task, anchor in sorted(flexible, key=lambda pair: pair[0].priority):
        if not task.is_schedulable:
            logger.debug(f"Skipping task {task.id}: duration {task.duration} is not positive")
            continue

        search_start = round_up(max(cursor, anchor if anchor is not None else cursor))
        placed = False
        while search_start + task.duration <= WORK_END:
            end = search_start + task.duration
            if not occupancy.conflicts(search_start, end):
                plan.assignments.append(ScheduleAssignment(task.id, search_start, task.duration))
                occupancy.insert(search_start, end)
                cursor = end + BUFFER_MINUTES
                placed = True
                break
            search_start += SLOT_STEP

        if not placed:
            logger.debug(f"No room left for task {task.id}; stopping")
            break

    logger.info(f"Scheduled {len(plan)} of {len(tasks)} tasks on {target_date.isoformat()}")
    return plan


class GreedyIntervalScheduler:
    """Deterministic scheduling strategy. Implements SchedulingStrategy."""

    name = "greedy"

    def schedule(
        self,
        tasks: list[Task],
        events: list[Event],
        target_date: date | None = None,
        now: datetime | None = None,
    ) -> SchedulePlan:
        return schedule_tasks(tasks, events, target_date=target_date, now=now)
