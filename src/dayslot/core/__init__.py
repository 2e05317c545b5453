"""Functional core - pure business logic with no I/O."""

from .tasks import Task, sort_by_priority, find_task
from .calendar import Event, filter_events_by_date, format_minutes, parse_hhmm
from .preferences import ParsedPreference, TimePreferenceParser, parse_time_preference
from .occupancy import IntervalOccupancyTracker
from .plan import ScheduleAssignment, SchedulePlan
from .scheduler import GreedyIntervalScheduler, SchedulingInputError, schedule_tasks

__all__ = [
    # Tasks
    "Task",
    "sort_by_priority",
    "find_task",
    # Calendar
    "Event",
    "filter_events_by_date",
    "format_minutes",
    "parse_hhmm",
    # Preferences
    "ParsedPreference",
    "TimePreferenceParser",
    "parse_time_preference",
    # Scheduling
    "IntervalOccupancyTracker",
    "ScheduleAssignment",
    "SchedulePlan",
    "GreedyIntervalScheduler",
    "SchedulingInputError",
    "schedule_tasks",
]
