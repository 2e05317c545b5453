"""Busy-interval bookkeeping for a single day."""

import bisect
from datetime import date

from .calendar import MINUTES_PER_DAY, Event, minute_of_day


class IntervalOccupancyTracker:
    """
    Busy intervals for the target day as (start, end) minute pairs.

    Pre-existing intervals are taken as given: no merging, no validation.
    """

    def __init__(self, intervals: list[tuple[int, int]] | None = None):
        self._intervals: list[tuple[int, int]] = sorted(intervals or [])

    @classmethod
    def from_events(cls, events: list[Event], target_date: date) -> "IntervalOccupancyTracker":
        """Build a tracker from the timed events that start on target_date."""
        intervals = []
        for event in events:
            if event.all_day or event.end is None:
                continue
            if event.start.date() != target_date:
                continue
            start = minute_of_day(event.start)
            if event.end.date() > target_date:
                end = MINUTES_PER_DAY
            else:
                end = minute_of_day(event.end)
            intervals.append((start, end))
        return cls(intervals)

    @property
    def intervals(self) -> list[tuple[int, int]]:
        return list(self._intervals)

    def __len__(self) -> int:
        return len(self._intervals)

    def conflicts(self, start: int, end: int) -> bool:
        """True if any held interval overlaps [start, end). Touching is fine."""
        return any(start < busy_end and busy_start < end for busy_start, busy_end in self._intervals)

    def insert(self, start: int, end: int) -> None:
        bisect.insort(self._intervals, (start, end))
