"""Tests for the greedy scheduler."""

import copy
from datetime import date, datetime, time, timedelta
from itertools import combinations
from unittest.mock import patch

import pytest

from dayslot.core import preferences
from dayslot.core.calendar import Event
from dayslot.core.scheduler import (
    BUFFER_MINUTES,
    WORK_END,
    GreedyIntervalScheduler,
    SchedulingInputError,
    round_up,
    schedule_tasks,
    work_start_for,
)
from dayslot.core.tasks import Task


@pytest.fixture
def today():
    return date(2025, 1, 15)


@pytest.fixture
def at(today):
    """Build a datetime on today from hour/minute."""
    def _at(hour: int, minute: int = 0) -> datetime:
        return datetime.combine(today, time(hour, minute))
    return _at


@pytest.fixture
def make_task():
    def _make(
        id: str,
        duration: int = 30,
        priority: int = 0,
        time_preference: str | None = None,
    ) -> Task:
        return Task(
            id=id,
            title=f"Task {id}",
            duration=duration,
            priority=priority,
            time_preference=time_preference,
        )
    return _make


@pytest.fixture
def busy(at):
    """Factory for existing events on today."""
    def _busy(start: tuple[int, int], end: tuple[int, int]) -> Event:
        return Event(title="Busy", start=at(*start), end=at(*end))
    return _busy


def slots(plan) -> list[tuple[str, str, str]]:
    return [(a.task_id, a.start_time, a.end_time) for a in plan]


class TestBounds:
    def test_round_up(self):
        assert round_up(540) == 540
        assert round_up(541) == 555
        assert round_up(0) == 0

    def test_work_start_today_rounds_now_up(self, today, at):
        assert work_start_for(today, at(9, 1)) == 555
        assert work_start_for(today, at(9, 0)) == 540

    def test_work_start_future_is_eight(self, today, at):
        assert work_start_for(today + timedelta(days=1), at(15, 7)) == 480


class TestScenarios:
    def test_single_task_at_now(self, make_task, today, at):
        plan = schedule_tasks([make_task("a", 30)], [], target_date=today, now=at(9, 0))
        assert slots(plan) == [("a", "09:00", "09:30")]

    def test_skips_existing_block_and_buffers(self, make_task, busy, today, at):
        tasks = [make_task("a", 60, priority=0), make_task("b", 30, priority=1)]
        plan = schedule_tasks(tasks, [busy((9, 0), (9, 30))], target_date=today, now=at(9, 0))

        a, b = plan.assignments
        assert (a.task_id, a.start_time, a.end_time) == ("a", "09:30", "10:30")
        assert b.task_id == "b"
        assert b.start_minute >= a.end_minute + BUFFER_MINUTES
        assert b.start_time == "10:45"

    def test_pinned_task_lands_on_its_time(self, make_task, today, at):
        task = make_task("p", 30, priority=99, time_preference="at 2pm")
        plan = schedule_tasks([task], [], target_date=today, now=at(9, 0))
        assert slots(plan) == [("p", "14:00", "14:30")]

    def test_pinned_task_dropped_on_conflict(self, make_task, busy, today, at):
        task = make_task("p", 30, time_preference="at 2pm")
        plan = schedule_tasks([task], [busy((14, 0), (14, 30))], target_date=today, now=at(9, 0))
        assert plan.assignments == []

    def test_long_tasks_stop_when_day_is_full(self, make_task, today, at):
        tasks = [make_task(str(i), 180, priority=i) for i in range(10)]
        plan = schedule_tasks(tasks, [], target_date=today + timedelta(days=1), now=at(9, 0))

        assert plan.task_ids() == ["0", "1", "2", "3"]
        assert [a.start_time for a in plan] == ["08:00", "11:15", "14:30", "17:45"]


class TestPinned:
    def test_processed_in_input_order_not_priority(self, make_task, today, at):
        first = make_task("first", 60, priority=5, time_preference="at 10am")
        second = make_task("second", 60, priority=0, time_preference="at 10:30am")
        plan = schedule_tasks([first, second], [], target_date=today, now=at(8, 0))
        assert plan.task_ids() == ["first"]

    def test_past_workday_end_is_dropped(self, make_task, today, at):
        task = make_task("late", 60, time_preference="at 9:30pm")
        plan = schedule_tasks([task], [], target_date=today, now=at(8, 0))
        assert plan.assignments == []

    def test_ending_exactly_at_workday_end(self, make_task, today, at):
        task = make_task("edge", 60, time_preference="at 9pm")
        plan = schedule_tasks([task], [], target_date=today, now=at(8, 0))
        assert slots(plan) == [("edge", "21:00", "22:00")]

    def test_already_passed_today_is_dropped(self, make_task, today, at):
        task = make_task("gone", 30, time_preference="at 9am")
        plan = schedule_tasks([task], [], target_date=today, now=at(11, 0))
        assert plan.assignments == []

    def test_flexible_tasks_avoid_pinned(self, make_task, today, at):
        tasks = [
            make_task("flex", 60, priority=0),
            make_task("pin", 30, priority=9, time_preference="at 8:30am"),
        ]
        plan = schedule_tasks(tasks, [], target_date=today + timedelta(days=1), now=at(7, 0))
        assert slots(plan) == [("pin", "08:30", "09:00"), ("flex", "09:00", "10:00")]


class TestFlexible:
    def test_priority_order_with_stable_ties(self, make_task, today, at):
        tasks = [
            make_task("c", 30, priority=2),
            make_task("a1", 30, priority=1),
            make_task("a2", 30, priority=1),
        ]
        plan = schedule_tasks(tasks, [], target_date=today, now=at(9, 0))
        assert plan.task_ids() == ["a1", "a2", "c"]

    def test_soft_anchor_moves_search_start(self, make_task, today, at):
        plan = schedule_tasks(
            [make_task("e", 30, time_preference="evening")], [], target_date=today, now=at(9, 0)
        )
        assert slots(plan) == [("e", "17:00", "17:30")]

    def test_anchor_before_cursor_is_ignored(self, make_task, today, at):
        plan = schedule_tasks(
            [make_task("m", 30, time_preference="morning")], [], target_date=today, now=at(10, 10)
        )
        assert slots(plan) == [("m", "10:15", "10:45")]

    def test_before_preference_starts_at_work_start(self, make_task, today, at):
        plan = schedule_tasks(
            [make_task("b", 30, time_preference="before 3pm")],
            [],
            target_date=today + timedelta(days=1),
            now=at(9, 0),
        )
        assert slots(plan) == [("b", "08:00", "08:30")]

    def test_stops_after_first_misfit(self, make_task, today, at):
        tasks = [
            make_task("big", 120, priority=0),
            make_task("small", 15, priority=1),
        ]
        plan = schedule_tasks(tasks, [], target_date=today, now=at(21, 0))
        assert plan.assignments == []

    def test_non_positive_duration_is_skipped(self, make_task, today, at):
        tasks = [make_task("zero", 0, priority=0), make_task("ok", 30, priority=1)]
        plan = schedule_tasks(tasks, [], target_date=today, now=at(9, 0))
        assert plan.task_ids() == ["ok"]
        assert all(a.duration > 0 for a in plan)

    def test_search_skips_busy_blocks(self, make_task, busy, today, at):
        events = [busy((9, 0), (10, 0)), busy((10, 15), (11, 0))]
        plan = schedule_tasks([make_task("x", 30)], events, target_date=today, now=at(9, 0))
        assert slots(plan) == [("x", "11:00", "11:30")]

    def test_other_days_are_ignored(self, make_task, today, at):
        tomorrow_block = Event(
            title="Tomorrow",
            start=at(9, 0) + timedelta(days=1),
            end=at(12, 0) + timedelta(days=1),
        )
        plan = schedule_tasks([make_task("x", 30)], [tomorrow_block], target_date=today, now=at(9, 0))
        assert slots(plan) == [("x", "09:00", "09:30")]


class TestInvariants:
    @pytest.fixture
    def busy_day(self, make_task, busy):
        tasks = [
            make_task("t1", 45, priority=3),
            make_task("t2", 90, priority=1, time_preference="after lunch"),
            make_task("t3", 30, priority=2, time_preference="at 4pm"),
            make_task("t4", 25, priority=0),
            make_task("t5", 60, priority=1, time_preference="evening"),
            make_task("t6", 15, priority=4, time_preference="whenever"),
        ]
        events = [busy((10, 0), (11, 0)), busy((13, 0), (14, 0)), busy((15, 50), (16, 10))]
        return tasks, events

    def test_no_overlap_bounds_and_floor(self, busy_day, today, at):
        tasks, events = busy_day
        now = at(9, 7)
        plan = schedule_tasks(tasks, events, target_date=today, now=now)

        assert plan.assignments
        for a, b in combinations(plan.assignments, 2):
            assert not a.overlaps(b)
        for a in plan:
            assert a.end_minute <= WORK_END
            assert a.start_minute >= round_up(now.hour * 60 + now.minute)

    def test_inputs_not_mutated(self, busy_day, today, at):
        tasks, events = busy_day
        before = (copy.deepcopy(tasks), copy.deepcopy(events))
        schedule_tasks(tasks, events, target_date=today, now=at(9, 0))
        assert (tasks, events) == before

    def test_same_input_same_plan(self, busy_day, today, at):
        tasks, events = busy_day
        first = schedule_tasks(tasks, events, target_date=today, now=at(9, 0))
        second = schedule_tasks(tasks, events, target_date=today, now=at(9, 0))
        assert first == second


class TestInputErrors:
    def test_empty_backlog(self, today, at):
        plan = schedule_tasks([], [], target_date=today, now=at(9, 0))
        assert plan.assignments == []
        assert plan.target_date == today

    def test_missing_tasks_raises(self):
        with pytest.raises(SchedulingInputError):
            schedule_tasks(None, [])

    def test_missing_events_raises(self, make_task):
        with pytest.raises(SchedulingInputError):
            schedule_tasks([make_task("a")], None)


class TestStrategy:
    def test_greedy_strategy_tags_plan(self, make_task, today, at):
        plan = GreedyIntervalScheduler().schedule([make_task("a")], [], target_date=today, now=at(9, 0))
        assert plan.strategy == "greedy"
        assert plan.task_ids() == ["a"]


class TestPreferenceParsing:
    def test_preferences_parsed_once_per_run(self, make_task, today, at):
        tasks = [make_task("a", time_preference="after lunch"), make_task("b", time_preference="after lunch")]
        with patch.object(preferences, "parse_time_preference", wraps=preferences.parse_time_preference) as spy:
            schedule_tasks(tasks, [], target_date=today, now=at(9, 0))
            schedule_tasks(tasks, [], target_date=today, now=at(9, 0))
        # Memo does not outlive a run
        assert spy.call_count == 2
