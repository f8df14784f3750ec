"""Tests for the deadline-driven daily allocator."""

from __future__ import annotations

import copy
from datetime import date, timedelta

import pytest

from planner.models import Task
from planner.scheduling.allocator import date_range, days_left, generate_schedule

START = date(2024, 8, 1)


def _task(
    task_id: str,
    amount: float,
    deadline: date,
    completed: float = 0,
    name: str | None = None,
) -> Task:
    return Task(
        id=task_id,
        name=name or f"Task {task_id}",
        amount=amount,
        unit="ページ",
        deadline=deadline,
        completed=completed,
    )


def _amounts_for(schedule, task_id: str) -> list[float]:
    return [s.planned_amount for day in schedule for s in day.tasks if s.task_id == task_id]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestDayCounting:
    def test_days_left_counts_deadline_day(self) -> None:
        assert days_left(date(2024, 8, 5), date(2024, 8, 1)) == 5

    def test_days_left_on_deadline_is_one(self) -> None:
        assert days_left(date(2024, 8, 5), date(2024, 8, 5)) == 1

    def test_days_left_never_below_one(self) -> None:
        assert days_left(date(2024, 7, 20), date(2024, 8, 1)) == 1

    def test_date_range_inclusive(self) -> None:
        days = list(date_range(date(2024, 8, 30), date(2024, 9, 2)))
        assert days == [date(2024, 8, 30), date(2024, 8, 31), date(2024, 9, 1), date(2024, 9, 2)]


# ---------------------------------------------------------------------------
# Schedule shape
# ---------------------------------------------------------------------------


class TestScheduleShape:
    def test_one_entry_per_day_in_order(self) -> None:
        schedule = generate_schedule([], START, START + timedelta(days=6))
        assert [d.date for d in schedule] == [START + timedelta(days=i) for i in range(7)]
        assert all(d.tasks == [] for d in schedule)

    def test_single_day_range(self) -> None:
        schedule = generate_schedule([_task("a", 3, START)], START, START)
        assert len(schedule) == 1
        assert _amounts_for(schedule, "a") == [3]

    def test_scheduled_task_fields(self) -> None:
        task = _task("a", 4, START + timedelta(days=1), name="数学ワーク")
        entry = generate_schedule([task], START, START)[0].tasks[0]
        assert entry.task_id == "a"
        assert entry.name == "数学ワーク"
        assert entry.unit == "ページ"
        assert entry.deadline == task.deadline
        assert entry.completed is False


# ---------------------------------------------------------------------------
# Allocation
# ---------------------------------------------------------------------------


class TestAllocation:
    def test_even_split_over_five_days(self) -> None:
        """amount 10, deadline start+4, five days -> 2 per day."""
        task = _task("a", 10, START + timedelta(days=4))
        schedule = generate_schedule([task], START, START + timedelta(days=4))
        assert _amounts_for(schedule, "a") == [2, 2, 2, 2, 2]

    def test_uneven_amount_front_loads(self) -> None:
        task = _task("a", 7, START + timedelta(days=2))
        schedule = generate_schedule([task], START, START + timedelta(days=2))
        assert _amounts_for(schedule, "a") == [3, 2, 2]

    def test_partially_completed_task_plans_remaining_only(self) -> None:
        task = _task("a", 10, START + timedelta(days=2), completed=4)
        schedule = generate_schedule([task], START, START + timedelta(days=2))
        assert _amounts_for(schedule, "a") == [2, 2, 2]

    def test_deadline_on_start_day_takes_everything(self) -> None:
        task = _task("a", 9, START)
        schedule = generate_schedule([task], START, START + timedelta(days=3))
        assert _amounts_for(schedule, "a") == [9]

    def test_completed_tasks_are_excluded(self) -> None:
        done = _task("done", 5, START + timedelta(days=3), completed=5)
        schedule = generate_schedule([done], START, START + timedelta(days=3))
        assert _amounts_for(schedule, "done") == []

    def test_over_completed_task_is_excluded(self) -> None:
        task = _task("a", 5, START + timedelta(days=3), completed=7)
        schedule = generate_schedule([task], START, START + timedelta(days=3))
        assert all(d.tasks == [] for d in schedule)

    def test_range_shorter_than_deadline(self) -> None:
        task = _task("a", 10, START + timedelta(days=9))
        schedule = generate_schedule([task], START, START + timedelta(days=2))
        assert _amounts_for(schedule, "a") == [1, 1, 1]

    def test_finished_work_stops_emitting(self) -> None:
        task = _task("a", 2, START + timedelta(days=1))
        schedule = generate_schedule([task], START, START + timedelta(days=5))
        assert _amounts_for(schedule, "a") == [1, 1]
        assert all(d.tasks == [] for d in schedule[2:])


class TestDeadlineRespect:
    def test_nothing_after_deadline(self) -> None:
        deadline = START + timedelta(days=1)
        task = _task("a", 10, deadline)
        schedule = generate_schedule([task], START, START + timedelta(days=5))
        for day in schedule:
            for entry in day.tasks:
                assert day.date <= entry.deadline
        assert _amounts_for(schedule, "a") == [5, 5]

    def test_overdue_task_never_scheduled(self) -> None:
        task = _task("late", 10, START - timedelta(days=2))
        schedule = generate_schedule([task], START, START + timedelta(days=3))
        assert _amounts_for(schedule, "late") == []


class TestPriority:
    def test_closer_deadline_listed_first(self) -> None:
        far = _task("far", 10, START + timedelta(days=9))
        near = _task("near", 4, START + timedelta(days=2))
        schedule = generate_schedule([far, near], START, START + timedelta(days=2))
        for day in schedule:
            ids = [s.task_id for s in day.tasks]
            assert ids.index("near") < ids.index("far")

    def test_deadline_today_before_tomorrow(self) -> None:
        tomorrow = _task("tomorrow", 4, START + timedelta(days=1))
        today = _task("today", 4, START)
        first_day = generate_schedule([tomorrow, today], START, START)[0]
        assert [s.task_id for s in first_day.tasks] == ["today", "tomorrow"]

    def test_ties_keep_input_order(self) -> None:
        deadline = START + timedelta(days=3)
        tasks = [_task(tid, 8, deadline) for tid in ("c", "a", "b")]
        schedule = generate_schedule(tasks, START, deadline)
        for day in schedule:
            assert [s.task_id for s in day.tasks] == ["c", "a", "b"]


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


class TestProperties:
    def _tasks(self) -> list[Task]:
        return [
            _task("a", 37, START + timedelta(days=6)),
            _task("b", 12, START + timedelta(days=2), completed=3),
            _task("c", 5, START + timedelta(days=20)),
            _task("d", 8, START - timedelta(days=1)),
            _task("e", 3, START + timedelta(days=4), completed=3),
        ]

    def test_conservation(self) -> None:
        tasks = self._tasks()
        schedule = generate_schedule(tasks, START, START + timedelta(days=10))
        for task in tasks:
            planned = sum(_amounts_for(schedule, task.id))
            assert planned <= max(0, task.amount - task.completed)

    def test_work_due_inside_range_is_fully_planned(self) -> None:
        tasks = self._tasks()
        schedule = generate_schedule(tasks, START, START + timedelta(days=10))
        assert sum(_amounts_for(schedule, "a")) == 37
        assert sum(_amounts_for(schedule, "b")) == 9

    def test_deterministic(self) -> None:
        first = generate_schedule(self._tasks(), START, START + timedelta(days=10))
        second = generate_schedule(self._tasks(), START, START + timedelta(days=10))
        assert first == second

    def test_inputs_not_mutated(self) -> None:
        tasks = self._tasks()
        before = copy.deepcopy(tasks)
        generate_schedule(tasks, START, START + timedelta(days=10))
        assert tasks == before

    def test_planned_amounts_positive(self) -> None:
        schedule = generate_schedule(self._tasks(), START, START + timedelta(days=10))
        assert all(s.planned_amount > 0 for d in schedule for s in d.tasks)


# ---------------------------------------------------------------------------
# Contract violations
# ---------------------------------------------------------------------------


class TestValidation:
    def test_inverted_range_raises(self) -> None:
        with pytest.raises(ValueError, match="after end_date"):
            generate_schedule([], START, START - timedelta(days=1))

    def test_negative_amount_raises(self) -> None:
        with pytest.raises(ValueError, match="negative amount"):
            generate_schedule([_task("a", -1, START)], START, START)

    def test_negative_completed_raises(self) -> None:
        with pytest.raises(ValueError, match="negative completed"):
            generate_schedule([_task("a", 5, START, completed=-2)], START, START)
