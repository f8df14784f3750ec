"""Deadline-driven daily allocation of remaining work."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from planner.models import DailySchedule, ScheduledTask, Task

logger = logging.getLogger(__name__)


@dataclass
class _PlannedTask:
    """Per-call scratch state for one active task."""

    task: Task
    remaining: float
    days_until_deadline: int

    @property
    def priority(self) -> float:
        return 1 / self.days_until_deadline


def days_left(deadline: date, day: date) -> int:
    """Number of working days from *day* through *deadline* inclusive, at least 1."""
    return max(1, (deadline - day).days + 1)


def date_range(start_date: date, end_date: date) -> Iterator[date]:
    """Yield every calendar date from *start_date* to *end_date* inclusive."""
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def _validate(tasks: Sequence[Task], start_date: date, end_date: date) -> None:
    if start_date > end_date:
        msg = f"start_date {start_date.isoformat()} is after end_date {end_date.isoformat()}"
        raise ValueError(msg)
    for task in tasks:
        if task.amount < 0:
            msg = f"Task {task.id!r} has a negative amount: {task.amount}"
            raise ValueError(msg)
        if task.completed < 0:
            msg = f"Task {task.id!r} has a negative completed amount: {task.completed}"
            raise ValueError(msg)


def generate_schedule(
    tasks: Sequence[Task],
    start_date: date,
    end_date: date,
) -> list[DailySchedule]:
    """Spread the remaining work of *tasks* over the days of a date range.

    Each day, every unfinished task whose deadline has not passed is given
    ``ceil(remaining / days_left)`` units, with days counted up to and
    including the deadline.  Tasks are visited in order of closest deadline
    (stable for ties), so the daily rate rises as a deadline approaches and
    earlier days never need re-planning.  Work left after a deadline is not
    scheduled.  The input tasks are never modified.

    Priority uses the same inclusive day count as the daily rate.  A task due
    on *start_date* therefore ranks ahead of one due the next day; with an
    exclusive count (``max(1, deadline - start_date)``) both would get 1 and
    tie, keeping their input order.

    Args:
        tasks: Snapshot of the caller's tasks.
        start_date: First day of the plan; also the anchor for priorities.
        end_date: Last day of the plan (inclusive).

    Returns:
        One :class:`DailySchedule` per day, in date order.

    Raises:
        ValueError: If the range is inverted or a task has negative amounts.
    """
    _validate(tasks, start_date, end_date)

    planned = [
        _PlannedTask(
            task=task,
            remaining=task.remaining,
            days_until_deadline=days_left(task.deadline, start_date),
        )
        for task in tasks
        if not task.is_done
    ]
    # sorted() is stable for reverse=True as well, so ties keep input order
    planned = sorted(planned, key=lambda p: p.priority, reverse=True)

    schedule: list[DailySchedule] = []
    for day in date_range(start_date, end_date):
        daily_tasks: list[ScheduledTask] = []
        for item in planned:
            if day > item.task.deadline or item.remaining <= 0:
                continue
            amount = min(item.remaining, math.ceil(item.remaining / days_left(item.task.deadline, day)))
            if amount <= 0:
                continue
            daily_tasks.append(
                ScheduledTask(
                    task_id=item.task.id,
                    name=item.task.name,
                    planned_amount=amount,
                    unit=item.task.unit,
                    deadline=item.task.deadline,
                    completed=False,
                )
            )
            item.remaining -= amount
        schedule.append(DailySchedule(date=day, tasks=daily_tasks))

    logger.debug(
        "Scheduled %d active tasks over %d days (%s..%s)",
        len(planned),
        len(schedule),
        start_date.isoformat(),
        end_date.isoformat(),
    )
    return schedule
