"""Progress statistics over tasks and daily plans."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from planner.config import settings
from planner.models import DailySchedule, ProgressSummary, ScheduledTask, Task


def _percent(part: float, whole: float) -> int:
    """Integer percentage rounded half up; 0 when *whole* is 0."""
    if whole <= 0:
        return 0
    return int(part * 100 / whole + 0.5)


def calculate_progress(tasks: Sequence[Task]) -> int:
    """Overall work progress as a percentage of all units."""
    total = sum(t.amount for t in tasks)
    done = sum(t.completed for t in tasks)
    return _percent(done, total)


def summarize_progress(
    tasks: Sequence[Task],
    today: date | None = None,
    urgent_window_days: int | None = None,
) -> ProgressSummary:
    """Count finished, urgent, and overdue tasks relative to *today*.

    A task is urgent when unfinished and due within ``urgent_window_days``
    days (today included), and overdue when unfinished with a deadline
    before today.
    """
    today = today or date.today()
    window = settings.urgent_window_days if urgent_window_days is None else urgent_window_days

    completed = sum(1 for t in tasks if t.is_done)
    urgent = 0
    overdue = 0
    for task in tasks:
        if task.is_done:
            continue
        days_until = (task.deadline - today).days
        if 0 <= days_until <= window:
            urgent += 1
        elif days_until < 0:
            overdue += 1

    return ProgressSummary(
        total_tasks=len(tasks),
        completed_tasks=completed,
        task_completion_rate=_percent(completed, len(tasks)),
        work_progress=calculate_progress(tasks),
        urgent_tasks=urgent,
        overdue_tasks=overdue,
    )


def tasks_for_date(schedule: Sequence[DailySchedule], day: date) -> list[ScheduledTask]:
    """Return the work planned for *day*, or an empty list if it is not in the plan."""
    for daily in schedule:
        if daily.date == day:
            return list(daily.tasks)
    return []


def daily_completion_rate(scheduled: Sequence[ScheduledTask]) -> int:
    """Percentage of a day's scheduled entries the caller has marked completed."""
    return _percent(sum(1 for s in scheduled if s.completed), len(scheduled))
