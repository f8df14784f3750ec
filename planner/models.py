"""Shared data shapes: tasks, scheduled work, and daily plans."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass
class Task:
    """A trackable unit of work owned by the caller.

    ``completed`` counts finished units and never exceeds ``amount``.
    """

    id: str
    name: str
    amount: float
    unit: str
    deadline: date
    completed: float = 0
    created_at: datetime | None = None

    @property
    def remaining(self) -> float:
        return max(0, self.amount - self.completed)

    @property
    def is_done(self) -> bool:
        return self.completed >= self.amount


@dataclass
class ScheduledTask:
    """One task's planned contribution to a single day."""

    task_id: str
    name: str
    planned_amount: float
    unit: str
    deadline: date
    completed: bool = False


@dataclass
class DailySchedule:
    """A calendar date and the work planned for it, in processing order."""

    date: date
    tasks: list[ScheduledTask] = field(default_factory=list)


@dataclass
class ProgressSummary:
    """Aggregate progress figures over a task list."""

    total_tasks: int
    completed_tasks: int
    task_completion_rate: int
    work_progress: int
    urgent_tasks: int
    overdue_tasks: int
