"""Pydantic request/response schemas for the Homework Planner API."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

from planner.extraction.models import ExtractedTask
from planner.models import DailySchedule, ScheduledTask, Task
from planner.pipeline_config import TextFormat


class TaskModel(BaseModel):
    """A task as exchanged with the API."""

    id: str
    name: str = Field(min_length=1)
    amount: float = Field(gt=0)
    unit: str = "ページ"
    deadline: dt.date
    completed: float = Field(default=0, ge=0)
    created_at: dt.datetime | None = None

    def to_task(self) -> Task:
        return Task(
            id=self.id,
            name=self.name,
            amount=self.amount,
            unit=self.unit,
            deadline=self.deadline,
            completed=self.completed,
            created_at=self.created_at,
        )

    @classmethod
    def from_task(cls, task: Task) -> TaskModel:
        return cls(
            id=task.id,
            name=task.name,
            amount=task.amount,
            unit=task.unit,
            deadline=task.deadline,
            completed=task.completed,
            created_at=task.created_at,
        )


class ScheduleRequest(BaseModel):
    """Request body for the /api/schedule endpoint."""

    tasks: list[TaskModel]
    start_date: dt.date
    end_date: dt.date


class ScheduledTaskResponse(BaseModel):
    task_id: str
    name: str
    planned_amount: float
    unit: str
    deadline: dt.date
    completed: bool = False

    @classmethod
    def from_scheduled(cls, item: ScheduledTask) -> ScheduledTaskResponse:
        return cls(
            task_id=item.task_id,
            name=item.name,
            planned_amount=item.planned_amount,
            unit=item.unit,
            deadline=item.deadline,
            completed=item.completed,
        )


class DailyScheduleResponse(BaseModel):
    date: dt.date
    tasks: list[ScheduledTaskResponse] = []

    @classmethod
    def from_daily(cls, daily: DailySchedule) -> DailyScheduleResponse:
        return cls(
            date=daily.date,
            tasks=[ScheduledTaskResponse.from_scheduled(t) for t in daily.tasks],
        )


class ScheduleResponse(BaseModel):
    """Response body for the /api/schedule endpoint."""

    days: list[DailyScheduleResponse]


class ProgressRequest(BaseModel):
    """Request body for the /api/progress endpoint."""

    tasks: list[TaskModel]
    today: dt.date | None = None


class ProgressResponse(BaseModel):
    """Response body for the /api/progress endpoint."""

    progress: int
    total_tasks: int
    completed_tasks: int
    task_completion_rate: int
    work_progress: int
    urgent_tasks: int
    overdue_tasks: int


class ExtractRequest(BaseModel):
    """Request body for the /api/extract endpoint."""

    text: str
    format: TextFormat = TextFormat.AUTO
    reference_date: dt.date | None = None


class ExtractedTaskModel(BaseModel):
    """A single extracted candidate in API requests and responses."""

    name: str
    amount: float = Field(default=1, gt=0)
    unit: str = "ページ"
    deadline: str = ""
    confidence: float = Field(default=1.0, ge=0, le=1)

    def to_extracted(self) -> ExtractedTask:
        return ExtractedTask(
            name=self.name,
            amount=self.amount,
            unit=self.unit,
            deadline=self.deadline,
            confidence=self.confidence,
        )

    @classmethod
    def from_extracted(cls, item: ExtractedTask) -> ExtractedTaskModel:
        return cls(
            name=item.name,
            amount=item.amount,
            unit=item.unit,
            deadline=item.deadline,
            confidence=item.confidence,
        )


class ExtractResponse(BaseModel):
    """Response body for the extraction endpoints."""

    format: TextFormat | None = None
    items_extracted: int
    tasks: list[ExtractedTaskModel] = []


class ConfirmRequest(BaseModel):
    """Request body for the /api/extract/confirm endpoint."""

    items: list[ExtractedTaskModel]
    created_at: dt.datetime | None = None


class ConfirmResponse(BaseModel):
    """Response body for the /api/extract/confirm endpoint."""

    tasks: list[TaskModel]
