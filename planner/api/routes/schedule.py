"""Scheduling endpoints: daily work plan and progress statistics."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from planner.api.models import (
    DailyScheduleResponse,
    ProgressRequest,
    ProgressResponse,
    ScheduleRequest,
    ScheduleResponse,
)
from planner.scheduling.allocator import generate_schedule
from planner.scheduling.progress import calculate_progress, summarize_progress

router = APIRouter()


@router.post("/api/schedule", response_model=ScheduleResponse)
async def schedule(request: ScheduleRequest) -> ScheduleResponse:
    """Plan the remaining work of the given tasks day by day."""
    tasks = [t.to_task() for t in request.tasks]
    try:
        days = generate_schedule(tasks, request.start_date, request.end_date)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return ScheduleResponse(days=[DailyScheduleResponse.from_daily(d) for d in days])


@router.post("/api/progress", response_model=ProgressResponse)
async def progress(request: ProgressRequest) -> ProgressResponse:
    """Summarize completion, urgent, and overdue counts for a task list."""
    tasks = [t.to_task() for t in request.tasks]
    summary = summarize_progress(tasks, request.today)
    return ProgressResponse(
        progress=calculate_progress(tasks),
        total_tasks=summary.total_tasks,
        completed_tasks=summary.completed_tasks,
        task_completion_rate=summary.task_completion_rate,
        work_progress=summary.work_progress,
        urgent_tasks=summary.urgent_tasks,
        overdue_tasks=summary.overdue_tasks,
    )
