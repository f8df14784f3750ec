"""Data models for heuristic task extraction."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime

from planner.models import Task
from planner.pipeline_config import TextFormat


@dataclass
class ExtractedTask:
    """A candidate task parsed from text, awaiting human confirmation."""

    name: str
    amount: float = 1
    unit: str = "ページ"
    deadline: str = ""  # ISO date, empty if not found, raw token if unparsed
    confidence: float = 1.0

    def deadline_date(self) -> date | None:
        """The deadline as a date, or None when it is missing or not ISO."""
        try:
            return date.fromisoformat(self.deadline)
        except ValueError:
            return None

    def to_task(self, task_id: str | None = None, created_at: datetime | None = None) -> Task:
        """Convert a confirmed candidate into a fresh Task with nothing completed.

        Raises:
            ValueError: If the name is blank, the amount is not positive, or the
                deadline is not an ISO date.
        """
        name = self.name.strip()
        if not name:
            msg = "Extracted task has an empty name"
            raise ValueError(msg)
        if self.amount <= 0:
            msg = f"Extracted task {name!r} has a non-positive amount: {self.amount}"
            raise ValueError(msg)
        deadline = self.deadline_date()
        if deadline is None:
            msg = f"Extracted task {name!r} has no usable deadline: {self.deadline!r}"
            raise ValueError(msg)
        return Task(
            id=task_id or str(uuid.uuid4()),
            name=name,
            amount=self.amount,
            unit=self.unit,
            deadline=deadline,
            completed=0,
            created_at=created_at or datetime.now(),
        )


@dataclass
class ExtractionResult:
    """Candidates from one extraction call and the format that produced them."""

    format: TextFormat | None
    tasks: list[ExtractedTask] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Template match results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NoMatch:
    """No template matched."""


@dataclass(frozen=True)
class DateMatch:
    year: int
    month: int
    day: int
    span: tuple[int, int] = (0, 0)

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True)
class RangeMatch:
    """An inclusive range such as ``P.1-50``."""

    low: int
    high: int
    unit: str
    span: tuple[int, int] = (0, 0)

    @property
    def amount(self) -> int:
        return self.high - self.low + 1


@dataclass(frozen=True)
class SingleMatch:
    amount: int
    unit: str
    span: tuple[int, int] = (0, 0)


MatchResult = NoMatch | DateMatch | RangeMatch | SingleMatch
