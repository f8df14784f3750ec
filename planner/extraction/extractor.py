"""Heuristic extraction of task candidates from pasted or recognized text."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import datetime

from planner.extraction.models import ExtractedTask, ExtractionResult
from planner.extraction.parsers import (
    looks_delimited,
    looks_like_table,
    normalize_text,
    parse_delimited,
    parse_free_lines,
    parse_table,
    parse_text,
)
from planner.models import Task
from planner.pipeline_config import ExtractionConfig, TextFormat

logger = logging.getLogger(__name__)

_INLINE_SPACES_RE = re.compile(r"[ 　]+")


def run_extraction(raw_text: str, config: ExtractionConfig | None = None) -> ExtractionResult:
    """Extract candidates and report which format produced them.

    With ``TextFormat.AUTO`` the formats are tried in order (markdown
    table, CSV/TSV, free lines) and the first one yielding candidates wins.
    Text with no recognizable tasks gives an empty result, never an error.
    """
    config = config or ExtractionConfig()
    today = config.today()
    text = normalize_text(raw_text or "")
    if not text:
        return ExtractionResult(format=None)

    if config.format is not TextFormat.AUTO:
        tasks = parse_text(text, config.format, today)
        logger.info("Extracted %d candidates as %s", len(tasks), config.format.value)
        return ExtractionResult(format=config.format if tasks else None, tasks=tasks)

    if looks_like_table(text):
        tasks = parse_table(text, today)
        if tasks:
            logger.info("Extracted %d candidates from markdown table", len(tasks))
            return ExtractionResult(format=TextFormat.TABLE, tasks=tasks)
        logger.debug("Table markers present but no rows extracted")

    lines = [line for line in text.split("\n") if line.strip()]
    if looks_delimited(lines):
        tasks = parse_delimited(text, today)
        if tasks:
            logger.info("Extracted %d candidates from delimited text", len(tasks))
            return ExtractionResult(format=TextFormat.DELIMITED, tasks=tasks)

    tasks = parse_free_lines(text, today)
    logger.info("Extracted %d candidates from %d free lines", len(tasks), len(lines))
    return ExtractionResult(format=TextFormat.FREE_LINE if tasks else None, tasks=tasks)


def extract_tasks(raw_text: str, config: ExtractionConfig | None = None) -> list[ExtractedTask]:
    """Extract task candidates from *raw_text*.

    Args:
        raw_text: Text already decoded or recognized by an external collaborator.
        config: Format and reference date; defaults to auto-detection and today.

    Returns:
        Candidates in input order, each with a confidence in ``[0, 1]``.
    """
    return run_extraction(raw_text, config).tasks


def clean_document_text(text: str) -> str:
    """Tidy text pulled from a document: one space between words, no blank lines.

    Tabs are kept so tab-separated content still parses as TSV.
    """
    lines = normalize_text(text or "").split("\n")
    cleaned = (_INLINE_SPACES_RE.sub(" ", line).strip(" ") for line in lines)
    return "\n".join(line for line in cleaned if line.strip())


def extract_tasks_from_document(text: str, config: ExtractionConfig | None = None) -> ExtractionResult:
    return run_extraction(clean_document_text(text), config)


def confirm_tasks(
    candidates: Iterable[ExtractedTask],
    created_at: datetime | None = None,
) -> list[Task]:
    """Turn reviewed candidates into new Tasks.

    Candidates without a name, a positive amount, or an ISO deadline are
    left out.  Each Task gets a fresh id and starts with nothing completed.
    """
    created_at = created_at or datetime.now()
    tasks: list[Task] = []
    for candidate in candidates:
        if not candidate.name.strip() or candidate.amount <= 0 or candidate.deadline_date() is None:
            logger.debug("Dropping unconfirmable candidate %r", candidate.name)
            continue
        tasks.append(candidate.to_task(created_at=created_at))
    return tasks
