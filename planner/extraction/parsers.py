"""Parsers for task lists written as markdown tables, CSV/TSV, or free lines."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from datetime import date

from planner.config import settings
from planner.extraction.dates import normalize_date
from planner.extraction.models import ExtractedTask, NoMatch, RangeMatch
from planner.extraction.patterns import (
    extract_name,
    find_amount,
    looks_like_date,
    mask_span,
    match_amount,
    match_date,
    strip_bullet,
)
from planner.extraction.vocabulary import (
    FieldRole,
    canonical_unit,
    is_header_line,
    is_title_line,
    map_header_roles,
)
from planner.pipeline_config import TextFormat

logger = logging.getLogger(__name__)

_SEPARATOR_RE = re.compile(r"^[\s|:\-]+$")
_PIPE_WRAPPED_RE = re.compile(r"^\|.*\|$")
_BARE_NUMBER_RE = re.compile(r"^\d+$")
_FRACTION_RE = re.compile(r"^\d+/\d+$")
_FIRST_NUMBER_RE = re.compile(r"\d+")


def normalize_text(raw: str) -> str:
    """Unify line endings and trim surrounding blank lines and spaces.

    Tabs are kept: a leading tab is an empty first TSV cell.
    """
    return raw.replace("\r\n", "\n").replace("\r", "\n").strip(" \n")


def _non_blank_lines(text: str) -> list[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def clamp_confidence(value: float) -> float:
    return round(max(0.0, min(value, 1.0)), 2)


# ---------------------------------------------------------------------------
# Shared row handling (table and delimited)
# ---------------------------------------------------------------------------


def _build_row_task(
    cells: Sequence[str],
    columns: dict[FieldRole, int],
    today: date | None,
) -> ExtractedTask | None:
    """Turn one row of cells into a candidate using the header column map.

    Fields without a column (or with an empty cell) are inferred from the
    row: the first non-numeric cell becomes the name, the first date-like
    cell the deadline, and the first ``<number><unit>`` cell the amount/unit.
    """

    def cell(role: FieldRole) -> str:
        index = columns.get(role)
        if index is None or index >= len(cells):
            return ""
        return cells[index]

    name = cell(FieldRole.NAME)
    amount: int | None = None
    unit: str | None = None
    deadline = normalize_date(cell(FieldRole.DEADLINE), today)

    amount_match = _FIRST_NUMBER_RE.search(cell(FieldRole.AMOUNT))
    if amount_match and int(amount_match.group()) > 0:
        amount = int(amount_match.group())
    if cell(FieldRole.UNIT):
        unit = canonical_unit(cell(FieldRole.UNIT))

    if not name:
        name = next(
            (
                c
                for c in cells
                if len(c) > 1 and not _BARE_NUMBER_RE.match(c) and not _FRACTION_RE.match(c)
            ),
            "",
        )

    if not deadline:
        date_cell = next((c for c in cells if looks_like_date(c)), None)
        if date_cell is not None:
            deadline = normalize_date(date_cell, today)

    if amount is None or unit is None:
        for c in cells:
            found = find_amount(c)
            if isinstance(found, NoMatch):
                continue
            if amount is None:
                amount = found.amount
            if unit is None:
                unit = found.unit
            break

    if len(name) <= 1:
        return None

    return ExtractedTask(
        name=name,
        amount=amount if amount is not None else 1,
        unit=unit or settings.default_unit,
        deadline=deadline,
        confidence=clamp_confidence(settings.structured_confidence),
    )


# ---------------------------------------------------------------------------
# Markdown tables
# ---------------------------------------------------------------------------


def is_separator_row(line: str) -> bool:
    """A row made only of pipes, dashes, colons, and whitespace (``|---|:--|``)."""
    return "|" in line and "-" in line and _SEPARATOR_RE.match(line) is not None


def split_table_row(line: str) -> list[str]:
    """Split a pipe row into trimmed cells, dropping the empty edge cells."""
    cells = [c.strip() for c in line.split("|")]
    if cells and not cells[0]:
        cells = cells[1:]
    if cells and not cells[-1]:
        cells = cells[:-1]
    return cells


def looks_like_table(text: str) -> bool:
    return "|" in text and any(is_separator_row(line) for line in _non_blank_lines(text))


def parse_table(text: str, today: date | None = None) -> list[ExtractedTask]:
    """Parse a markdown table whose header names the task columns.

    Returns an empty list when no header row followed by a separator row
    can be found.
    """
    lines = _non_blank_lines(text)

    header_index = -1
    separator_index = -1
    for i, line in enumerate(lines):
        if header_index == -1:
            if (
                "|" in line
                and not line.startswith("#")
                and not is_separator_row(line)
                and any(split_table_row(line))
            ):
                header_index = i
        elif is_separator_row(line):
            separator_index = i
            break

    if header_index == -1 or separator_index == -1:
        logger.debug("No markdown table header/separator found")
        return []

    headers = [h.lower() for h in split_table_row(lines[header_index])]
    columns = map_header_roles(headers)
    logger.debug("Table headers %s mapped to %s", headers, columns)

    tasks: list[ExtractedTask] = []
    for line in lines[separator_index + 1 :]:
        if "|" not in line or line.startswith("#") or is_separator_row(line):
            continue
        task = _build_row_task(split_table_row(line), columns, today)
        if task is None:
            logger.debug("Skipping table row without a usable name: %s", line)
            continue
        tasks.append(task)
    return tasks


# ---------------------------------------------------------------------------
# CSV / TSV
# ---------------------------------------------------------------------------


def looks_delimited(lines: Sequence[str]) -> bool:
    return len(lines) >= 2 and ("," in lines[0] or "\t" in lines[0])


def parse_delimited(text: str, today: date | None = None) -> list[ExtractedTask]:
    """Parse comma- or tab-separated rows with a header line.

    The delimiter is a tab if the first line contains one, otherwise a
    comma.  A first line none of whose cells names a column is read as data.
    """
    lines = [line for line in text.split("\n") if line.strip()]
    if not looks_delimited(lines):
        return []

    delimiter = "\t" if "\t" in lines[0] else ","
    headers = [h.strip().lower() for h in lines[0].split(delimiter)]
    columns = map_header_roles(headers)
    rows = lines[1:] if columns else lines
    logger.debug(
        "Delimited text (%s), headers %s mapped to %s",
        "TAB" if delimiter == "\t" else "COMMA",
        headers,
        columns,
    )

    tasks: list[ExtractedTask] = []
    for line in rows:
        cells = [c.strip() for c in line.split(delimiter)]
        if not any(cells):
            continue
        task = _build_row_task(cells, columns, today)
        if task is not None:
            tasks.append(task)
    return tasks


# ---------------------------------------------------------------------------
# Free lines
# ---------------------------------------------------------------------------


def is_noise_line(line: str) -> bool:
    """Titles, column headers, markdown headings, table rows, and fragments."""
    return (
        len(line) < 3
        or line.startswith("#")
        or _PIPE_WRAPPED_RE.match(line) is not None
        or is_title_line(line)
        or is_header_line(line)
    )


def _parse_delimited_line(line: str, today: date | None) -> ExtractedTask | None:
    parts = [p.strip() for p in re.split(r"[,\t]", line)]
    if len(parts) < 2:
        return None

    name = strip_bullet(parts[0])
    amount = 1
    unit = settings.default_unit
    deadline = ""
    confidence = settings.line_base_confidence
    found_date = False
    found_amount = False

    for part in parts[1:]:
        if not found_date and looks_like_date(part):
            deadline = normalize_date(part, today)
            confidence += settings.field_match_bonus
            found_date = True
        if not found_amount:
            amount_match = find_amount(part)
            if not isinstance(amount_match, NoMatch):
                amount = amount_match.amount
                unit = amount_match.unit
                confidence += settings.field_match_bonus
                found_amount = True

    if len(name) <= 1:
        return None
    return ExtractedTask(
        name=name,
        amount=amount,
        unit=unit,
        deadline=deadline,
        confidence=clamp_confidence(confidence),
    )


def parse_line(line: str, today: date | None = None) -> ExtractedTask | None:
    """Extract a candidate from one free-form line such as
    ``数学ワークブック: P.1-50 (8月20日まで)`` or ``Math Workbook: Pages 1-40 (Due: Aug 20)``.

    Confidence starts at the line base and grows with each field found.
    Returns None for noise lines and lines without a usable name.
    """
    line = line.strip()
    if is_noise_line(line):
        logger.debug("Skipping noise line: %s", line)
        return None

    if "," in line or "\t" in line:
        task = _parse_delimited_line(line, today)
        if task is not None:
            return task

    confidence = settings.line_base_confidence
    amount = 1
    unit = settings.default_unit
    deadline = ""

    amount_match = match_amount(line)
    if not isinstance(amount_match, NoMatch):
        amount = amount_match.amount
        unit = amount_match.unit
        confidence += settings.field_match_bonus

    # a page range such as "1-50" must not be read as January 50th
    date_source = mask_span(line, amount_match) if isinstance(amount_match, RangeMatch) else line
    date_match = match_date(date_source, today)
    if not isinstance(date_match, NoMatch):
        deadline = date_match.isoformat()
        confidence += settings.field_match_bonus

    name, matched = extract_name(line)
    if matched:
        confidence += settings.name_match_bonus

    if len(name) <= 1:
        logger.debug("No usable name in line: %s", line)
        return None

    return ExtractedTask(
        name=name,
        amount=amount,
        unit=unit,
        deadline=deadline,
        confidence=clamp_confidence(confidence),
    )


def parse_free_lines(text: str, today: date | None = None) -> list[ExtractedTask]:
    """Parse every non-blank line independently."""
    tasks: list[ExtractedTask] = []
    for line in _non_blank_lines(text):
        task = parse_line(line, today)
        if task is not None:
            tasks.append(task)
    return tasks


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

PARSERS: dict[TextFormat, Callable[[str, date | None], list[ExtractedTask]]] = {
    TextFormat.TABLE: parse_table,
    TextFormat.DELIMITED: parse_delimited,
    TextFormat.FREE_LINE: parse_free_lines,
}


def parse_text(content: str, format: str, today: date | None = None) -> list[ExtractedTask]:
    """Dispatch to the parser for *format*.

    Args:
        content: Task list text.
        format: One of ``"table"``, ``"delimited"``, or ``"free_line"``.
        today: Reference date for year inference.

    Returns:
        Extracted candidates.

    Raises:
        ValueError: If *format* is not recognized.
    """
    try:
        parser = PARSERS[TextFormat(format)]
    except (KeyError, ValueError):
        msg = f"Unknown text format: {format!r}. Supported: {[f.value for f in PARSERS]}"
        raise ValueError(msg) from None

    return parser(normalize_text(content), today)
