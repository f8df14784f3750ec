"""Date token normalization to ISO ``YYYY-MM-DD``."""

from __future__ import annotations

import re
from datetime import date

from planner.extraction.models import DateMatch

_ISO_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
_YMD_RE = re.compile(r"(\d{4})[/\-](\d{1,2})[/\-](\d{1,2})")
_MDY_RE = re.compile(r"(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})")
_MONTH_DAY_RE = re.compile(r"(\d{1,2})[月/](\d{1,2})")
_COMPACT_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")

# Month/day pairs from September on refer to the term after the summer break.
NEXT_YEAR_FROM_MONTH = 9

_MONTHS = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}


def month_to_int(month_str: str) -> int:
    return _MONTHS[month_str.strip().rstrip(".").lower()]


def infer_year(month: int, today: date | None = None) -> int:
    """Year for a month/day pair written without one."""
    today = today or date.today()
    return today.year + 1 if month >= NEXT_YEAR_FROM_MONTH else today.year


def make_date(year: int, month: int, day: int, span: tuple[int, int] = (0, 0)) -> DateMatch | None:
    """Build a DateMatch, or None when the fields are not a real calendar date."""
    try:
        date(year, month, day)
    except ValueError:
        return None
    return DateMatch(year=year, month=month, day=day, span=span)


def month_day(month: int, day: int, today: date | None = None, span: tuple[int, int] = (0, 0)) -> DateMatch | None:
    return make_date(infer_year(month, today), month, day, span)


def normalize_date(date_str: str, today: date | None = None) -> str:
    """Normalize a loosely formatted date token to ``YYYY-MM-DD``.

    Recognized, in order: ISO (returned as-is), ``YYYY/M/D``, ``M/D/YYYY``,
    ``M月D`` or ``M/D`` without a year (year inferred from *today*), and
    ``YYYYMMDD``.  ``-`` may replace ``/`` where a year is present.  Anything
    else, including impossible dates, is returned unchanged.
    """
    text = (date_str or "").strip()
    if not text:
        return ""

    if _ISO_RE.match(text):
        return text

    candidates: list[DateMatch | None] = []

    m = _YMD_RE.search(text)
    if m:
        candidates.append(make_date(int(m.group(1)), int(m.group(2)), int(m.group(3))))

    m = _MDY_RE.search(text)
    if m:
        candidates.append(make_date(int(m.group(3)), int(m.group(1)), int(m.group(2))))

    m = _MONTH_DAY_RE.search(text)
    if m:
        candidates.append(month_day(int(m.group(1)), int(m.group(2)), today))

    m = _COMPACT_RE.match(text)
    if m:
        candidates.append(make_date(int(m.group(1)), int(m.group(2)), int(m.group(3))))

    for candidate in candidates:
        if candidate is not None:
            return candidate.isoformat()
    return text
