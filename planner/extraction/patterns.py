"""Ordered text templates for dates, amounts, and task names.

Each table is a list of ``(pattern, extractor)`` pairs tried in order; the
first extractor that returns a result wins.  Extractors return ``None`` for a
regex hit that does not hold up (an impossible date, an inverted range), in
which case the search continues.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date

from planner.config import settings
from planner.extraction.dates import make_date, month_day, month_to_int
from planner.extraction.models import DateMatch, MatchResult, NoMatch, RangeMatch, SingleMatch
from planner.extraction.vocabulary import UNIT_TOKENS, canonical_unit

DateExtractor = Callable[[re.Match[str], date | None, str], DateMatch | None]
AmountExtractor = Callable[[re.Match[str]], RangeMatch | SingleMatch | None]

NO_MATCH = NoMatch()

# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

_SECONDARY_DATE_RE = re.compile(r"(?<![\d/.\-])(\d{1,2})\s*[月/.]\s*(\d{1,2})(?![\d/])")

_MONTH_NAMES = (
    r"jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?"
)


def _month_day(m: re.Match[str], today: date | None, line: str) -> DateMatch | None:
    return month_day(int(m.group(1)), int(m.group(2)), today, m.span())


def _named_month(m: re.Match[str], today: date | None, line: str) -> DateMatch | None:
    return month_day(month_to_int(m.group(1)), int(m.group(2)), today, m.span())


def _year_first(m: re.Match[str], today: date | None, line: str) -> DateMatch | None:
    return make_date(int(m.group(1)), int(m.group(2)), int(m.group(3)), m.span())


def _year_last(m: re.Match[str], today: date | None, line: str) -> DateMatch | None:
    return make_date(int(m.group(3)), int(m.group(1)), int(m.group(2)), m.span())


def _after_keyword(m: re.Match[str], today: date | None, line: str) -> DateMatch | None:
    """A deadline keyword counts only if a month/day appears in the line."""
    for found in _SECONDARY_DATE_RE.finditer(line):
        result = month_day(int(found.group(1)), int(found.group(2)), today, found.span())
        if result is not None:
            return result
    return None


DATE_TEMPLATES: list[tuple[re.Pattern[str], DateExtractor]] = [
    (re.compile(r"(\d{1,2})\s*月\s*(\d{1,2})\s*日"), _month_day),
    (re.compile(r"(?<![\d/])(\d{1,2})/(\d{1,2})(?![\d/])"), _month_day),
    (re.compile(rf"\b({_MONTH_NAMES})\.?\s+(\d{{1,2}})(?!\d)", re.IGNORECASE), _named_month),
    (re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})"), _year_first),
    (re.compile(r"(?<![\d\-/.])(\d{1,2})-(\d{1,2})(?![\d\-/])"), _month_day),
    (re.compile(r"まで|締切|期限|\bdue\b", re.IGNORECASE), _after_keyword),
    (re.compile(r"(?<!\d)(\d{1,2})/(\d{1,2})/(\d{4})"), _year_last),
    (re.compile(r"(\d{4})/(\d{1,2})/(\d{1,2})"), _year_first),
]


def match_date(line: str, today: date | None = None) -> DateMatch | NoMatch:
    """Find the first deadline in *line* using :data:`DATE_TEMPLATES`."""
    for pattern, extract in DATE_TEMPLATES:
        for m in pattern.finditer(line):
            result = extract(m, today, line)
            if result is not None:
                return result
    return NO_MATCH


_DATE_LIKE_RE = re.compile(r"(?<![\d.])\d{1,2}[/\-月]\d{1,2}")


def looks_like_date(text: str) -> bool:
    """Loose test for cells that hold a date (``8/20``, ``8月20日``, ``2024-08-20``)."""
    return _DATE_LIKE_RE.search(text) is not None


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------


def _single(m: re.Match[str]) -> SingleMatch | None:
    if int(m.group(1)) == 0:
        return None
    return SingleMatch(amount=int(m.group(1)), unit=canonical_unit(m.group(2)), span=m.span())


def _page_range(m: re.Match[str]) -> RangeMatch | None:
    low, high = int(m.group(1)), int(m.group(2))
    if high < low:
        return None
    return RangeMatch(low=low, high=high, unit=settings.default_unit, span=m.span())


def _unit_range(m: re.Match[str]) -> RangeMatch | None:
    low, high = int(m.group(1)), int(m.group(2))
    if high < low:
        return None
    return RangeMatch(low=low, high=high, unit=canonical_unit(m.group(3)), span=m.span())


_RANGE_DASH = r"[\-‐－~〜～]"
# the upper bound of "5～20ページ" is not a page count on its own
_NOT_RANGE_END = r"(?<![\d\-‐－~〜～])(?<![\-‐－~〜～]\s)"

AMOUNT_TEMPLATES: list[tuple[re.Pattern[str], AmountExtractor]] = [
    (re.compile(rf"{_NOT_RANGE_END}(\d+)\s*(ページ|頁|pages?(?![a-z])|P(?:\.|(?![a-z])))", re.IGNORECASE), _single),
    (re.compile(rf"(?<![a-z])P\.?\s*(\d+)\s*{_RANGE_DASH}\s*(\d+)", re.IGNORECASE), _page_range),
    (re.compile(r"(\d+)\s*(枚|冊|問題|題|回|日分|作品|テーマ)"), _single),
    (re.compile(rf"\bPages?\s+(\d+)\s*{_RANGE_DASH}\s*(\d+)", re.IGNORECASE), _page_range),
    (re.compile(rf"(\d+)\s*{_RANGE_DASH}\s*(\d+)\s*(ページ|頁)"), _unit_range),
    (re.compile(r"全\s*(\d+)\s*(ページ|問題|枚)"), _single),
]


def match_amount(line: str) -> RangeMatch | SingleMatch | NoMatch:
    """Find the first workload amount in *line* using :data:`AMOUNT_TEMPLATES`."""
    for pattern, extract in AMOUNT_TEMPLATES:
        for m in pattern.finditer(line):
            result = extract(m)
            if result is not None:
                return result
    return NO_MATCH


_CELL_AMOUNT_RE = re.compile(
    r"(\d+)\s*(" + "|".join(re.escape(u) for u in UNIT_TOKENS) + r")(?![a-z])",
    re.IGNORECASE,
)


def find_amount(text: str) -> SingleMatch | NoMatch:
    """Match ``<number><unit>`` in a single cell or field, e.g. ``30ページ``, ``5 pages``."""
    m = _CELL_AMOUNT_RE.search(text)
    if m is None:
        return NO_MATCH
    return _single(m) or NO_MATCH


def mask_span(line: str, result: MatchResult) -> str:
    """Blank out the characters a match consumed, keeping offsets stable."""
    if isinstance(result, NoMatch):
        return line
    start, end = result.span
    return line[:start] + " " * (end - start) + line[end:]


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------

_BULLET = r"(?:[・•\-\*]|\d{1,2}[.)、])"
_NAME_RE = re.compile(rf"^{_BULLET}?\s*([^:：\d()（）]+?)(?:\s*[:：]|\s*\d|\s*[(（]|$)")
_NAME_NOISE_RE = re.compile(r"[（）()、。「」【】]")
_TRAILING_NOISE_RE = re.compile(r"[0-9\-/：:・•()（）\s]*$")
_LEADING_BULLET_RE = re.compile(rf"^\s*{_BULLET}\s*")


def strip_bullet(text: str) -> str:
    return _LEADING_BULLET_RE.sub("", text).strip()


def extract_name(line: str) -> tuple[str, bool]:
    """Pull a task name from the start of *line*.

    Returns:
        ``(name, matched)`` where *matched* is False when the fallback
        (trailing digits and punctuation stripped from the whole line) was used.
    """
    m = _NAME_RE.match(line)
    if m:
        return _NAME_NOISE_RE.sub("", m.group(1)).strip(), True
    return strip_bullet(_TRAILING_NOISE_RE.sub("", line)), False
