"""Bilingual (Japanese / English) vocabulary used to interpret task lists."""

from __future__ import annotations

import re
from collections.abc import Sequence
from enum import StrEnum

from planner.config import settings


class FieldRole(StrEnum):
    """Column roles a header cell can be classified into."""

    NAME = "name"
    AMOUNT = "amount"
    UNIT = "unit"
    DEADLINE = "deadline"


# Checked in this order; a header takes the first role whose keywords it contains.
HEADER_KEYWORDS: dict[FieldRole, tuple[str, ...]] = {
    FieldRole.NAME: ("課題", "名前", "タイトル", "科目", "教科", "name", "title", "subject"),
    FieldRole.AMOUNT: ("分量", "量", "数", "amount", "pages", "ページ", "page"),
    FieldRole.UNIT: ("単位", "unit"),
    FieldRole.DEADLINE: ("締切", "期限", "deadline", "due", "日付", "date", "期日"),
}

# Longer alternatives first so "pages" is not read as "p".
UNIT_TOKENS: tuple[str, ...] = (
    "ページ",
    "頁",
    "問題",
    "題",
    "枚",
    "冊",
    "回",
    "セット",
    "ユニット",
    "プロジェクト",
    "作品",
    "pages",
    "page",
    "P.",
    "p",
)

PAGE_ALIASES = frozenset({"p", "p.", "page", "pages"})

# Lines containing any of these are titles, not tasks.
TITLE_NOISE: tuple[str, ...] = (
    "課題一覧",
    "宿題一覧",
    "homework",
    "リスト",
    "---",
    "table",
    "list",
)

# Whole tokens that only ever appear in column-header rows.
HEADER_WORDS = frozenset(
    {keyword for keywords in HEADER_KEYWORDS.values() for keyword in keywords}
    | {"課題名", "締切日", "提出日", "no", "no.", "#"}
)

_TOKEN_SPLIT_RE = re.compile(r"[\s,\t|/:：・()（）]+")


def map_header_roles(headers: Sequence[str]) -> dict[FieldRole, int]:
    """Map each role to the column index of the first header that claims it.

    A header claims the first role (in :data:`HEADER_KEYWORDS` order) it
    matches that no earlier header has already claimed.  Cells containing
    digits are values, not headers, and claim nothing.
    """
    columns: dict[FieldRole, int] = {}
    for index, header in enumerate(headers):
        text = header.strip().lower()
        if not text or any(ch.isdigit() for ch in text):
            continue
        for role, keywords in HEADER_KEYWORDS.items():
            if role in columns:
                continue
            if any(keyword in text for keyword in keywords):
                columns[role] = index
                break
    return columns


def canonical_unit(unit: str) -> str:
    """Fold page abbreviations into the default page label."""
    unit = unit.strip()
    if not unit or unit.lower() in PAGE_ALIASES:
        return settings.default_unit
    return unit


def is_title_line(line: str) -> bool:
    lowered = line.lower()
    return any(token in lowered for token in TITLE_NOISE)


def is_header_line(line: str) -> bool:
    """True when every token on *line* is a column-header word."""
    tokens = [t for t in _TOKEN_SPLIT_RE.split(line.lower()) if t]
    if not tokens:
        return False
    return all(token in HEADER_WORDS for token in tokens)
