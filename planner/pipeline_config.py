"""Extraction configuration: text format enum and ExtractionConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum


class TextFormat(StrEnum):
    """Layouts the extractor knows how to read."""

    AUTO = "auto"
    TABLE = "table"
    DELIMITED = "delimited"
    FREE_LINE = "free_line"


@dataclass(frozen=True)
class ExtractionConfig:
    """Immutable options for one extraction call.

    ``AUTO`` runs the table -> delimited -> free-line cascade; any other
    format runs that parser alone.  ``reference_date`` anchors year
    inference for month/day dates and defaults to today.
    """

    format: TextFormat = TextFormat.AUTO
    reference_date: date | None = None

    def today(self) -> date:
        return self.reference_date or date.today()
