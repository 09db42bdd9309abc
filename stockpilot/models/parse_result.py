from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "ProductRecord",
    "SkippedRow",
    "ParseResult",
    "COLUMN_COUNT_MISMATCH",
    "MISSING_REFERENCE",
    "INVALID_NUMBER",
]

# Field key -> coerced value. Always carries a non-empty "reference" once
# it leaves the parser.
ProductRecord = dict[str, Any]

COLUMN_COUNT_MISMATCH = "COLUMN_COUNT_MISMATCH"
MISSING_REFERENCE = "MISSING_REFERENCE"
INVALID_NUMBER = "INVALID_NUMBER"


@dataclass(frozen=True)
class SkippedRow:
    """A data line dropped by the parser."""
    line: int  # 1-based among non-blank lines (header = 1)
    reason: str  # one of the UPPER_SNAKE constants above
    detail: str = ""


@dataclass(frozen=True)
class ParseResult:
    records: list[ProductRecord] = field(default_factory=list)
    skipped: list[SkippedRow] = field(default_factory=list)
    header: list[str] = field(default_factory=list)

    @property
    def data_rows(self) -> int:
        """Number of data lines seen (kept + skipped)."""
        return len(self.records) + len(self.skipped)
