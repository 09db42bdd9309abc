from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""Batch import state and results.

State transitions: idle → confirming → running → completed, with
confirming → idle when the user declines the import.
"""


class ImportState(Enum):
    IDLE = "idle"
    CONFIRMING = "confirming"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass
class ImportTally:
    """Running success/error counters of one batch."""
    success: int = 0
    errors: int = 0

    @property
    def processed(self) -> int:
        return self.success + self.errors

    def reset(self) -> None:
        self.success = 0
        self.errors = 0


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one driver run, used for the SUMMARY line and exit code."""
    file_name: str
    state: ImportState
    total_records: int
    success: int
    errors: int
    skipped_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    cancelled: bool = False

    @property
    def declined(self) -> bool:
        return self.state is ImportState.IDLE
