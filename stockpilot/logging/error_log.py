from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord

"""Per-run JSON Lines diagnostics.

Skipped rows and failed products are collected while an import runs and
appended to ``<logs_dir>/errors-YYYYMMDD-HHMMSS.log`` (UTC stamp taken when
the buffer is created). The directory and file only appear once a record is
actually written.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

logger = logging.getLogger(__name__)

DEFAULT_LOGS_DIR = Path("./logs")


class ErrorLogBuffer:
    """Collects error records and appends them to the run's log file."""

    def __init__(self, logs_dir: Path | None = None) -> None:
        self.logs_dir = logs_dir if logs_dir is not None else DEFAULT_LOGS_DIR
        stamp = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
        self.file_path = self.logs_dir / f"errors-{stamp}.log"
        self.written = 0
        self._pending: list[ErrorRecord] = []

    def append(self, record: ErrorRecord) -> None:
        self._pending.append(record)

    def __len__(self) -> int:
        return len(self._pending)

    def flush(self) -> Path | None:
        """Write pending records.

        Returns the log file once anything has been written in this run,
        None otherwise. Pending records are kept when writing fails.

        Raises:
            OSError: the directory or file cannot be written
        """
        if self._pending:
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            lines = "".join(r.to_json_line() + "\n" for r in self._pending)
            with self.file_path.open("a", encoding="utf-8") as f:
                f.write(lines)
            self.written += len(self._pending)
            self._pending.clear()
        return self.file_path if self.written else None

    def try_flush(self) -> Path | None:
        """Like ``flush`` but a write failure only produces a WARN line."""
        try:
            return self.flush()
        except OSError as e:
            logger.warning("could not write error log %s: %s", self.file_path, e)
            return None
