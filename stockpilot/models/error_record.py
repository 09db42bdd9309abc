from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

``line`` is the 1-based position of the row among the non-blank lines of the
CSV file; -1 is used when a failure is not tied to a single line (file-level
errors, write failures where the record no longer knows its origin line).
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: CSV file name being imported
        line: Line number (1-based) or -1 when unknown
        reference: Product reference, empty when the row had none
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human readable cause
    """
    timestamp: str
    file: str
    line: int
    reference: str
    error_type: str
    message: str

    @staticmethod
    def create(file: str, line: int, reference: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            line=line,
            reference=reference,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON object without extra keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
