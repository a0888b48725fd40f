from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

Records are written as JSON Lines by ``stream_loader.logging.error_log``.
``line`` and ``row_id`` use -1 when the failure is not tied to a specific
input line (e.g. offset confirmation).
"""

__all__ = [
    "ErrorRecord",
]

SHAPE_MISMATCH = "SHAPE_MISMATCH"
ROW_REJECTED = "ROW_REJECTED"
OFFSET_NOT_CONFIRMED = "OFFSET_NOT_CONFIRMED"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Data file name being loaded
        line: 1-based line number, -1 when unknown
        row_id: Row identifier, -1 when none was assigned
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Backend or loader message
    """
    timestamp: str
    file: str
    line: int
    row_id: int
    error_type: str
    message: str

    @staticmethod
    def create(file: str, line: int, row_id: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            line=line,
            row_id=row_id,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (fixed key set)."""
        return json.dumps(asdict(self), ensure_ascii=False)
