from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime

"""Result models for the submission and confirmation phases."""

__all__ = [
    "SubmissionResult",
    "ConfirmationStatus",
    "ConfirmationResult",
]


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of pushing every line of one data file into the channel."""
    rows_sent: int  # Rows accepted by the channel
    rows_skipped: int  # Lines dropped for field-count mismatch
    lines_read: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float

    @property
    def last_row_id(self) -> int | None:
        """Identifier of the last submitted row, None when nothing was sent."""
        if self.rows_sent == 0:
            return None
        return self.rows_sent - 1

    @property
    def expected_offset_token(self) -> str | None:
        last = self.last_row_id
        return None if last is None else str(last)


class ConfirmationStatus(enum.Enum):
    POLLING = "polling"
    CONFIRMED = "confirmed"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class ConfirmationResult:
    """Terminal state of the delivery confirmation poller."""
    status: ConfirmationStatus
    expected: str
    last_seen: str | None  # Last committed offset token observed (None = never)
    retries: int
    elapsed_seconds: float

    @property
    def confirmed(self) -> bool:
        return self.status is ConfirmationStatus.CONFIRMED
