from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .channel import ValidationOutcome

"""In-memory channel used in mock mode (DISABLE_INGEST_CONNECT=1) and tests."""

__all__ = [
    "InMemoryChannel",
]


class InMemoryChannel:
    """Accepts every row and commits the latest token after a few polls.

    ``commit_after_polls`` is the number of offset reads that still report the
    previous committed token before the latest submitted one becomes visible.
    """

    def __init__(self, name: str = "memory", *, commit_after_polls: int = 0) -> None:
        self.name = name
        self.commit_after_polls = commit_after_polls
        self.rows: list[tuple[str, dict[str, Any]]] = []
        self.closed = False
        self._committed: str | None = None
        self._polls_since_insert = 0

    def insert_row(self, row: Mapping[str, Any], offset_token: str) -> ValidationOutcome:
        if self.closed:
            raise RuntimeError(f"channel {self.name} is closed")
        self.rows.append((offset_token, dict(row)))
        self._polls_since_insert = 0
        return ValidationOutcome.accepted()

    def get_latest_committed_offset_token(self) -> str | None:
        if self.rows and self._polls_since_insert >= self.commit_after_polls:
            self._committed = self.rows[-1][0]
        self._polls_since_insert += 1
        return self._committed

    def close(self) -> None:
        self.closed = True
