from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

"""Ingestion channel contract.

The loader only ever talks to a backend through ``IngestChannel``. Buffering,
commit protocol and retries are the backend's business.
"""

__all__ = [
    "IngestConnectionError",
    "InsertError",
    "ValidationOutcome",
    "IngestChannel",
]


class IngestConnectionError(Exception):
    """Raised when the backend client or channel cannot be opened."""


@dataclass(frozen=True)
class InsertError:
    """A single row-level validation error reported by the backend."""
    message: str
    offset_token: str | None = None
    exception: BaseException | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ValidationOutcome:
    errors: tuple[InsertError, ...] = field(default_factory=tuple)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @classmethod
    def accepted(cls) -> ValidationOutcome:
        return cls()

    @classmethod
    def rejected(cls, *errors: InsertError) -> ValidationOutcome:
        if not errors:
            raise ValueError("a rejected outcome needs at least one error")
        return cls(errors=tuple(errors))


class IngestChannel(Protocol):
    """A named ingestion endpoint bound to one destination table."""

    def insert_row(self, row: Mapping[str, Any], offset_token: str) -> ValidationOutcome:
        ...

    def get_latest_committed_offset_token(self) -> str | None:
        ...

    def close(self) -> None:
        ...
