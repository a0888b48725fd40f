from __future__ import annotations

from dataclasses import dataclass

"""RowData model.

A RowData is one input line that matched the configured column count and was
therefore assigned a row identifier.
"""

__all__ = [
    "RowData",
]


@dataclass(frozen=True)
class RowData:
    """A well-shaped input line ready for submission."""
    line_number: int  # 1-based physical line number in the data file
    row_id: int  # Contiguous from 0, skipped lines do not consume one
    values: dict[str, str]  # Column name -> raw field value

    @property
    def offset_token(self) -> str:
        return str(self.row_id)
