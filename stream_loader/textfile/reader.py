from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path

from stream_loader.models.row_data import RowData

"""Delimited text reader.

One record per line, no header row. Fields are split on the literal
delimiter only: there is no quoting or escaping, so a delimiter inside a value
always starts a new field.
"""

__all__ = [
    "iter_lines",
    "split_line",
    "build_row",
]


def iter_lines(path: Path, encoding: str = "utf-8") -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, line)`` pairs with the line terminator removed.

    Line numbers are 1-based. Only the terminator (``\\n``, ``\\r\\n`` or
    ``\\r``) is removed, surrounding whitespace belongs to the fields.
    """
    with path.open("r", encoding=encoding, newline="") as f:
        for number, line in enumerate(f, start=1):
            if line.endswith("\r\n"):
                line = line[:-2]
            elif line.endswith(("\n", "\r")):
                line = line[:-1]
            yield number, line


def split_line(line: str, delimiter: str) -> list[str]:
    return line.split(delimiter)


def build_row(
    fields: Sequence[str], columns: Sequence[str], *, line_number: int, row_id: int
) -> RowData | None:
    """Map ``fields`` onto ``columns`` by position.

    Returns None when the field count differs from the column count; such a
    line must not consume a row identifier.
    """
    if len(fields) != len(columns):
        return None
    return RowData(
        line_number=line_number,
        row_id=row_id,
        values=dict(zip(columns, fields)),
    )
