from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..ingest.channel import IngestChannel, InsertError
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import LoaderConfig
from ..models.error_record import ROW_REJECTED, SHAPE_MISMATCH, ErrorRecord
from ..models.processing_result import SubmissionResult
from ..models.row_data import RowData
from ..textfile.reader import build_row, iter_lines, split_line
from .progress import ProgressTracker

"""Submission loop.

Reads the data file line by line and hands each well-shaped line to the
channel with its row identifier as offset token.

Failure policy:
- field count != column count: the line is skipped and counted, no
  identifier is consumed, processing continues
- any validation error from the channel: processing stops at once and
  ``RowRejectedError`` carries the first error. The backend channel may be
  opened with a continue-on-error option; the loader still aborts.
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Base exception for processing errors."""
    pass


class RowRejectedError(ProcessingError):
    """The channel rejected a row; nothing after it was submitted."""

    def __init__(self, row: RowData, error: InsertError) -> None:
        self.row = row
        self.error = error
        super().__init__(
            f"line {row.line_number} (row {row.row_id}) rejected: {error.message}"
        )


def submit_rows(
    cfg: LoaderConfig,
    lines: Iterable[tuple[int, str]],
    channel: IngestChannel,
    *,
    file_name: str = "-",
    error_log: ErrorLogBuffer | None = None,
    progress: ProgressTracker | None = None,
) -> SubmissionResult:
    """Submit every well-shaped line to ``channel``.

    Args:
        cfg: Loader configuration (columns, delimiter)
        lines: ``(line_number, text)`` pairs, see ``iter_lines``
        channel: Open ingestion channel
        file_name: Name recorded in error log entries
        error_log: Optional buffer for skipped/rejected rows
        progress: Optional progress display

    Returns:
        SubmissionResult with sent/skipped counts and timing

    Raises:
        RowRejectedError: on the first row-level validation error
    """
    start_time = datetime.now(UTC)
    next_row_id = 0
    skipped = 0
    lines_read = 0

    for line_number, line in lines:
        lines_read += 1
        if cfg.debug:
            logger.debug(f"Loading line {line_number}")

        fields = split_line(line, cfg.delimiter)
        row = build_row(fields, cfg.columns, line_number=line_number, row_id=next_row_id)
        if row is None:
            skipped += 1
            message = (
                f"column/delimiter mismatch (expected {cfg.column_count} fields, got {len(fields)})"
            )
            logger.info(f"Skipping line {line_number}: {message}")
            if error_log is not None:
                error_log.append(ErrorRecord.create(file_name, line_number, -1, SHAPE_MISMATCH, message))
        else:
            outcome = channel.insert_row(row.values, row.offset_token)
            if outcome.has_errors:
                first = outcome.errors[0]
                if error_log is not None:
                    error_log.append(
                        ErrorRecord.create(file_name, line_number, row.row_id, ROW_REJECTED, first.message)
                    )
                raise RowRejectedError(row, first) from first.exception
            next_row_id += 1

        if progress is not None:
            progress.advance(sent=next_row_id, skipped=skipped)

    end_time = datetime.now(UTC)
    elapsed = (end_time - start_time).total_seconds()
    throughput = next_row_id / elapsed if elapsed > 0 else 0.0

    logger.info(f"Rows Sent: {next_row_id}")
    logger.info(f"Rows Skipped: {skipped}")
    logger.info(f"Time to Send: {elapsed:.3f} seconds")

    return SubmissionResult(
        rows_sent=next_row_id,
        rows_skipped=skipped,
        lines_read=lines_read,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed,
        throughput_rows_per_sec=throughput,
    )


def process_file(
    cfg: LoaderConfig,
    path: Path,
    channel: IngestChannel,
    *,
    error_log: ErrorLogBuffer | None = None,
) -> SubmissionResult:
    """Submit the rows of one data file, with TTY progress.

    Raises:
        ProcessingError: data file missing or unreadable
        RowRejectedError: on the first row-level validation error
    """
    if not path.exists():
        raise ProcessingError(f"data file not found: {path}")
    if not path.is_file():
        raise ProcessingError(f"data path is not a file: {path}")

    with ProgressTracker(path.name) as progress:
        try:
            return submit_rows(
                cfg,
                iter_lines(path, cfg.encoding),
                channel,
                file_name=path.name,
                error_log=error_log,
                progress=progress,
            )
        except (OSError, UnicodeDecodeError, LookupError) as e:
            raise ProcessingError(f"cannot read data file {path}: {e}") from e
