from __future__ import annotations

from ..models.processing_result import ConfirmationResult, SubmissionResult

"""SUMMARY line rendering.

Format:
SUMMARY rows_sent={n} rows_skipped={m} confirmed={true|false|skipped}
offset={token|-} elapsed_sec={s} throughput_rps={r}
"""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small numbers
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(
    submission: SubmissionResult, confirmation: ConfirmationResult | None
) -> str:
    """Render the final SUMMARY line.

    ``confirmation`` is None when nothing was sent and polling was skipped.
    ``elapsed_sec`` covers submission plus confirmation.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2023, 1, 1, tzinfo=timezone.utc)
        >>> sub = SubmissionResult(
        ...     rows_sent=0, rows_skipped=2, lines_read=2, start_time=t, end_time=t,
        ...     elapsed_seconds=0.0, throughput_rows_per_sec=0.0,
        ... )
        >>> render_summary_line(sub, None)
        'SUMMARY rows_sent=0 rows_skipped=2 confirmed=skipped offset=- elapsed_sec=0 throughput_rps=0'
    """
    elapsed = submission.elapsed_seconds
    if confirmation is None:
        confirmed = "skipped"
        offset = "-"
    else:
        confirmed = "true" if confirmation.confirmed else "false"
        offset = confirmation.last_seen if confirmation.last_seen is not None else "-"
        elapsed += confirmation.elapsed_seconds

    return (
        f"SUMMARY rows_sent={submission.rows_sent} "
        f"rows_skipped={submission.rows_skipped} "
        f"confirmed={confirmed} "
        f"offset={offset} "
        f"elapsed_sec={_format_number(elapsed)} "
        f"throughput_rps={_format_number(submission.throughput_rows_per_sec)}"
    )
