from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..ingest.channel import IngestChannel
from ..models.processing_result import ConfirmationResult, ConfirmationStatus

"""Delivery confirmation poller.

After the last row is submitted the channel's latest committed offset token
is polled until it equals the expected token (the last row identifier as a
string) or the retry budget runs out. The wait between polls is linear in the
amount of data sent; there is no exponential growth and no jitter.
"""

__all__ = [
    "MAX_RETRIES",
    "MIN_POLL_INTERVAL",
    "poll_interval",
    "wait_for_offset",
]

logger = logging.getLogger(__name__)

MAX_RETRIES = 100
MIN_POLL_INTERVAL = 0.1  # seconds


def poll_interval(rows_sent: int, column_count: int) -> float:
    """Seconds to wait between polls: larger files wait longer.

    ``rows / 1000 * columns`` milliseconds, floored at MIN_POLL_INTERVAL.
    """
    return max(MIN_POLL_INTERVAL, rows_sent / 1000 * column_count / 1000)


def wait_for_offset(
    channel: IngestChannel,
    expected: str,
    *,
    interval: float = MIN_POLL_INTERVAL,
    max_retries: int = MAX_RETRIES,
    sleep: Callable[[float], None] | None = None,
) -> ConfirmationResult:
    """Poll until ``expected`` is committed or ``max_retries`` re-reads failed.

    The first read is not a retry. Each mismatch is followed by a sleep and a
    re-read; after ``max_retries`` such re-reads without a match the result is
    EXHAUSTED.
    """
    sleep = sleep or time.sleep
    started = time.monotonic()
    retries = 0

    token = channel.get_latest_committed_offset_token()
    status = ConfirmationStatus.POLLING
    while status is ConfirmationStatus.POLLING:
        logger.debug(f"Offset: {token}")
        if token is not None and token == expected:
            status = ConfirmationStatus.CONFIRMED
        elif retries >= max_retries:
            status = ConfirmationStatus.EXHAUSTED
        else:
            sleep(interval)
            token = channel.get_latest_committed_offset_token()
            retries += 1

    elapsed = time.monotonic() - started
    if status is ConfirmationStatus.EXHAUSTED:
        logger.error(
            f"Failed to find committed offset token {expected} after {max_retries} retries "
            f"(last seen: {token})"
        )
    return ConfirmationResult(
        status=status,
        expected=expected,
        last_seen=token,
        retries=retries,
        elapsed_seconds=elapsed,
    )
