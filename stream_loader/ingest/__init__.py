from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager

from ..models.config_models import LoaderConfig
from .channel import IngestChannel, IngestConnectionError, InsertError, ValidationOutcome
from .memory import InMemoryChannel

"""Ingestion client adapters.

``open_channel`` is the only way the CLI acquires a channel. Set
``DISABLE_INGEST_CONNECT=1`` to run against ``InMemoryChannel`` (mock mode).
"""

__all__ = [
    "IngestChannel",
    "IngestConnectionError",
    "InsertError",
    "ValidationOutcome",
    "InMemoryChannel",
    "open_channel",
    "mock_mode_enabled",
]

logger = logging.getLogger(__name__)


def mock_mode_enabled() -> bool:
    return os.getenv("DISABLE_INGEST_CONNECT") == "1"


@contextmanager
def open_channel(cfg: LoaderConfig) -> Iterator[IngestChannel]:
    """Acquire a channel for the whole file; it is closed on every exit path."""
    if mock_mode_enabled():
        logger.debug("ingest connect disabled via DISABLE_INGEST_CONNECT=1 -> mock mode")
        channel = InMemoryChannel(cfg.get("channel_name") or "memory")
        try:
            yield channel
        finally:
            channel.close()
        return

    from .snowflake import open_snowflake_channel

    with open_snowflake_channel(cfg) as channel:
        yield channel
