from __future__ import annotations

import uuid
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from ..models.config_models import LoaderConfig
from .channel import IngestConnectionError, InsertError, ValidationOutcome

"""Snowpipe Streaming adapter.

Thin wrapper over the ``snowflake.ingest.streaming`` SDK (distribution
``snowpipe-streaming``, installed with the ``snowflake`` extra). The SDK is
imported lazily so that mock mode and the tests never need it.
"""

__all__ = [
    "SnowflakeChannel",
    "open_snowflake_channel",
    "REQUIRED_KEYS",
]

REQUIRED_KEYS = ("channel_name", "database", "schema", "table")

# Loader-only keys that are not forwarded to the SDK
_LOADER_KEYS = frozenset({"columns", "delimiter", "debug", "DEBUG", "encoding", "private_key_file"})


class SnowflakeChannel:
    """Adapts an SDK channel to ``IngestChannel``."""

    def __init__(self, channel: Any) -> None:
        self._channel = channel

    def insert_row(self, row: Mapping[str, Any], offset_token: str) -> ValidationOutcome:
        try:
            self._channel.append_row(dict(row), offset_token)
        except Exception as e:  # SDK raises on row-level validation failures
            return ValidationOutcome.rejected(
                InsertError(message=str(e), offset_token=offset_token, exception=e)
            )
        return ValidationOutcome.accepted()

    def get_latest_committed_offset_token(self) -> str | None:
        return self._channel.get_latest_committed_offset_token()

    def close(self) -> None:
        self._channel.close()


def _client_properties(cfg: LoaderConfig) -> dict[str, str]:
    return {k: v for k, v in cfg.properties.items() if k not in _LOADER_KEYS}


@contextmanager
def open_snowflake_channel(cfg: LoaderConfig) -> Iterator[SnowflakeChannel]:  # pragma: no cover (needs a live account)
    """Open client + channel, closing both on every exit path."""
    missing = [k for k in REQUIRED_KEYS if not cfg.get(k)]
    if missing:
        raise IngestConnectionError(f"missing connection properties: {', '.join(missing)}")

    try:
        from snowflake.ingest.streaming import StreamingIngestClient
    except ImportError as e:
        raise IngestConnectionError(
            f"snowpipe-streaming SDK not available (install the 'snowflake' extra): {e}"
        ) from e

    table = cfg.get("table")
    pipe = cfg.get("pipe") or f"{table}-STREAMING"
    try:
        client = StreamingIngestClient(
            client_name=cfg.get("client_name") or f"stream_loader_{uuid.uuid4().hex[:8]}",
            db_name=cfg.get("database"),
            schema_name=cfg.get("schema"),
            pipe_name=pipe,
            properties=_client_properties(cfg),
        )
    except Exception as e:
        raise IngestConnectionError(f"cannot create ingest client: {e}") from e

    try:
        try:
            sdk_channel, _status = client.open_channel(cfg.get("channel_name"))
        except Exception as e:
            raise IngestConnectionError(f"cannot open channel {cfg.get('channel_name')}: {e}") from e
        channel = SnowflakeChannel(sdk_channel)
        try:
            yield channel
        finally:
            channel.close()
    finally:
        client.close()
