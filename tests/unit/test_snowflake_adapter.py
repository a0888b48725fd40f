from __future__ import annotations

import sys
from unittest.mock import MagicMock

import pytest

from stream_loader.ingest.channel import IngestConnectionError
from stream_loader.ingest.snowflake import SnowflakeChannel, _client_properties, open_snowflake_channel


def test_channel_wraps_append_row():
    sdk = MagicMock()
    channel = SnowflakeChannel(sdk)
    outcome = channel.insert_row({"a": "1"}, "0")
    assert not outcome.has_errors
    sdk.append_row.assert_called_once_with({"a": "1"}, "0")


def test_channel_append_failure_becomes_rejection():
    sdk = MagicMock()
    sdk.append_row.side_effect = ValueError("column A is not nullable")
    outcome = SnowflakeChannel(sdk).insert_row({"a": None}, "3")
    assert outcome.has_errors
    err = outcome.errors[0]
    assert err.message == "column A is not nullable"
    assert err.offset_token == "3"
    assert isinstance(err.exception, ValueError)


def test_channel_offset_and_close():
    sdk = MagicMock()
    sdk.get_latest_committed_offset_token.return_value = "41"
    channel = SnowflakeChannel(sdk)
    assert channel.get_latest_committed_offset_token() == "41"
    channel.close()
    sdk.close.assert_called_once()


def test_client_properties_drop_loader_keys(make_config):
    cfg = make_config(properties={
        "columns": "a,b,c", "delimiter": ",", "DEBUG": "true", "private_key_file": "k.p8",
        "private_key": "MIIB", "account": "acme", "scheme": "https", "port": "443",
    })
    assert _client_properties(cfg) == {
        "private_key": "MIIB", "account": "acme", "scheme": "https", "port": "443",
    }


def test_open_requires_connection_keys(make_config):
    cfg = make_config(properties={"channel_name": "CH", "database": "DB"})
    with pytest.raises(IngestConnectionError, match="missing connection properties: schema, table"):
        with open_snowflake_channel(cfg):
            pass


def test_open_without_sdk(make_config, monkeypatch):
    monkeypatch.setitem(sys.modules, "snowflake.ingest.streaming", None)
    cfg = make_config(properties={"channel_name": "CH", "database": "DB", "schema": "S", "table": "T"})
    with pytest.raises(IngestConnectionError, match="snowpipe-streaming SDK not available"):
        with open_snowflake_channel(cfg):
            pass
