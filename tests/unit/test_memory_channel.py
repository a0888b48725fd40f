from __future__ import annotations

import pytest

from stream_loader.ingest import open_channel
from stream_loader.ingest.memory import InMemoryChannel


def test_memory_channel_commits_latest_token():
    channel = InMemoryChannel()
    assert channel.get_latest_committed_offset_token() is None
    channel.insert_row({"a": "1"}, "0")
    channel.insert_row({"a": "2"}, "1")
    assert channel.get_latest_committed_offset_token() == "1"
    assert channel.rows == [("0", {"a": "1"}), ("1", {"a": "2"})]


def test_memory_channel_commit_lag():
    channel = InMemoryChannel(commit_after_polls=2)
    channel.insert_row({"a": "1"}, "0")
    assert channel.get_latest_committed_offset_token() is None
    assert channel.get_latest_committed_offset_token() is None
    assert channel.get_latest_committed_offset_token() == "0"


def test_memory_channel_rejects_after_close():
    channel = InMemoryChannel()
    channel.close()
    with pytest.raises(RuntimeError, match="closed"):
        channel.insert_row({"a": "1"}, "0")


def test_open_channel_mock_mode_closes_on_error(make_config):
    cfg = make_config(properties={"channel_name": "CH1"})
    with pytest.raises(KeyError):
        with open_channel(cfg) as channel:
            assert isinstance(channel, InMemoryChannel)
            assert channel.name == "CH1"
            raise KeyError("boom")
    assert channel.closed
