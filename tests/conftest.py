# Shared pytest fixtures
from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import pytest

from stream_loader.ingest.channel import InsertError, ValidationOutcome
from stream_loader.logging.init import APP_LOGGER_NAME, reset_logging
from stream_loader.models.config_models import LoaderConfig


class ScriptedChannel:
    """Channel double: rejects chosen tokens, replays scripted commit tokens.

    Once the ``committed`` script is used up the last value keeps being
    reported.
    """

    def __init__(self, *, reject_tokens: tuple[str, ...] = (), committed: list[str | None] | None = None) -> None:
        self.attempts: list[tuple[str, dict[str, Any]]] = []
        self.reject_tokens = set(reject_tokens)
        self._committed = list(committed or [])
        self._last: str | None = None
        self.polls = 0
        self.close_calls = 0

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    @property
    def tokens(self) -> list[str]:
        return [t for t, _ in self.attempts]

    def insert_row(self, row: Mapping[str, Any], offset_token: str) -> ValidationOutcome:
        self.attempts.append((offset_token, dict(row)))
        if offset_token in self.reject_tokens:
            return ValidationOutcome.rejected(
                InsertError(
                    message=f"Numeric value 'x' is not recognized (row {offset_token})",
                    offset_token=offset_token,
                    exception=ValueError("Numeric value 'x' is not recognized"),
                )
            )
        return ValidationOutcome.accepted()

    def get_latest_committed_offset_token(self) -> str | None:
        self.polls += 1
        if self._committed:
            self._last = self._committed.pop(0)
        return self._last

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture(autouse=True)
def _clean_logging_and_env(monkeypatch) -> Iterator[None]:
    # never reach a live backend from the test suite
    monkeypatch.setenv("DISABLE_INGEST_CONNECT", "1")
    reset_logging()
    yield
    reset_logging()
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    for h in app_logger.handlers[:]:
        app_logger.removeHandler(h)
    app_logger.setLevel(logging.NOTSET)
    app_logger.propagate = True


@pytest.fixture()
def temp_workdir(monkeypatch) -> Iterator[Path]:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_properties() -> str:
    return """# loader settings
columns=a,b,c
delimiter=,
channel_name=MY_CHANNEL
database=MY_DB
schema=MY_SCHEMA
table=MY_TABLE
account=myaccount
user=loader
scheme=http
port=8080
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_properties: str) -> Path:
    cfg = temp_workdir / "config" / "loader.properties"
    cfg.write_text(sample_properties, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_data(temp_workdir: Path) -> Callable[..., Path]:
    def _write(lines: list[str], name: str = "input.csv") -> Path:
        f = temp_workdir / "data" / name
        f.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return f
    return _write


@pytest.fixture()
def make_config() -> Callable[..., LoaderConfig]:
    def _make(columns: tuple[str, ...] = ("a", "b", "c"), **kwargs: Any) -> LoaderConfig:
        return LoaderConfig(columns=columns, **kwargs)
    return _make


@pytest.fixture()
def scripted_channel() -> type[ScriptedChannel]:
    return ScriptedChannel


@pytest.fixture()
def patch_channel(monkeypatch) -> Callable[[Any], Any]:
    """Make the CLI use ``channel`` instead of opening a backend channel."""
    def _install(channel: Any) -> Any:
        @contextmanager
        def _open(cfg: LoaderConfig) -> Iterator[Any]:
            try:
                yield channel
            finally:
                channel.close()
        monkeypatch.setattr("stream_loader.cli.__main__.open_channel", _open)
        return channel
    return _install


@pytest.fixture()
def no_sleep(monkeypatch) -> list[float]:
    """Record poller sleeps instead of sleeping."""
    calls: list[float] = []
    monkeypatch.setattr("stream_loader.services.confirmation.time.sleep", calls.append)
    return calls
