from __future__ import annotations

import json
from pathlib import Path

from stream_loader.cli import main as cli_main
from stream_loader.logging.init import reset_logging

"""Error log lines are JSON with a fixed key set."""

KEYS = {"timestamp", "file", "line", "row_id", "error_type", "message"}


def _error_log_lines(workdir: Path) -> list[dict]:
    files = sorted((workdir / "logs").glob("errors-*.log"))
    assert len(files) == 1
    return [json.loads(raw) for raw in files[0].read_text(encoding="utf-8").splitlines()]


def test_error_log_written_for_skipped_lines(write_config: Path, write_data, temp_workdir: Path):
    reset_logging()
    code = cli_main([str(write_config), str(write_data(["1,2,3", "4,5", "6"]))])
    assert code == 0
    records = _error_log_lines(temp_workdir)
    assert [r["line"] for r in records] == [2, 3]
    for r in records:
        assert set(r) == KEYS
        assert r["error_type"] == "SHAPE_MISMATCH"
        assert r["row_id"] == -1
        assert r["file"] == "input.csv"


def test_no_error_log_on_clean_run(write_config: Path, write_data, temp_workdir: Path):
    reset_logging()
    assert cli_main([str(write_config), str(write_data(["1,2,3"]))]) == 0
    assert not (temp_workdir / "logs").exists()
