from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from stream_loader.config.loader import ConfigError, dump_properties, load_config
from stream_loader.ingest import IngestConnectionError, mock_mode_enabled, open_channel
from stream_loader.logging.error_log import ErrorLogBuffer
from stream_loader.logging.init import (
    enable_debug,
    get_logger,
    log_summary,
    quiet_vendor_loggers,
    setup_logging,
)
from stream_loader.models.config_models import LoaderConfig
from stream_loader.models.error_record import OFFSET_NOT_CONFIRMED, ErrorRecord
from stream_loader.models.processing_result import ConfirmationResult
from stream_loader.services.confirmation import poll_interval, wait_for_offset
from stream_loader.services.orchestrator import ProcessingError, RowRejectedError, process_file
from stream_loader.services.summary import render_summary_line

"""CLI entrypoint.

    stream-loader CONFIG_FILE DATA_FILE [--debug]

Flow:
- Load .env (override) then the configuration
- Open one ingestion channel for the whole file
- Submit rows, then poll until the last offset token is committed
- Print SUMMARY, flush the error log, return the exit code
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_UNCONFIRMED = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; a failure only warns."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except (OSError, UnicodeDecodeError) as e:  # pragma: no cover
        get_logger().warning(f"failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="stream-loader",
        description="Delimited text file -> streaming ingestion loader",
    )
    p.add_argument("config_file", help="Properties (key=value) or YAML configuration file")
    p.add_argument("data_file", help="Delimited input file, one record per line, no header")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _run(cfg: LoaderConfig, data_path: Path, error_log: ErrorLogBuffer) -> int:
    logger = get_logger()
    confirmation: ConfirmationResult | None = None
    try:
        with open_channel(cfg) as channel:
            submission = process_file(cfg, data_path, channel, error_log=error_log)
            expected = submission.expected_offset_token
            if expected is not None:
                confirmation = wait_for_offset(
                    channel,
                    expected,
                    interval=poll_interval(submission.rows_sent, cfg.column_count),
                )
    except IngestConnectionError as e:
        logger.error(f"connection: {e}")
        return EXIT_FATAL
    except RowRejectedError as e:
        logger.error(f"rejected: {e}")
        return EXIT_FATAL
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    summary_line = render_summary_line(submission, confirmation)

    if confirmation is None:
        logger.info("No rows sent, nothing to confirm")
    elif confirmation.confirmed:
        total = submission.elapsed_seconds + confirmation.elapsed_seconds
        logger.info(f"SUCCESSFULLY inserted {submission.rows_sent} rows")
        logger.info(f"Total Time, including Confirmation: {total:.3f} seconds")
    else:
        error_log.append(
            ErrorRecord.create(
                data_path.name,
                -1,
                -1,
                OFFSET_NOT_CONFIRMED,
                f"expected {confirmation.expected}, last seen {confirmation.last_seen}",
            )
        )

    # log_summary adds the "SUMMARY " prefix itself
    log_summary(summary_line[len("SUMMARY "):])

    if confirmation is not None and not confirmation.confirmed:
        return EXIT_UNCONFIRMED
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # [] from tests must not fall back to sys.argv
    if argv is None:
        argv = sys.argv[1:]
    try:
        args = _parse_args(argv)
    except SystemExit as e:
        # argparse has already printed usage/help to stderr
        if e.code == 0:
            return EXIT_SUCCESS
        logger.error("arguments: CONFIG_FILE and DATA_FILE are required")
        return EXIT_FATAL

    _load_env_file(Path(".env"), override=True)

    if args.debug:
        enable_debug()

    try:
        cfg = load_config(Path(args.config_file), force_debug=args.debug)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if cfg.debug:
        enable_debug()
        logger.debug("debug mode enabled")
        dump_properties(cfg)
    else:
        quiet_vendor_loggers()

    data_path = Path(args.data_file)
    if not data_path.is_file():
        logger.error(f"data file not found: {data_path}")
        return EXIT_FATAL

    mode = "mock" if mock_mode_enabled() else "live"
    logger.info(f"Loading {data_path.name} mode={mode} columns={cfg.column_count}")

    error_log = ErrorLogBuffer()
    try:
        return _run(cfg, data_path, error_log)
    finally:
        log_path = error_log.flush()
        if log_path is not None:
            logger.info(f"error log: {log_path}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
