from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path

import psycopg2
from dotenv import load_dotenv

from award_import.config.loader import DEFAULT_CONFIG_PATH, ConfigError, ImportConfig, load_config
from award_import.db.connection import connection_pool
from award_import.db.memory import InMemoryAwardStore, InMemoryEmployeeDirectory
from award_import.db.protocols import AwardStore, EmployeeDirectory
from award_import.db.repositories import PostgresAwardStore, PostgresEmployeeDirectory
from award_import.logging.error_log import ErrorLogBuffer
from award_import.logging.init import enable_debug, log_summary, setup_logging
from award_import.models.error_record import ErrorRecord
from award_import.models.import_result import ImportResult
from award_import.parsers.common import ParseError
from award_import.services.intake import import_upload
from award_import.services.orchestrator import ProcessingError
from award_import.services.summary import render_summary_body

"""CLI entrypoint.

Flow:
- Load .env and config (config/import.yml unless --config)
- Import one award file (.csv / .xlsx) against PostgreSQL, or the in-memory
  collaborators when DISABLE_DB_CONNECT=1 (dry run)
- Write row errors to the JSON Lines error log, print the SUMMARY line

Exit codes: 0 all rows imported, 2 some rows skipped, 1 fatal.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

PARSE_ERROR = "PARSE_ERROR"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv (override=True: .env wins over existing variables)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Bulk award importer (CSV / xlsx -> PostgreSQL)")
    p.add_argument("file", type=Path, help="Award file to import (.csv or .xlsx)")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--workers", type=int, default=None, help="Concurrent award saves (overrides config)")
    p.add_argument("--json", action="store_true", help="Print the import result as JSON")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _import_file(
    path: Path,
    directory: EmployeeDirectory,
    store: AwardStore,
    max_workers: int,
) -> ImportResult:
    stream = path.open("rb")
    try:
        return import_upload(stream, path.name, directory, store, max_workers=max_workers)
    finally:
        # parsers close the stream themselves; this only covers early failures
        if not stream.closed:
            stream.close()


def _run(path: Path, cfg: ImportConfig, max_workers: int, logger) -> ImportResult:
    # DB 接続制御: テスト等で完全に無効化したい場合 DISABLE_DB_CONNECT=1
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.info("mode=mock (DISABLE_DB_CONNECT=1): every employee id is treated as existing")
        return _import_file(path, InMemoryEmployeeDirectory(), InMemoryAwardStore(), max_workers)

    # one pooled connection per worker plus one for the employee lookup
    with connection_pool(cfg.database, max_workers + 1) as pool:
        logger.info("mode=live")
        return _import_file(
            path,
            PostgresEmployeeDirectory(pool),
            PostgresAwardStore(pool),
            max_workers,
        )


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        enable_debug()
        logger.debug("debug mode enabled")

    path: Path = args.file
    if not path.is_file():
        logger.error(f"file not found: {path}")
        return EXIT_FATAL

    max_workers = args.workers if args.workers is not None else cfg.max_workers
    if max_workers < 1:
        logger.error(f"--workers must be >= 1, got {max_workers}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer(Path(cfg.error_log_dir))
    logger.info(f"Importing awards from: {path}")
    start = time.perf_counter()
    try:
        result = _run(path, cfg, max_workers, logger)
    except ParseError as e:
        logger.error(f"parse: {e}")
        error_log.append(ErrorRecord.create(path.name, e.row_number, PARSE_ERROR, str(e)))
        _flush_error_log(error_log, logger)
        return EXIT_FATAL
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL
    except psycopg2.Error as e:
        logger.error(f"database: {e}".strip())
        return EXIT_FATAL
    elapsed = time.perf_counter() - start

    error_log.extend_row_errors(path.name, result.errors)
    _flush_error_log(error_log, logger)

    if args.json:
        print(result.to_json())

    if result.is_unsupported_format:
        logger.error(f"unsupported file format: {path.name}")
        return EXIT_FATAL

    # the SUMMARY label comes from the log formatter
    log_summary(render_summary_body(path.name, result, elapsed))

    if result.skipped_rows > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def _flush_error_log(error_log: ErrorLogBuffer, logger) -> None:
    try:
        written = error_log.flush()
    except OSError as e:
        # Don't fail the run if the error log cannot be written
        logger.warning(f"error log flush failed: {e}")
        return
    if written is not None:
        logger.info(f"error log: {written}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
