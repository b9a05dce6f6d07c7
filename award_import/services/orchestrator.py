from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from datetime import UTC, datetime

from ..config.loader import DEFAULT_MAX_WORKERS
from ..db.protocols import AwardStore, EmployeeDirectory
from ..logging.init import WORKER_THREAD_PREFIX
from ..models.award import Award
from ..models.import_result import ImportResult, ImportResultBuilder, RowError, RowOutcome
from ..models.upload_row import UploadRow
from .progress import ProgressTracker

"""Service orchestration for award imports.

import_awards() drives one import through its stages:

1. CollectingIds   drain the parsed rows into a buffer, collect distinct employee ids
                   (structural parse faults surface here, before any row is counted)
2. Resolving       one existence lookup for the whole id set
3. ProcessingRows  per row in file order: count, validate, submit the save to a
                   bounded thread pool
4. Aggregating     once every save has finished, build the ImportResult

Row outcomes are folded by the calling thread only; worker threads never touch
the counters or the error list.
"""

__all__ = [
    "ProcessingError",
    "import_awards",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal, non-row-level failure of an import (e.g. the employee lookup)."""


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _save_row(store: AwardStore, row: UploadRow, clock: Callable[[], datetime]) -> RowOutcome:
    """Persist one accepted row. Never raises: failures become the outcome."""
    award = Award.from_row(row, created_at=clock())
    try:
        saved = store.save(award)
    except Exception as e:
        logger.debug("row=%d save failed: %s", row.row_number, e)
        return RowOutcome(row.row_number, RowError.save_failed(row.row_number, str(e)))
    logger.debug("row=%d saved award id=%s", row.row_number, saved.id)
    return RowOutcome(row.row_number)


def import_awards(
    rows: Iterable[UploadRow],
    directory: EmployeeDirectory,
    store: AwardStore,
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
    clock: Callable[[], datetime] = _utc_now,
) -> ImportResult:
    """Validate and persist a sequence of parsed award rows.

    Args:
        rows: Parsed rows (single-pass; consumed exactly once)
        directory: Employee existence lookup, called once per import
        store: Award persistence, called once per accepted row
        max_workers: Upper bound of concurrent saves
        clock: Source of created_at timestamps

    Returns:
        ImportResult where every skipped row carries exactly one RowError

    Raises:
        ParseError: structural fault raised by the row source
        ProcessingError: the employee lookup failed
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")

    # CollectingIds: parsed rows are buffered so the source is read only once
    buffered = list(rows)
    candidate_ids = {row.employee_id for row in buffered}
    logger.debug("collected rows=%d distinct_employees=%d", len(buffered), len(candidate_ids))

    # Resolving
    try:
        existing_ids = set(directory.existing_ids(candidate_ids))
    except Exception as e:
        raise ProcessingError(f"employee lookup failed: {e}") from e
    logger.debug("employees found=%d of %d", len(existing_ids), len(candidate_ids))

    # ProcessingRows / Aggregating
    builder = ImportResultBuilder()
    with ProgressTracker(len(buffered)) as progress:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=WORKER_THREAD_PREFIX) as executor:
            pending: list[Future[RowOutcome]] = []
            for row in buffered:
                builder.count_row()
                if row.employee_id not in existing_ids:
                    builder.add_error(RowError.employee_not_found(row.row_number, row.employee_id))
                    progress.advance(imported=False)
                    continue
                pending.append(executor.submit(_save_row, store, row, clock))

            for future in as_completed(pending):
                outcome = future.result()
                builder.record(outcome)
                progress.advance(imported=outcome.imported)

    result = builder.build()
    logger.info(
        "import finished total=%d imported=%d skipped=%d",
        result.total_rows,
        result.imported_rows,
        result.skipped_rows,
    )
    return result
