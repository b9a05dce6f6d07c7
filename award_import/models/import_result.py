from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from typing import Any

"""Import result models for the award import tool.

RowError / ImportResult are the report returned to callers of an import.
ImportResultBuilder accumulates row outcomes and can be built at any point,
so partially processed runs can be assembled as well.
"""

__all__ = [
    "EMPLOYEE_NOT_FOUND",
    "SAVE_ERROR",
    "UNSUPPORTED_FORMAT",
    "UNSUPPORTED_FORMAT_MESSAGE",
    "RowError",
    "RowOutcome",
    "ImportResult",
    "ImportResultBuilder",
]

# error_type classification (UPPER_SNAKE, also written to the error log)
EMPLOYEE_NOT_FOUND = "EMPLOYEE_NOT_FOUND"
SAVE_ERROR = "SAVE_ERROR"
UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"

UNSUPPORTED_FORMAT_MESSAGE = "Unsupported file format"


@dataclass(frozen=True)
class RowError:
    """A single failed row: one per skipped row.

    Attributes:
        row_number: Original 1-based file position. 0 for file-level errors
        message: Human readable failure description
        error_type: Classification used by the error log
    """
    row_number: int
    message: str
    error_type: str

    @staticmethod
    def employee_not_found(row_number: int, employee_id: int) -> RowError:
        return RowError(
            row_number=row_number,
            message=f"employee {employee_id} not found",
            error_type=EMPLOYEE_NOT_FOUND,
        )

    @staticmethod
    def save_failed(row_number: int, detail: str) -> RowError:
        return RowError(
            row_number=row_number,
            message=f"error saving award: {detail}",
            error_type=SAVE_ERROR,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"rowNumber": self.row_number, "message": self.message}


@dataclass(frozen=True)
class RowOutcome:
    """Result of processing one row (imported, or skipped with an error)."""
    row_number: int
    error: RowError | None = None

    @property
    def imported(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ImportResult:
    """Aggregated report of one import run.

    Invariants: skipped_rows == total_rows - imported_rows and
    len(errors) == skipped_rows.
    """
    total_rows: int
    imported_rows: int
    skipped_rows: int
    errors: list[RowError] = field(default_factory=list)

    @staticmethod
    def empty() -> ImportResult:
        return ImportResult(total_rows=0, imported_rows=0, skipped_rows=0, errors=[])

    @staticmethod
    def unsupported_format() -> ImportResult:
        """Synthetic result returned for files whose extension has no parser."""
        return ImportResult(
            total_rows=0,
            imported_rows=0,
            skipped_rows=0,
            errors=[RowError(0, UNSUPPORTED_FORMAT_MESSAGE, UNSUPPORTED_FORMAT)],
        )

    @property
    def is_unsupported_format(self) -> bool:
        return (
            self.total_rows == 0
            and len(self.errors) == 1
            and self.errors[0].error_type == UNSUPPORTED_FORMAT
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the response shape (camelCase keys)."""
        return {
            "totalRows": self.total_rows,
            "importedRows": self.imported_rows,
            "skippedRows": self.skipped_rows,
            "errors": [e.to_dict() for e in self.errors],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


class ImportResultBuilder:
    """Thread-safe accumulator for row outcomes.

    Counters and the error list are only mutated under the lock, so the
    builder may be fed from several threads. build() may be called at any
    time and returns a snapshot.
    """

    def __init__(self) -> None:
        self._total = 0
        self._imported = 0
        self._errors: list[RowError] = []
        self._lock = threading.Lock()

    def count_row(self) -> None:
        with self._lock:
            self._total += 1

    def record_imported(self) -> None:
        with self._lock:
            self._imported += 1

    def add_error(self, error: RowError) -> None:
        with self._lock:
            self._errors.append(error)

    def record(self, outcome: RowOutcome) -> None:
        """Fold a finished row outcome (the row must already be counted)."""
        with self._lock:
            if outcome.error is None:
                self._imported += 1
            else:
                self._errors.append(outcome.error)

    def build(self) -> ImportResult:
        with self._lock:
            return ImportResult(
                total_rows=self._total,
                imported_rows=self._imported,
                skipped_rows=self._total - self._imported,
                errors=list(self._errors),
            )
