from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .import_result import RowError

"""ErrorRecord model for error logging.

This module defines the ErrorRecord dataclass used for structured error logging
of award imports. Row 0 is used for file-level errors (unsupported format,
structural faults without a known row).

Each record serializes to one JSON Lines entry with a fixed key set:
timestamp, file, row, error_type, message.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Uploaded file name being imported
        row: Row number (1-based, header = 1). 0 for file-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Error description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord with current UTC timestamp.

        Parameters:
            file: Uploaded file name
            row: Row number (1-based). Use 0 for file-level errors
            error_type: Error classification in UPPER_SNAKE_CASE format
            message: Error description

        Returns:
            New ErrorRecord instance with current UTC timestamp
        """
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            error_type=error_type,
            message=message,
        )

    @staticmethod
    def from_row_error(file: str, error: RowError) -> ErrorRecord:
        return ErrorRecord.create(
            file=file,
            row=error.row_number,
            error_type=error.error_type,
            message=error.message,
        )

    def to_json_line(self) -> str:
        """Serialize ErrorRecord to JSON Lines format.

        Returns:
            JSON string representation without extra keys
        """
        return json.dumps(asdict(self), ensure_ascii=False)
