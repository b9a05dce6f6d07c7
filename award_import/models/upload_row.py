from __future__ import annotations

from dataclasses import dataclass
from datetime import date

"""UploadRow model for the award import tool.

UploadRow represents a single record of an uploaded award file after parsing.
It is produced by a parser and consumed once by the orchestrator.
"""

__all__ = [
    "UploadRow",
]


@dataclass(frozen=True)
class UploadRow:
    """One parsed award record.

    The row_number refers to the original file position counting the header
    as row 1 (1st data row = 2). It is only used for error reporting.
    """
    row_number: int  # 1-based file position (header = 1)
    employee_id: int  # Claimed employee id (existence checked later)
    employee_full_name: str  # Informational only, never used for matching
    award_code: str
    award_name: str
    award_date: date
