from __future__ import annotations

import re
from datetime import date

"""Shared parsing helpers and structural fault types.

Structural faults (missing columns, unparseable numbers or dates, wrong cell
types) abort the whole import. They are distinct from business validation
failures (unknown employee), which are recorded per row by the orchestrator.
"""

__all__ = [
    "REQUIRED_COLUMNS",
    "ParseError",
    "MissingColumnsError",
    "FieldValueError",
    "parse_iso_date",
    "parse_employee_id",
    "MIN_EMPLOYEE_ID",
    "MAX_EMPLOYEE_ID",
]

# employee_id, employee_full_name, award_code, award_name, award_date
REQUIRED_COLUMNS = 5

_ISO_DATE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
# ASCII digits only: int() would also take "1_000" and other scripts' digits
_INTEGER = re.compile(r"^[+-]?[0-9]+$")

# employee ids are BIGINT
MIN_EMPLOYEE_ID = -(2**63)
MAX_EMPLOYEE_ID = 2**63 - 1


class ParseError(Exception):
    """Structural fault in an uploaded file. Fatal for the whole import."""

    def __init__(self, row_number: int, message: str) -> None:
        super().__init__(message)
        self.row_number = row_number


class MissingColumnsError(ParseError):
    """Raised when a row has fewer than the required number of fields."""


class FieldValueError(ParseError):
    """Raised when a field cannot be converted to its expected type."""


def parse_iso_date(value: str, row_number: int) -> date:
    """Parse strict ISO-8601 ``YYYY-MM-DD`` text."""
    if not _ISO_DATE.fullmatch(value):
        raise FieldValueError(row_number, f"row {row_number}: invalid award date {value!r} (expected YYYY-MM-DD)")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise FieldValueError(row_number, f"row {row_number}: invalid award date {value!r}: {e}") from e


def parse_employee_id(value: str, row_number: int) -> int:
    if not _INTEGER.fullmatch(value):
        raise FieldValueError(row_number, f"row {row_number}: invalid employee id {value!r}")
    employee_id = int(value)
    if not MIN_EMPLOYEE_ID <= employee_id <= MAX_EMPLOYEE_ID:
        raise FieldValueError(row_number, f"row {row_number}: employee id {value!r} out of range")
    return employee_id
