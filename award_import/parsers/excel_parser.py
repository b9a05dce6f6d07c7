from __future__ import annotations

import logging
import zipfile
from collections.abc import Iterator, Sequence
from typing import Any, BinaryIO

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from ..models.upload_row import UploadRow
from .common import (
    MAX_EMPLOYEE_ID,
    MIN_EMPLOYEE_ID,
    REQUIRED_COLUMNS,
    FieldValueError,
    ParseError,
    parse_iso_date,
)

"""Spreadsheet (.xlsx) award file parser.

- Only the first sheet is read
- Row index 0 is the header and is skipped
- Rows whose cells are all empty are skipped silently (not counted)
- Columns by position: 0 employee id (numeric), 1 full name, 2 award code,
  3 award name, 4 award date (ISO-8601 text)
- Row number = sheet row index + 1

A cell of the wrong type aborts the sequence (FieldValueError), the same
strictness the CSV parser applies.
"""

__all__ = [
    "parse_excel",
]

logger = logging.getLogger(__name__)

# corrupt archive members surface as XML syntax errors (ElementTree or lxml,
# both SyntaxError subclasses) or as openpyxl value / type errors
_UNREADABLE = (
    zipfile.BadZipFile,
    InvalidFileException,
    SyntaxError,
    KeyError,
    ValueError,
    TypeError,
    OSError,
)


def parse_excel(stream: BinaryIO) -> Iterator[UploadRow]:
    """Lazily parse the first sheet of an award workbook.

    The workbook is opened read-only so rows are streamed from the archive.
    Both the workbook and the stream are closed when the iterator finishes.
    """
    with stream:
        try:
            wb = openpyxl.load_workbook(stream, read_only=True, data_only=True)
        except _UNREADABLE as e:
            raise ParseError(0, f"unreadable workbook: {e}") from e
        try:
            ws = wb.worksheets[0]
            logger.debug("reading sheet=%s", ws.title)
            rows = ws.iter_rows(min_row=1, values_only=True)
            row_number = 0
            while True:
                # only sheet reading is wrapped; _map_row raises its own FieldValueError
                try:
                    values = next(rows)
                except StopIteration:
                    break
                except _UNREADABLE as e:
                    raise ParseError(row_number + 1, f"row {row_number + 1}: unreadable sheet: {e}") from e
                row_number += 1
                if row_number == 1:
                    continue  # header
                if all(v is None for v in values):
                    continue
                yield _map_row(values, row_number)
        finally:
            wb.close()


def _map_row(values: Sequence[Any], row_number: int) -> UploadRow:
    cells = list(values) + [None] * (REQUIRED_COLUMNS - len(values))
    return UploadRow(
        row_number=row_number,
        employee_id=_numeric_id(cells[0], row_number),
        employee_full_name=_text(cells[1], row_number, "employee full name"),
        award_code=_text(cells[2], row_number, "award code"),
        award_name=_text(cells[3], row_number, "award name"),
        award_date=parse_iso_date(_text(cells[4], row_number, "award date").strip(), row_number),
    )


def _numeric_id(value: Any, row_number: int) -> int:
    # bool is an int subclass but never a valid id cell
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FieldValueError(
            row_number,
            f"row {row_number}: employee id must be numeric, got {value!r}",
        )
    if isinstance(value, float) and not value.is_integer():
        raise FieldValueError(row_number, f"row {row_number}: employee id {value!r} is not integral")
    if not MIN_EMPLOYEE_ID <= value <= MAX_EMPLOYEE_ID:
        raise FieldValueError(row_number, f"row {row_number}: employee id {value!r} out of range")
    return int(value)


def _text(value: Any, row_number: int, label: str) -> str:
    if not isinstance(value, str):
        raise FieldValueError(
            row_number,
            f"row {row_number}: {label} must be text, got {value!r}",
        )
    return value
