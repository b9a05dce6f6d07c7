from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import BinaryIO

from ..models.upload_row import UploadRow
from .common import REQUIRED_COLUMNS, MissingColumnsError, ParseError, parse_employee_id, parse_iso_date

"""CSV award file parser.

Format:
- Line 1 is the header and is discarded
- Every following line is split on ',' (no quoting / escaping support)
- Fields: employee_id, employee_full_name, award_code, award_name, award_date

A line with fewer than 5 fields aborts the sequence (MissingColumnsError).
The stream is consumed once and closed when the iterator finishes.
"""

__all__ = [
    "DELIMITER",
    "parse_csv",
]

DELIMITER = ","

logger = logging.getLogger(__name__)


def parse_csv(stream: BinaryIO, encoding: str = "utf-8-sig") -> Iterator[UploadRow]:
    """Lazily parse an award CSV byte stream.

    Parameters
    ----------
    stream: raw uploaded bytes (closed on exhaustion, failure or early close)
    encoding: text encoding; the default tolerates a leading UTF-8 BOM
    """
    with stream:
        # split on raw bytes and decode per line so a decode fault names its own row
        for line_number, raw in enumerate(stream, start=1):
            if line_number == 1:
                continue  # header
            try:
                line = raw.decode(encoding)
            except UnicodeDecodeError as e:
                raise ParseError(line_number, f"row {line_number}: not valid {encoding} text: {e}") from e
            yield _parse_line(line.rstrip("\r\n"), line_number)
    logger.debug("csv stream exhausted")


def _parse_line(line: str, row_number: int) -> UploadRow:
    parts = [p.strip() for p in line.split(DELIMITER)]
    if len(parts) < REQUIRED_COLUMNS:
        raise MissingColumnsError(
            row_number,
            f"row {row_number}: expected {REQUIRED_COLUMNS} columns, got {len(parts)}",
        )
    return UploadRow(
        row_number=row_number,
        employee_id=parse_employee_id(parts[0], row_number),
        employee_full_name=parts[1],
        award_code=parts[2],
        award_name=parts[3],
        award_date=parse_iso_date(parts[4], row_number),
    )
