from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import Enum
from pathlib import PurePath
from typing import BinaryIO

from ..config.loader import DEFAULT_MAX_WORKERS
from ..db.protocols import AwardStore, EmployeeDirectory
from ..models.import_result import ImportResult
from ..models.upload_row import UploadRow
from ..parsers.csv_parser import parse_csv
from ..parsers.excel_parser import parse_excel
from .orchestrator import import_awards

"""Upload intake: picks a parser from the file name and runs the import.

Only two things are taken from an upload: the raw byte stream and the file
name, whose extension selects the parser (.csv / .xlsx, case-insensitive).
Other extensions never reach the parsers and yield the synthetic
"Unsupported file format" result.
"""

__all__ = [
    "FileFormat",
    "detect_format",
    "parse_upload",
    "import_upload",
]

logger = logging.getLogger(__name__)


class FileFormat(Enum):
    CSV = ".csv"
    XLSX = ".xlsx"


def detect_format(filename: str) -> FileFormat | None:
    suffix = PurePath(filename).suffix.lower()
    for fmt in FileFormat:
        if fmt.value == suffix:
            return fmt
    return None


def parse_upload(stream: BinaryIO, file_format: FileFormat) -> Iterator[UploadRow]:
    if file_format is FileFormat.CSV:
        return parse_csv(stream)
    return parse_excel(stream)


def import_upload(
    stream: BinaryIO,
    filename: str,
    directory: EmployeeDirectory,
    store: AwardStore,
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> ImportResult:
    """Import one uploaded award file.

    The stream is always closed, including for unsupported formats and an
    invalid max_workers.

    Raises:
        ValueError: max_workers < 1
        ParseError: structural fault in the file
        ProcessingError: employee lookup failure
    """
    if max_workers < 1:
        # the parser never starts, so its with-block cannot release the stream
        stream.close()
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")

    file_format = detect_format(filename)
    if file_format is None:
        stream.close()
        logger.warning("file=%s rejected: unsupported format", filename)
        return ImportResult.unsupported_format()

    logger.info("file=%s format=%s", filename, file_format.name.lower())
    return import_awards(
        parse_upload(stream, file_format),
        directory,
        store,
        max_workers=max_workers,
    )
