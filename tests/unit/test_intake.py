from __future__ import annotations
import io
from pathlib import Path

import pytest

from award_import.db.memory import InMemoryAwardStore, InMemoryEmployeeDirectory
from award_import.models.import_result import UNSUPPORTED_FORMAT, UNSUPPORTED_FORMAT_MESSAGE
from award_import.parsers.common import ParseError
from award_import.services.intake import FileFormat, detect_format, import_upload


@pytest.mark.parametrize(
    "name,expected",
    [
        ("awards.csv", FileFormat.CSV),
        ("AWARDS.CSV", FileFormat.CSV),
        ("q1.awards.xlsx", FileFormat.XLSX),
        ("Report.XlSx", FileFormat.XLSX),
        ("awards.xls", None),
        ("awards.txt", None),
        ("awards", None),
        ("csv", None),
    ],
)
def test_detect_format(name: str, expected: FileFormat | None):
    assert detect_format(name) is expected


def test_unsupported_format_returns_synthetic_result_and_closes_stream():
    stream = io.BytesIO(b"whatever")
    directory = InMemoryEmployeeDirectory()
    store = InMemoryAwardStore()

    result = import_upload(stream, "awards.txt", directory, store)

    assert result.to_dict() == {
        "totalRows": 0,
        "importedRows": 0,
        "skippedRows": 0,
        "errors": [{"rowNumber": 0, "message": UNSUPPORTED_FORMAT_MESSAGE}],
    }
    assert result.errors[0].error_type == UNSUPPORTED_FORMAT
    assert result.is_unsupported_format
    assert stream.closed
    assert directory.calls == []
    assert store.saved == []


@pytest.mark.parametrize("filename", ["awards.csv", "awards.xlsx", "awards.txt"])
def test_invalid_max_workers_closes_stream(filename: str):
    stream = io.BytesIO(b"h\n1,A,A1,Award,2024-01-10\n")
    directory = InMemoryEmployeeDirectory()

    with pytest.raises(ValueError):
        import_upload(stream, filename, directory, InMemoryAwardStore(), max_workers=0)

    assert stream.closed
    assert directory.calls == []


def test_two_row_csv_with_known_employees():
    data = (
        "employee_id,employee_full_name,award_code,award_name,award_date\n"
        "1,Ivanov I.I.,A1,Best employee,2024-01-10\n"
        "2,Petrov P.P.,A2,Contribution,2024-01-11\n"
    ).encode("utf-8")
    directory = InMemoryEmployeeDirectory({1, 2})
    store = InMemoryAwardStore()

    result = import_upload(io.BytesIO(data), "Awards.CSV", directory, store)

    assert result.to_dict() == {"totalRows": 2, "importedRows": 2, "skippedRows": 0, "errors": []}
    assert directory.calls == [{1, 2}]


def test_xlsx_upload_with_missing_employee(make_xlsx):
    path: Path = make_xlsx(
        "awards.xlsx",
        [
            ["employee_id", "employee_full_name", "award_code", "award_name", "award_date"],
            [1, "A", "A1", "Award", "2024-01-10"],
            [9, "B", "A2", "Award", "2024-01-11"],
        ],
    )
    with path.open("rb") as f:
        result = import_upload(f, path.name, InMemoryEmployeeDirectory({1}), InMemoryAwardStore())
        assert f.closed

    assert (result.total_rows, result.imported_rows, result.skipped_rows) == (2, 1, 1)
    assert result.errors[0].row_number == 3


def test_structural_fault_propagates_with_no_saves():
    data = b"h\n1,A,A1,Award,2024-01-10\n2,B\n"
    stream = io.BytesIO(data)
    store = InMemoryAwardStore()

    with pytest.raises(ParseError) as e:
        import_upload(stream, "awards.csv", InMemoryEmployeeDirectory(), store)

    assert e.value.row_number == 3
    assert store.saved == []
    assert stream.closed
