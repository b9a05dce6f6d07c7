from __future__ import annotations

import json
from pathlib import Path

import pytest

from award_import.cli import main as cli_main
from award_import.db.memory import InMemoryAwardStore, InMemoryEmployeeDirectory
from award_import.db.protocols import PersistenceError
from award_import.models.award import Award

"""Integration test: partial failure run.

Row 2 imports, row 3 references an unknown employee and row 4 fails in the
award store. Expect exit code 2, a JSON result with both errors and one
JSON Lines error log record per skipped row.
"""


class RejectingStore(InMemoryAwardStore):
    def save(self, award: Award) -> Award:
        if award.award_code == "DUP":
            raise PersistenceError('duplicate key value violates unique constraint "award_uniq"')
        return super().save(award)


@pytest.fixture
def partial_setup(monkeypatch, write_config, make_csv) -> Path:
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    monkeypatch.setattr(
        "award_import.cli.__main__.InMemoryEmployeeDirectory",
        lambda: InMemoryEmployeeDirectory({2, 4}),
    )
    monkeypatch.setattr("award_import.cli.__main__.InMemoryAwardStore", RejectingStore)
    return make_csv(
        "awards.csv",
        [
            "2,Ok Employee,A1,Award,2024-01-10",
            "3,Missing Employee,A1,Award,2024-01-10",
            "4,Failing Save,DUP,Award,2024-01-10",
        ],
    )


def test_partial_failure_exit_code_and_result(partial_setup: Path, capsys):
    code = cli_main([str(partial_setup), "--json"])
    out = capsys.readouterr().out

    assert code == 2
    payload = json.loads(next(line for line in out.splitlines() if line.startswith("{")))
    assert payload["totalRows"] == 3
    assert payload["importedRows"] == 1
    assert payload["skippedRows"] == 2
    by_row = {e["rowNumber"]: e["message"] for e in payload["errors"]}
    assert by_row[3] == "employee 3 not found"
    assert by_row[4].startswith("error saving award: duplicate key")
    assert "SUMMARY file=awards.csv total=3 imported=1 skipped=2 errors=2" in out


def test_partial_failure_writes_error_log(partial_setup: Path, temp_workdir: Path, capsys):
    cli_main([str(partial_setup)])
    out = capsys.readouterr().out

    (log,) = (temp_workdir / "logs").glob("errors-*.log")
    assert f"INFO error log: {Path('logs') / log.name}" in out
    records = [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]
    assert sorted((r["row"], r["error_type"]) for r in records) == [
        (3, "EMPLOYEE_NOT_FOUND"),
        (4, "SAVE_ERROR"),
    ]
    assert all(r["file"] == "awards.csv" for r in records)
