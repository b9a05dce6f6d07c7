# Shared pytest fixtures
from __future__ import annotations
import logging
import tempfile
from collections.abc import Callable
from datetime import date
from pathlib import Path

import pandas as pd
import pytest

from award_import.logging.init import LOGGER_NAME, reset_logging
from award_import.models.upload_row import UploadRow

CSV_HEADER = "employee_id,employee_full_name,award_code,award_name,award_date"


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """max_workers: 2
error_log_dir: ./logs
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_csv(temp_workdir: Path) -> Callable[..., Path]:
    def _make(name: str, lines: list[str], header: str = CSV_HEADER) -> Path:
        p = temp_workdir / "data" / name
        p.write_text("\n".join([header, *lines]) + "\n", encoding="utf-8")
        return p
    return _make


@pytest.fixture()
def make_xlsx(temp_workdir: Path) -> Callable[..., Path]:
    """Write rows (first row = header) to the first sheet of a workbook."""
    def _make(name: str, rows: list[list[object]], extra_sheets: dict[str, list[list[object]]] | None = None) -> Path:
        p = temp_workdir / "data" / name
        with pd.ExcelWriter(p, engine="openpyxl") as writer:
            pd.DataFrame(rows).to_excel(writer, sheet_name="Awards", header=False, index=False)
            for sheet, sheet_rows in (extra_sheets or {}).items():
                pd.DataFrame(sheet_rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
        return p
    return _make


def make_row(row_number: int, employee_id: int, award_code: str = "A1", award_date: str = "2024-01-10") -> UploadRow:
    return UploadRow(
        row_number=row_number,
        employee_id=employee_id,
        employee_full_name=f"Employee {employee_id}",
        award_code=award_code,
        award_name=f"Award {award_code}",
        award_date=date.fromisoformat(award_date),
    )


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handlers bind to the sys.stdout of the test that created them (capsys)
    reset_logging()
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    reset_logging()
