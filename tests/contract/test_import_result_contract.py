from __future__ import annotations

import io
import json
import random

import pytest

from conftest import make_row

from award_import.db.memory import InMemoryAwardStore, InMemoryEmployeeDirectory
from award_import.models.award import Award
from award_import.services.intake import import_upload
from award_import.services.orchestrator import import_awards

"""ImportResult response shape and counting invariants."""


class FlakyStore(InMemoryAwardStore):
    def __init__(self, fail_every: int) -> None:
        super().__init__()
        self.fail_every = fail_every

    def save(self, award: Award) -> Award:
        if award.employee_id % self.fail_every == 0:
            raise RuntimeError(f"cannot save employee {award.employee_id}")
        return super().save(award)


def test_response_keys_are_camel_case():
    result = import_upload(
        io.BytesIO(b"h\n1,A,A1,Award,2024-01-10\n"),
        "awards.csv",
        InMemoryEmployeeDirectory(set()),
        InMemoryAwardStore(),
    )
    payload = json.loads(result.to_json())
    assert list(payload) == ["totalRows", "importedRows", "skippedRows", "errors"]
    assert list(payload["errors"][0]) == ["rowNumber", "message"]


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
def test_counts_always_balance(seed: int):
    rng = random.Random(seed)
    rows = [make_row(n + 2, rng.randint(1, 30)) for n in range(rng.randint(0, 60))]
    directory = InMemoryEmployeeDirectory(rng.sample(range(1, 31), 15))

    result = import_awards(rows, directory, FlakyStore(fail_every=7), max_workers=4)

    assert result.total_rows == len(rows)
    assert result.total_rows == result.imported_rows + result.skipped_rows
    assert len(result.errors) == result.skipped_rows
    assert len({e.row_number for e in result.errors}) == len(result.errors)
    assert {e.row_number for e in result.errors} <= {r.row_number for r in rows}
