from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, date, datetime

from .upload_row import UploadRow

"""Award entity persisted for every accepted upload row."""

__all__ = [
    "Award",
]


@dataclass(frozen=True)
class Award:
    """Award record handed to the award store.

    ``id`` stays None until the store assigns one on a successful save.
    """
    employee_id: int
    award_code: str
    award_name: str
    award_date: date
    created_at: datetime  # Time of the persistence attempt (UTC)
    id: int | None = None

    @staticmethod
    def from_row(row: UploadRow, created_at: datetime | None = None) -> Award:
        """Build an unsaved Award from a parsed row.

        Parameters:
            row: Parsed upload row (fields copied verbatim)
            created_at: Override for the creation timestamp (defaults to now, UTC)
        """
        return Award(
            employee_id=row.employee_id,
            award_code=row.award_code,
            award_name=row.award_name,
            award_date=row.award_date,
            created_at=created_at or datetime.now(UTC),
        )

    def with_id(self, award_id: int) -> Award:
        return replace(self, id=award_id)
