from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from ..models.award import Award

"""Collaborator interfaces consumed by the import orchestrator.

The orchestrator only needs two capabilities from the storage side:
- which of a set of employee ids exist (called once per import)
- persist one award (called once per accepted row, never retried)
"""

__all__ = [
    "EmployeeDirectory",
    "AwardStore",
    "PersistenceError",
]


class PersistenceError(Exception):
    """Raised by an AwardStore when a single award cannot be saved."""


@runtime_checkable
class EmployeeDirectory(Protocol):
    def existing_ids(self, candidate_ids: set[int]) -> Iterable[int]:
        """Return the subset of candidate_ids that exist.

        Empty input returns an empty result. Duplicates in the result are
        allowed; callers reduce it to a set.
        """
        ...


@runtime_checkable
class AwardStore(Protocol):
    def save(self, award: Award) -> Award:
        """Persist award and return it with its assigned id, or raise."""
        ...
