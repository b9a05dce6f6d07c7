"""In-memory collaborators for dry runs and unit tests."""

from __future__ import annotations

import itertools
import threading
from collections.abc import Iterable

from ..models.award import Award


class InMemoryEmployeeDirectory:
    """Set-backed EmployeeDirectory.

    ``known_ids=None`` treats every candidate as existing (dry-run mode).
    """

    def __init__(self, known_ids: Iterable[int] | None = None) -> None:
        self._known = None if known_ids is None else set(known_ids)
        self.calls: list[set[int]] = []

    def existing_ids(self, candidate_ids: set[int]) -> set[int]:
        self.calls.append(set(candidate_ids))
        if self._known is None:
            return set(candidate_ids)
        return {i for i in candidate_ids if i in self._known}


class InMemoryAwardStore:
    """List-backed AwardStore assigning sequential ids."""

    def __init__(self, start_id: int = 1) -> None:
        self._ids = itertools.count(start_id)
        self._lock = threading.Lock()
        self.saved: list[Award] = []

    def save(self, award: Award) -> Award:
        with self._lock:
            stored = award.with_id(next(self._ids))
            self.saved.append(stored)
        return stored
