from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Row progress display with tqdm (TTY only).

A single tqdm instance per import, disabled in non-TTY environments (CI, pipes)
to avoid ANSI control sequence spam. The orchestrator advances it once per
finished row and shows imported / skipped counts as postfix.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Return True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress tracker over the rows of one import."""

    def __init__(self, total_rows: int, *, description: str = "Importing awards") -> None:
        """Initialize progress tracker.

        Args:
            total_rows: Number of rows that will be processed
            description: Description for the progress bar
        """
        self.total_rows = total_rows
        self.description = description
        self.imported = 0
        self.skipped = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    @property
    def processed(self) -> int:
        return self.imported + self.skipped

    def advance(self, imported: bool) -> None:
        """Record one finished row."""
        if imported:
            self.imported += 1
        else:
            self.skipped += 1

        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_postfix(imported=self.imported, skipped=self.skipped)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
