"""Domain models for the award import tool.

This package contains the row, entity and report models shared by the parsers,
the orchestrator and the CLI.
"""

from .award import Award
from .error_record import ErrorRecord
from .import_result import ImportResult, ImportResultBuilder, RowError, RowOutcome
from .upload_row import UploadRow

__all__ = [
    # Parsing / persistence models
    "UploadRow",
    "Award",
    # Report models
    "RowError",
    "RowOutcome",
    "ImportResult",
    "ImportResultBuilder",
    # Error log
    "ErrorRecord",
]
