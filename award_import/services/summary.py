from __future__ import annotations

from ..models.import_result import ImportResult

"""Summary line rendering for the award import CLI.

Format:
SUMMARY file={name} total={n} imported={n} skipped={n} errors={n}
elapsed_sec={elapsed} throughput_rps={throughput}
"""

SUMMARY_LABEL = "SUMMARY"


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small numbers
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_body(file_name: str, result: ImportResult, elapsed_seconds: float) -> str:
    """Render the key=value fields of the SUMMARY line (without the label).

    Args:
        file_name: Uploaded file name (spaces replaced so the line stays parseable)
        result: ImportResult of the run
        elapsed_seconds: Wall time of the run

    Returns:
        Space separated key=value fields

    Examples:
        >>> r = ImportResult(total_rows=4, imported_rows=4, skipped_rows=0, errors=[])
        >>> render_summary_body("awards.csv", r, 2.0)
        'file=awards.csv total=4 imported=4 skipped=0 errors=0 elapsed_sec=2 throughput_rps=2'
    """
    throughput = result.total_rows / elapsed_seconds if elapsed_seconds > 0 else 0.0
    safe_name = file_name.replace(" ", "_")
    return (
        f"file={safe_name} "
        f"total={result.total_rows} "
        f"imported={result.imported_rows} "
        f"skipped={result.skipped_rows} "
        f"errors={len(result.errors)} "
        f"elapsed_sec={_format_number(elapsed_seconds)} "
        f"throughput_rps={_format_number(throughput)}"
    )


def render_summary_line(file_name: str, result: ImportResult, elapsed_seconds: float) -> str:
    """Full ``SUMMARY ...`` line, as the CLI prints it through log_summary()."""
    return f"{SUMMARY_LABEL} {render_summary_body(file_name, result, elapsed_seconds)}"
