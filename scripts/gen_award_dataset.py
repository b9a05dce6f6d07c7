#!/usr/bin/env python3
"""Dataset generation script for award uploads.

Generates synthetic award files (.csv or .xlsx, chosen by the output suffix)
in the layout the importer expects:
- Row 1: Header row
- Row 2+: employee_id, employee_full_name, award_code, award_name, award_date

A fraction of rows can reference employee ids outside the known range so the
"employee not found" path is exercised in manual and performance runs.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

HEADER = ["employee_id", "employee_full_name", "award_code", "award_name", "award_date"]

AWARD_NAMES = [
    "Employee of the Month",
    "Outstanding Contribution",
    "Team Player",
    "Innovation Award",
    "Customer Hero",
    "Years of Service",
]


def generate_award_data(
    rows: int,
    employees: int,
    unknown_ratio: float = 0.0,
    seed: int = 42,
) -> pd.DataFrame:
    """Generate a DataFrame of synthetic award rows.

    Args:
        rows: Number of data rows
        employees: Known employee ids are 1..employees
        unknown_ratio: Share of rows pointing at ids above the known range
        seed: Random seed for reproducible data

    Returns:
        DataFrame with the importer's five columns (dates as ISO text)
    """
    rng = np.random.default_rng(seed)

    employee_ids = rng.integers(1, employees + 1, rows)
    unknown_mask = rng.random(rows) < unknown_ratio
    employee_ids[unknown_mask] = employees + rng.integers(1, 1000, int(unknown_mask.sum()))

    award_idx = rng.integers(0, len(AWARD_NAMES), rows)
    dates = pd.date_range("2023-01-01", "2024-12-31", freq="D")
    picked_dates = rng.choice(len(dates), rows)

    return pd.DataFrame(
        {
            "employee_id": employee_ids.astype(int),
            "employee_full_name": [f"Employee {i}" for i in employee_ids],
            "award_code": [f"A{i + 1}" for i in award_idx],
            "award_name": [AWARD_NAMES[i] for i in award_idx],
            "award_date": [dates[i].strftime("%Y-%m-%d") for i in picked_dates],
        },
        columns=HEADER,
    )


def write_award_file(output_path: Path, df: pd.DataFrame) -> None:
    """Write the dataset as CSV (no quoting) or as a single-sheet workbook."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    suffix = output_path.suffix.lower()
    if suffix == ".csv":
        # the importer splits on ',' without quoting support
        df = df.replace({",": " "}, regex=True)
        df.to_csv(output_path, index=False)
    elif suffix == ".xlsx":
        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Awards", index=False)
    else:
        raise ValueError(f"unsupported output format: {output_path.suffix}")

    print(f"Created award file: {output_path}")
    print(f"  Rows: {len(df):,} (+ 1 header row)")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate synthetic award upload files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 10k rows for employees 1..500
  %(prog)s awards.csv --rows 10000 --employees 500

  # Spreadsheet with 5%% unknown employees
  %(prog)s awards.xlsx --rows 2000 --unknown-ratio 0.05
        """,
    )
    parser.add_argument("output", type=Path, help="Output file (.csv or .xlsx)")
    parser.add_argument("--rows", type=int, default=10_000, help="Number of data rows (default: 10,000)")
    parser.add_argument("--employees", type=int, default=100, help="Known employee id range 1..N (default: 100)")
    parser.add_argument(
        "--unknown-ratio",
        type=float,
        default=0.0,
        help="Share of rows with ids outside the known range (default: 0)",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if args.employees <= 0:
        print("Error: --employees must be positive", file=sys.stderr)
        return 1
    if not 0.0 <= args.unknown_ratio <= 1.0:
        print("Error: --unknown-ratio must be within [0, 1]", file=sys.stderr)
        return 1

    try:
        df = generate_award_data(args.rows, args.employees, args.unknown_ratio, args.seed)
        write_award_file(args.output, df)
    except (ValueError, OSError) as e:
        print(f"Error generating dataset: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
