#!/usr/bin/env python3
"""Sample upload generator for manual runs and performance checks.

Generates property spreadsheets (CSV or XLSX, chosen by the output suffix) in
the layout the bulk upload wizard accepts:
- Row 1: Header row (display names)
- Row 2+: Property rows

A share of rows can be made invalid (broken field values) or given city typos
so that validation, warnings and auto-correction all have something to do.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

HEADERS = [
    "Property Title", "Country", "Address", "City", "Zip Code", "Phone", "Price",
    "Property Type", "Listing Type", "Bedrooms", "Bathrooms", "Size", "Year Built",
    "Parking", "Description",
]

# (country, city, zip code) の組み合わせ
LOCATIONS = [
    ("US", "New York", "10001"),
    ("US", "Chicago", "60601"),
    ("Mexico", "Guadalajara", "44100"),
    ("Spain", "Madrid", "28001"),
    ("Spain", "Barcelona", "08001"),
    ("Germany", "Berlin", "10115"),
    ("Austria", "Graz", "8010"),
    ("United Kingdom", "London", "SW1A 1AA"),
]

PROPERTY_TYPES = ["House", "Apartment", "Condo", "Villa", "Townhouse", "Commercial", "Land"]


def _typo(city: str, rng: np.random.Generator) -> str:
    # 1文字重複 (auto-correct 対象になる程度の誤り)
    i = int(rng.integers(1, len(city)))
    return city[:i] + city[i - 1] + city[i:]


def generate_properties(
    rows: int, invalid_ratio: float = 0.0, typo_ratio: float = 0.0, seed: int = 42
) -> pd.DataFrame:
    """Build a DataFrame of property rows with display-name headers.

    Invalid rows get a property type outside the accepted list; typo rows get
    a city with one duplicated letter. Both are chosen independently per row.
    """
    rng = np.random.default_rng(seed)
    picks = rng.integers(0, len(LOCATIONS), rows)
    invalid = rng.random(rows) < invalid_ratio
    typos = rng.random(rows) < typo_ratio

    records = []
    for n in range(rows):
        country, city, zip_code = LOCATIONS[int(picks[n])]
        records.append([
            f"Sample Property {n + 1}",
            country,
            f"{int(rng.integers(1, 999))} Sample Street",
            _typo(city, rng) if typos[n] else city,
            zip_code,
            f"+{int(rng.integers(10**9, 10**10))}",
            f"${int(rng.integers(50, 5000)) * 1000:,}",
            "Castle" if invalid[n] else PROPERTY_TYPES[int(rng.integers(0, len(PROPERTY_TYPES)))],
            "rent" if rng.random() < 0.3 else "sale",
            str(int(rng.integers(0, 8))),
            str(int(rng.integers(1, 5))),
            str(int(rng.integers(30, 600))),
            str(int(rng.integers(1900, 2024))),
            "1 space",
            "Generated sample property for upload checks",
        ])
    return pd.DataFrame(records, columns=HEADERS)


def write_sheet(df: pd.DataFrame, output_path: Path) -> Path:
    """Write ``df`` as CSV or XLSX depending on the output suffix."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.suffix.lower() == ".csv":
        df.to_csv(output_path, index=False)
    else:
        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Properties", index=False)
    return output_path


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Generate sample property upload files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 1,000 clean rows as CSV
  %(prog)s data/sample.csv --rows 1000

  # Excel file with 10%% invalid rows and 5%% city typos
  %(prog)s data/sample.xlsx --rows 5000 --invalid-ratio 0.1 --typo-ratio 0.05
        """,
    )
    parser.add_argument("output", type=Path, help="Output file (.csv or .xlsx)")
    parser.add_argument("--rows", type=int, default=1_000, help="Number of property rows (default: 1,000)")
    parser.add_argument("--invalid-ratio", type=float, default=0.0, help="Share of rows with an unknown property type")
    parser.add_argument("--typo-ratio", type=float, default=0.0, help="Share of rows with a city typo")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args(argv)

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if args.output.suffix.lower() not in (".csv", ".xlsx"):
        print("Error: output must end with .csv or .xlsx", file=sys.stderr)
        return 1
    for name in ("invalid_ratio", "typo_ratio"):
        if not 0.0 <= getattr(args, name) <= 1.0:
            print(f"Error: --{name.replace('_', '-')} must be between 0 and 1", file=sys.stderr)
            return 1

    df = generate_properties(args.rows, args.invalid_ratio, args.typo_ratio, args.seed)
    path = write_sheet(df, args.output)
    print(f"Created {path} ({len(df):,} rows)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
