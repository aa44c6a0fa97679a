from __future__ import annotations

import zipfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.property_row import PropertyRow
from .headers import build_header_map, coerce_value

"""Spreadsheet reader (CSV / XLS / XLSX).

The first row is the header, every following non-blank row is a property.
Cells are read as text (``dtype=str``) so that ZIP codes keep leading zeros
and numbers are coerced by field afterwards. Only the first sheet of a
workbook is used.
"""

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "SheetError",
    "SheetReadError",
    "UnsupportedFormatError",
    "parse_file",
    "read_sheet_file",
    "rows_to_properties",
]

SUPPORTED_EXTENSIONS = (".csv", ".xlsx", ".xls")


class SheetError(Exception):
    """Base class for per-file read failures."""


class UnsupportedFormatError(SheetError):
    """Raised for file extensions other than CSV / XLS / XLSX."""


class SheetReadError(SheetError):
    """Raised when a file cannot be read or parsed."""


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _read_csv(path: Path, read_opts: dict[str, Any]) -> pd.DataFrame:
    """Read a CSV as a ragged grid.

    Blank lines are kept so row positions match the sheet. Rows wider than the
    header are cut to the header width; cells past the header map to no field.
    """
    width = len(pd.read_csv(path, engine="python", nrows=1, **read_opts).columns)
    return pd.read_csv(
        path,
        engine="python",
        skip_blank_lines=False,
        on_bad_lines=lambda cells: cells[:width],
        **read_opts,
    )


def read_sheet_file(path: Path) -> list[list[Any]]:
    """Read the first sheet of ``path`` as a grid of raw cells (header included)."""
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(
            f"unsupported file format '{path.suffix}': use CSV or Excel files"
        )
    # 空セルのみ欠損扱い ("NA" / "None" 等の文字列はそのまま残す)
    read_opts: dict[str, Any] = {"header": None, "dtype": str, "keep_default_na": False, "na_values": [""]}
    try:
        if suffix == ".csv":
            df = _read_csv(path, read_opts)
        else:
            with pd.ExcelFile(path) as xls:
                if not xls.sheet_names:
                    return []
                df = xls.parse(xls.sheet_names[0], **read_opts)
    except pd.errors.EmptyDataError:
        return []
    except (OSError, ValueError, ImportError, zipfile.BadZipFile, pd.errors.ParserError) as e:
        raise SheetReadError(f"failed to read {path.name}: {e}") from e
    return [[None if _is_blank(v) else v for v in row] for row in df.itertuples(index=False, name=None)]


def rows_to_properties(grid: Sequence[Sequence[Any]], source: str = "row") -> list[PropertyRow]:
    """Map a raw grid to PropertyRow records.

    Row identifiers are ``<source>:<row_number>`` where row_number is the
    1-based spreadsheet row (the header is row 1). Entirely blank rows are
    skipped; missing cells leave the field ``None``.
    """
    if not grid:
        return []
    header_map = build_header_map(list(grid[0]))
    properties: list[PropertyRow] = []
    for offset, raw in enumerate(grid[1:]):
        if all(_is_blank(v) for v in raw):
            continue
        row_number = offset + 2
        values: dict[str, Any] = {}
        for col_index, field in header_map.items():
            if col_index >= len(raw) or _is_blank(raw[col_index]):
                continue
            text = str(raw[col_index]).strip()
            values[field.attribute] = coerce_value(field, text)
        properties.append(PropertyRow(id=f"{source}:{row_number}", row_number=row_number, **values))
    return properties


def parse_file(path: Path) -> list[PropertyRow]:
    """Read ``path`` and map it to PropertyRow records."""
    return rows_to_properties(read_sheet_file(path), source=path.name)
