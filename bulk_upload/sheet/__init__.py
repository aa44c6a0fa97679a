"""Spreadsheet reading and header mapping."""

from .headers import HEADER_ALIASES, build_header_map, coerce_value
from .reader import (
    SUPPORTED_EXTENSIONS,
    SheetError,
    SheetReadError,
    UnsupportedFormatError,
    parse_file,
    read_sheet_file,
    rows_to_properties,
)

__all__ = [
    "HEADER_ALIASES",
    "SUPPORTED_EXTENSIONS",
    "SheetError",
    "SheetReadError",
    "UnsupportedFormatError",
    "build_header_map",
    "coerce_value",
    "parse_file",
    "read_sheet_file",
    "rows_to_properties",
]
