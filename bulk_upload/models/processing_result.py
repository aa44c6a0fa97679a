from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .city_validation import CityValidationSummary
from .property_row import PropertyRow

"""Batch and run-level result models.

BatchValidation is the result of validating one batch of rows (one file).
FileStat / ProcessingResult aggregate a whole CLI run for the SUMMARY line.
"""


@dataclass(frozen=True)
class BatchValidation:
    """Validated rows plus tallies.

    ``all_errors`` is every row's error list flattened in row order.
    """
    rows: list[PropertyRow]
    total_rows: int
    valid_rows: int
    invalid_rows: int
    all_errors: list[str]

    @property
    def warning_rows(self) -> int:
        return sum(1 for r in self.rows if r.warnings)


@dataclass(frozen=True)
class FileStat:
    """Per-file statistics."""
    file_name: str
    status: str  # success/failed
    total_rows: int
    valid_rows: int
    invalid_rows: int
    elapsed_seconds: float
    warning_rows: int = 0
    corrected_rows: int = 0
    city_summary: CityValidationSummary | None = None
    error: str | None = None  # read failure reason


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results for one run over the source directory."""
    success_files: int
    failed_files: int
    total_rows: int
    valid_rows: int
    invalid_rows: int
    warning_rows: int
    corrected_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] = field(default_factory=list)

    @property
    def valid_percentage(self) -> float:
        if self.total_rows == 0:
            return 0.0
        return self.valid_rows / self.total_rows * 100
