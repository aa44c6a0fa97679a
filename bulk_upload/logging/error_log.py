from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import FILE_LEVEL_ROW, ErrorRecord
from ..models.property_row import PropertyField, PropertyRow

"""Error log buffering.

- JSON Lines with a fixed key set (see ErrorRecord)
- One file per run: ``logs/errors-YYYYMMDD-HHMMSS.log`` (UTC), created on first flush
- Records are buffered and written in one go at the end of the run
"""

__all__ = [
    "ErrorLogBuffer",
    "ErrorRecord",
    "file_level_record",
    "records_for_row",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

FIELD_VIOLATION = "FIELD_VIOLATION"
LOCATION_MISMATCH = "LOCATION_MISMATCH"
CITY_AUTO_CORRECTED = "CITY_AUTO_CORRECTED"
FILE_READ_ERROR = "FILE_READ_ERROR"
UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"


class ErrorLogBuffer:
    """In-memory buffer for error records. ``flush`` appends JSON Lines.

    Not thread safe (single-threaded run).
    """
    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir or LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def extend(self, records: list[ErrorRecord]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the log path, or None when nothing was written."""
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp


def records_for_row(file: str, row: PropertyRow) -> list[ErrorRecord]:
    """Error records for one validated row (errors first, then warnings)."""
    records = [
        ErrorRecord.create(file, row.row_number, fe.field.value, FIELD_VIOLATION, fe.message)
        for fe in row.field_errors
    ]
    records.extend(
        ErrorRecord.create(file, row.row_number, PropertyField.CITY.value, LOCATION_MISMATCH, msg)
        for msg in row.warnings
    )
    return records


def file_level_record(file: str, error_type: str, message: str) -> ErrorRecord:
    return ErrorRecord.create(file, FILE_LEVEL_ROW, "", error_type, message)
