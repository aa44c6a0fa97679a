from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import UploadConfig
from ..locations.directory import LocationDirectory, load_location_directory
from ..locations.matcher import LocationMatcher, apply_city_corrections, summarize_city_checks
from ..logging.error_log import (
    CITY_AUTO_CORRECTED,
    FILE_READ_ERROR,
    UNSUPPORTED_FORMAT,
    ErrorLogBuffer,
    ErrorRecord,
    file_level_record,
    records_for_row,
)
from ..models.processing_result import FileStat, ProcessingResult
from ..models.property_row import PropertyField
from ..models.validation_rule import ValidationRule
from ..sheet.reader import SUPPORTED_EXTENSIONS, SheetError, UnsupportedFormatError, parse_file
from ..validation.rules import build_rules
from ..validation.validator import validate_properties
from .progress import ProgressTracker

"""Run orchestration.

For every spreadsheet in the configured directory:
read -> (optional) city auto-correction -> field validation -> city check
summary -> error log records. Read failures fail only their own file.
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal run-level error (source directory missing or unreadable)."""


@dataclass(frozen=True)
class UploadContext:
    """Static configuration shared by every file of a run, built once."""
    rules: tuple[ValidationRule, ...]
    directory: LocationDirectory
    matcher: LocationMatcher
    auto_correct: bool = False


def build_context(config: UploadConfig, current_year: int | None = None) -> UploadContext:
    """Load rule table and location directory for ``config``.

    Raises:
        LocationDataError: location data file missing or malformed
    """
    locations_path = Path(config.locations_file) if config.locations_file else None
    directory = load_location_directory(locations_path)
    matcher = LocationMatcher(
        directory,
        suggestion_threshold=config.matching.suggestion_threshold,
        max_suggestions=config.matching.max_suggestions,
        auto_correct_threshold=config.matching.auto_correct_threshold,
    )
    rules = build_rules(current_year, year_built_lookahead=config.year_built_lookahead)
    return UploadContext(rules=rules, directory=directory, matcher=matcher, auto_correct=config.auto_correct)


def scan_sheet_files(directory: Path) -> list[Path]:
    """Scan directory (non-recursive) for CSV / XLS / XLSX files, sorted by name.

    Raises:
        ProcessingError: If directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")

    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    try:
        return sorted(
            (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS),
            key=lambda p: p.name,
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def validate_file(path: Path, context: UploadContext) -> tuple[FileStat, list[ErrorRecord]]:
    """Validate one spreadsheet and return its stats and error log records."""
    start = datetime.now(UTC)
    try:
        rows = parse_file(path)
    except SheetError as e:
        error_type = UNSUPPORTED_FORMAT if isinstance(e, UnsupportedFormatError) else FILE_READ_ERROR
        elapsed = (datetime.now(UTC) - start).total_seconds()
        stat = FileStat(
            file_name=path.name,
            status="failed",
            total_rows=0,
            valid_rows=0,
            invalid_rows=0,
            elapsed_seconds=elapsed,
            error=str(e),
        )
        return stat, [file_level_record(path.name, error_type, str(e))]

    records: list[ErrorRecord] = []
    corrected_rows = 0
    if context.auto_correct:
        corrections = context.matcher.auto_correct_cities(rows)
        rows = apply_city_corrections(rows, corrections)
        by_id = {r.id: r for r in rows}
        for c in corrections:
            if not c.was_auto_corrected:
                continue
            corrected_rows += 1
            records.append(
                ErrorRecord.create(
                    path.name,
                    by_id[c.row_id].row_number,
                    PropertyField.CITY.value,
                    CITY_AUTO_CORRECTED,
                    f'City "{c.original_city}" corrected to "{c.city}" for country "{c.country}"',
                )
            )

    batch = validate_properties(rows, context.rules, context.directory)
    for row in batch.rows:
        if row.errors or row.warnings:
            logger.debug(
                "file=%s row=%d valid=%s errors=%s warnings=%s",
                path.name,
                row.row_number,
                row.is_valid,
                row.errors,
                row.warnings,
            )
        records.extend(records_for_row(path.name, row))

    city_summary = summarize_city_checks(context.matcher.batch_validate_cities(batch.rows))
    elapsed = (datetime.now(UTC) - start).total_seconds()
    stat = FileStat(
        file_name=path.name,
        status="success",
        total_rows=batch.total_rows,
        valid_rows=batch.valid_rows,
        invalid_rows=batch.invalid_rows,
        elapsed_seconds=elapsed,
        warning_rows=batch.warning_rows,
        corrected_rows=corrected_rows,
        city_summary=city_summary,
    )
    return stat, records


def process_all(
    config: UploadConfig,
    context: UploadContext | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Validate every spreadsheet in the configured source directory.

    Raises:
        ProcessingError: source directory missing or unreadable
        LocationDataError: when ``context`` is None and location data is invalid
    """
    start_time = datetime.now(UTC)
    context = context or build_context(config)
    error_log = error_log if error_log is not None else ErrorLogBuffer()

    file_paths = scan_sheet_files(Path(config.source_directory))

    file_stats: list[FileStat] = []
    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            stat, records = validate_file(file_path, context)
            error_log.extend(records)
            file_stats.append(stat)
            if stat.status == "failed":
                logger.error("file=%s read failed: %s", stat.file_name, stat.error)
            progress.set_postfix(
                rows=sum(s.total_rows for s in file_stats),
                invalid=sum(s.invalid_rows for s in file_stats),
            )
            progress.finish_file()

    log_path = error_log.flush()
    if log_path is not None:
        logger.info("error log written: %s", log_path)

    end_time = datetime.now(UTC)
    ok = [s for s in file_stats if s.status == "success"]
    return ProcessingResult(
        success_files=len(ok),
        failed_files=len(file_stats) - len(ok),
        total_rows=sum(s.total_rows for s in ok),
        valid_rows=sum(s.valid_rows for s in ok),
        invalid_rows=sum(s.invalid_rows for s in ok),
        warning_rows=sum(s.warning_rows for s in ok),
        corrected_rows=sum(s.corrected_rows for s in ok),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
