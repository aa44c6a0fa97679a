from __future__ import annotations

from ..models.city_validation import CityValidationSummary
from ..models.processing_result import FileStat, ProcessingResult

"""SUMMARY / per-file line rendering.

Format:
SUMMARY files={total}/{total} failed={failed} rows={rows} valid={valid}
invalid={invalid} warnings={warnings} corrected={corrected}
valid_pct={pct} elapsed_sec={elapsed}
"""


def _format_number(value: float) -> str:
    """Integers without decimals, small values without scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if abs(value) < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.2f}".rstrip("0").rstrip(".")


def render_summary_line(total_files: int, result: ProcessingResult) -> str:
    """Render the SUMMARY line for a run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=0, total_rows=10, valid_rows=8,
        ...     invalid_rows=2, warning_rows=1, corrected_rows=0,
        ...     start_time=t, end_time=t, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(1, result)
        'SUMMARY files=1/1 failed=0 rows=10 valid=8 invalid=2 warnings=1 corrected=0 valid_pct=80 elapsed_sec=2'
    """
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows} "
        f"valid={result.valid_rows} "
        f"invalid={result.invalid_rows} "
        f"warnings={result.warning_rows} "
        f"corrected={result.corrected_rows} "
        f"valid_pct={_format_number(result.valid_percentage)} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)}"
    )


def _format_by_country(summary: CityValidationSummary) -> str:
    if not summary.invalid_by_country:
        return "-"
    return ",".join(f"{country}:{n}" for country, n in sorted(summary.invalid_by_country.items()))


def render_file_line(stat: FileStat) -> str:
    """One INFO line per file: row tallies plus the city-check breakdown."""
    if stat.status == "failed":
        return f"file={stat.file_name} status=failed error={stat.error}"
    line = (
        f"file={stat.file_name} status={stat.status} rows={stat.total_rows} "
        f"valid={stat.valid_rows} invalid={stat.invalid_rows} "
        f"warnings={stat.warning_rows} corrected={stat.corrected_rows}"
    )
    if stat.city_summary is not None:
        line += (
            f" city_valid_pct={_format_number(stat.city_summary.valid_percentage)}"
            f" city_invalid_by_country={_format_by_country(stat.city_summary)}"
        )
    return line
