from __future__ import annotations

from datetime import UTC, datetime

from bulk_upload.models.city_validation import CityValidationSummary
from bulk_upload.models.processing_result import FileStat, ProcessingResult
from bulk_upload.services.summary import _format_number, render_file_line, render_summary_line

T = datetime(2024, 1, 1, tzinfo=UTC)


def _result(**overrides) -> ProcessingResult:
    values = dict(
        success_files=2,
        failed_files=1,
        total_rows=3,
        valid_rows=2,
        invalid_rows=1,
        warning_rows=1,
        corrected_rows=0,
        start_time=T,
        end_time=T,
        elapsed_seconds=1.5,
    )
    values.update(overrides)
    return ProcessingResult(**values)


def test_format_number():
    assert _format_number(0) == "0"
    assert _format_number(100.0) == "100"
    assert _format_number(66.666666) == "66.67"
    assert _format_number(1.5) == "1.5"
    assert _format_number(0.0012) == "0.0012"


def test_render_summary_line():
    line = render_summary_line(3, _result())
    assert line == (
        "SUMMARY files=3/3 failed=1 rows=3 valid=2 invalid=1 warnings=1 "
        "corrected=0 valid_pct=66.67 elapsed_sec=1.5"
    )


def test_render_summary_line_no_rows():
    line = render_summary_line(0, _result(success_files=0, failed_files=0, total_rows=0,
                                          valid_rows=0, invalid_rows=0, warning_rows=0,
                                          elapsed_seconds=0.0))
    assert "files=0/0" in line
    assert "valid_pct=0 " in line


def test_render_file_line_success():
    stat = FileStat(
        file_name="a.csv",
        status="success",
        total_rows=4,
        valid_rows=3,
        invalid_rows=1,
        elapsed_seconds=0.1,
        warning_rows=2,
        corrected_rows=1,
        city_summary=CityValidationSummary(
            total=4, valid=2, invalid=2, valid_percentage=50.0,
            invalid_by_country={"US": 1, "Spain": 1},
        ),
    )
    assert render_file_line(stat) == (
        "file=a.csv status=success rows=4 valid=3 invalid=1 warnings=2 corrected=1 "
        "city_valid_pct=50 city_invalid_by_country=Spain:1,US:1"
    )


def test_render_file_line_all_cities_valid():
    stat = FileStat("b.csv", "success", 1, 1, 0, 0.1,
                    city_summary=CityValidationSummary(1, 1, 0, 100.0))
    assert render_file_line(stat).endswith("city_valid_pct=100 city_invalid_by_country=-")


def test_render_file_line_failed():
    stat = FileStat("c.xlsx", "failed", 0, 0, 0, 0.0, error="failed to read c.xlsx: bad zip")
    assert render_file_line(stat) == "file=c.xlsx status=failed error=failed to read c.xlsx: bad zip"
