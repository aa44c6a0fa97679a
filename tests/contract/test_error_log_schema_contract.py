from __future__ import annotations

import json
import re
from pathlib import Path

from bulk_upload.cli import main as cli_main
from bulk_upload.logging.init import reset_logging

"""Error log contract: one JSON object per line with a fixed key set."""

KEYS = {"timestamp", "file", "row", "field", "error_type", "message"}
ERROR_TYPES = {
    "FIELD_VIOLATION",
    "LOCATION_MISMATCH",
    "CITY_AUTO_CORRECTED",
    "FILE_READ_ERROR",
    "UNSUPPORTED_FORMAT",
}
TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")


def test_error_log_lines(write_config, temp_workdir: Path, make_sheet, valid_sheet_row):
    reset_logging()
    data = temp_workdir / "data"
    bad = list(valid_sheet_row)
    bad[6] = ""
    bad[3] = "Paris"
    make_sheet(data / "rows.csv", [valid_sheet_row, bad])
    (data / "broken.xls").write_text("garbage", encoding="utf-8")

    assert cli_main([]) == 2

    logs = sorted((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    assert re.fullmatch(r"errors-\d{8}-\d{6}\.log", logs[0].name)
    entries = [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]
    assert entries
    for e in entries:
        assert set(e) == KEYS
        assert e["error_type"] in ERROR_TYPES
        assert TIMESTAMP_RE.match(e["timestamp"])
        assert isinstance(e["row"], int)

    by_type = {e["error_type"]: e for e in entries}
    assert by_type["FILE_READ_ERROR"]["file"] == "broken.xls"
    assert by_type["FILE_READ_ERROR"]["row"] == -1
    violation = by_type["FIELD_VIOLATION"]
    assert (violation["file"], violation["row"], violation["field"]) == ("rows.csv", 3, "price")
    assert violation["message"] == "price is required"
    assert by_type["LOCATION_MISMATCH"]["message"] == 'City "Paris" may not be valid for country "US"'


def test_no_error_log_when_clean(write_config, temp_workdir: Path, make_sheet, valid_sheet_row):
    reset_logging()
    make_sheet(temp_workdir / "data" / "ok.xlsx", [valid_sheet_row])
    assert cli_main([]) == 0
    assert list((temp_workdir / "logs").glob("errors-*.log")) == []
