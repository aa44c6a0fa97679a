from __future__ import annotations

import importlib.util
import time
from pathlib import Path

import pytest

from bulk_upload.sheet.reader import parse_file
from bulk_upload.validation.validator import validate_properties

"""Performance smoke test: read + validate a generated upload within a lenient time limit."""

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "gen_sample_uploads.py"


@pytest.fixture(scope="module")
def generator():
    spec = importlib.util.spec_from_file_location("gen_sample_uploads", SCRIPT)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_generated_rows_shape(generator):
    df = generator.generate_properties(50, invalid_ratio=1.0, seed=1)
    assert len(df) == 50
    assert list(df.columns) == generator.HEADERS
    assert (df["Property Type"] == "Castle").all()


def test_generator_cli_rejects_bad_suffix(generator, tmp_path: Path):
    assert generator.main([str(tmp_path / "out.txt")]) == 1


def test_validate_generated_csv(generator, tmp_path: Path, rules, directory):
    rows = 2_000
    path = tmp_path / "sample.csv"
    assert generator.main([str(path), "--rows", str(rows), "--invalid-ratio", "0.1"]) == 0

    start = time.perf_counter()
    properties = parse_file(path)
    batch = validate_properties(properties, rules, directory)
    elapsed = time.perf_counter() - start

    assert batch.total_rows == rows
    assert 0 < batch.invalid_rows < rows
    assert all(e.startswith("propertyType must be one of") for e in batch.all_errors)
    # CI でも余裕のある上限
    assert elapsed < 10.0, f"validation too slow: {elapsed:.3f}s for {rows} rows"


def test_auto_correct_generated_typos(generator, tmp_path: Path, matcher):
    df = generator.generate_properties(200, typo_ratio=1.0, seed=7)
    path = generator.write_sheet(df, tmp_path / "typos.xlsx")
    corrections = matcher.auto_correct_cities(parse_file(path))
    assert len(corrections) == 200
    assert any(c.was_auto_corrected for c in corrections)
