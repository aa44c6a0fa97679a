# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pandas as pd
import pytest

from bulk_upload.locations.directory import LocationDirectory, load_location_directory
from bulk_upload.locations.matcher import LocationMatcher
from bulk_upload.logging.init import reset_logging
from bulk_upload.models.property_row import PropertyRow
from bulk_upload.validation.rules import build_rules

HEADERS = [
    "Property Title", "Country", "Address", "City", "Zip Code", "Phone", "Price",
    "Property Type", "Listing Type", "Bedrooms", "Bathrooms", "Size", "Year Built",
    "Parking", "Description",
]

VALID_SHEET_ROW = [
    "Test Property", "US", "123 Main St", "New York", "10001", "+1234567890", "$500,000",
    "House", "sale", "2", "2", "1000", "2020", "1 space", "A test property with good amenities",
]


@pytest.fixture(autouse=True)
def _clean_logging():
    yield
    # capsys のストリームに紐付いたハンドラを残さない
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("BULK_UPLOAD_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
auto_correct: false
year_built_lookahead: 5
matching:
  suggestion_threshold: 0.3
  max_suggestions: 5
  auto_correct_threshold: 0.8
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "upload.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture(scope="session")
def directory() -> LocationDirectory:
    return load_location_directory()


@pytest.fixture(scope="session")
def matcher(directory: LocationDirectory) -> LocationMatcher:
    return LocationMatcher(directory)


@pytest.fixture(scope="session")
def rules():
    return build_rules(current_year=2024)


@pytest.fixture()
def valid_row() -> PropertyRow:
    return PropertyRow(
        id="1",
        title="Test Property",
        country="US",
        address="123 Main St",
        city="New York",
        zip_code="10001",
        telephone="+1234567890",
        price=500000,
        property_type="House",
        listing_type="Sale",
        bedrooms=2,
        toilets=2,
        property_size=1000,
        year_built=2020,
        parking_space="1 space",
        description="A test property with good amenities",
        is_valid=False,
    )


@pytest.fixture()
def make_sheet():
    """Write rows (with HEADERS by default) as CSV or XLSX depending on the suffix."""
    def _make(path: Path, rows: list[list[object]], headers: list[str] | None = None) -> Path:
        df = pd.DataFrame(rows, columns=headers or HEADERS)
        if path.suffix == ".csv":
            df.to_csv(path, index=False)
        else:
            with pd.ExcelWriter(path) as writer:
                df.to_excel(writer, sheet_name="Properties", index=False)
        return path
    return _make


@pytest.fixture()
def valid_sheet_row() -> list[object]:
    return list(VALID_SHEET_ROW)
