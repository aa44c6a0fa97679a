from __future__ import annotations

import dataclasses
from datetime import UTC, datetime

import pytest

from bulk_upload.models import BatchValidation, PropertyField, PropertyRow, ProcessingResult


def test_property_field_attribute_names():
    assert PropertyField.ZIP_CODE.value == "zipCode"
    assert PropertyField.ZIP_CODE.attribute == "zip_code"
    row = PropertyRow(id="1", zip_code="10001")
    assert row.get(PropertyField.ZIP_CODE) == "10001"


def test_every_field_is_a_row_attribute():
    names = {f.name for f in dataclasses.fields(PropertyRow)}
    assert {f.attribute for f in PropertyField} <= names


def test_numeric_fields():
    numeric = {f for f in PropertyField if f.is_numeric}
    assert numeric == {
        PropertyField.PRICE,
        PropertyField.BEDROOMS,
        PropertyField.TOILETS,
        PropertyField.PROPERTY_SIZE,
        PropertyField.YEAR_BUILT,
    }


def test_property_row_is_frozen():
    row = PropertyRow(id="1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        row.title = "x"  # type: ignore[misc]


def test_batch_warning_rows():
    rows = [PropertyRow(id="1", warnings=["w"]), PropertyRow(id="2")]
    batch = BatchValidation(rows=rows, total_rows=2, valid_rows=2, invalid_rows=0, all_errors=[])
    assert batch.warning_rows == 1


def test_processing_result_valid_percentage():
    t = datetime(2024, 1, 1, tzinfo=UTC)
    result = ProcessingResult(1, 0, 4, 3, 1, 0, 0, t, t, 0.0)
    assert result.valid_percentage == 75.0
    empty = ProcessingResult(0, 0, 0, 0, 0, 0, 0, t, t, 0.0)
    assert empty.valid_percentage == 0.0
