from __future__ import annotations

from datetime import UTC, datetime

from bulk_upload.models.property_row import PropertyField
from bulk_upload.models.validation_rule import ValueKind
from bulk_upload.validation.rules import YEAR_BUILT_MIN, build_rules


def test_one_rule_per_field_in_order():
    rules = build_rules(current_year=2024)
    assert [r.field for r in rules] == list(PropertyField)


def test_only_year_built_and_parking_are_optional():
    optional = {r.field for r in build_rules(current_year=2024) if not r.required}
    assert optional == {PropertyField.YEAR_BUILT, PropertyField.PARKING_SPACE}


def test_numeric_fields_use_number_rules():
    for rule in build_rules(current_year=2024):
        if rule.field.is_numeric:
            assert rule.kind is ValueKind.NUMBER


def test_year_built_window():
    by_field = {r.field: r for r in build_rules(current_year=2024, year_built_lookahead=2)}
    year = by_field[PropertyField.YEAR_BUILT]
    assert year.minimum == YEAR_BUILT_MIN
    assert year.maximum == 2026


def test_default_year_is_current_year():
    by_field = {r.field: r for r in build_rules()}
    assert by_field[PropertyField.YEAR_BUILT].maximum == datetime.now(UTC).year + 5
