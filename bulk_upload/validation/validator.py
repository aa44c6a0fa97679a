from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import Any

from ..locations.directory import LocationDirectory
from ..models.processing_result import BatchValidation
from ..models.property_row import FieldError, PropertyRow
from ..models.validation_rule import ValidationRule, ValueKind

"""Field validator.

Every rule is applied to every row; violations accumulate instead of stopping
at the first one, so one pass reports every problem in a row. City/country
mismatches are warnings only and never affect validity.
"""

__all__ = [
    "check_rule",
    "validate_properties",
    "validate_property",
]


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _is_number(value: Any) -> bool:
    # bool は int のサブクラスなので除外
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_bound(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)


def check_rule(rule: ValidationRule, value: Any) -> list[str]:
    """Return the error messages ``value`` produces under ``rule``."""
    name = rule.field.value
    if _is_empty(value):
        return [f"{name} is required"] if rule.required else []

    errors: list[str] = []
    if rule.kind is ValueKind.STRING and not isinstance(value, str):
        errors.append(f"{name} must be a string")
    elif rule.kind is ValueKind.NUMBER and not _is_number(value):
        errors.append(f"{name} must be a number")
    elif rule.kind is ValueKind.ENUM and rule.enum_values and value not in rule.enum_values:
        errors.append(f"{name} must be one of: {', '.join(rule.enum_values)}")

    # min / max は独立に判定する (両方の違反を同時に報告しうる)
    if rule.kind is ValueKind.STRING and isinstance(value, str):
        if rule.minimum is not None and len(value) < rule.minimum:
            errors.append(f"{name} must be at least {_format_bound(rule.minimum)} characters")
        if rule.maximum is not None and len(value) > rule.maximum:
            errors.append(f"{name} must be no more than {_format_bound(rule.maximum)} characters")
    elif rule.kind is ValueKind.NUMBER and _is_number(value):
        if rule.minimum is not None and value < rule.minimum:
            errors.append(f"{name} must be at least {_format_bound(rule.minimum)}")
        if rule.maximum is not None and value > rule.maximum:
            errors.append(f"{name} must be no more than {_format_bound(rule.maximum)}")

    if rule.pattern is not None and isinstance(value, str) and not rule.pattern.search(value):
        errors.append(f"{name} has invalid format")

    return errors


def validate_property(
    row: PropertyRow, rules: Sequence[ValidationRule], directory: LocationDirectory
) -> PropertyRow:
    """Validate one row and return a copy with errors, warnings and is_valid set."""
    field_errors = [
        FieldError(rule.field, message)
        for rule in rules
        for message in check_rule(rule, row.get(rule.field))
    ]
    errors = [e.message for e in field_errors]

    warnings: list[str] = []
    country, city = row.country, row.city
    if isinstance(country, str) and isinstance(city, str) and country and city:
        if directory.cities_for_country(country) and not directory.contains_city(country, city):
            warnings.append(f'City "{city}" may not be valid for country "{country}"')

    return replace(
        row, errors=errors, field_errors=field_errors, warnings=warnings, is_valid=not errors
    )


def validate_properties(
    rows: Iterable[PropertyRow], rules: Sequence[ValidationRule], directory: LocationDirectory
) -> BatchValidation:
    """Validate every row independently, preserving input order."""
    validated = [validate_property(row, rules, directory) for row in rows]
    valid = sum(1 for r in validated if r.is_valid)
    return BatchValidation(
        rows=validated,
        total_rows=len(validated),
        valid_rows=valid,
        invalid_rows=len(validated) - valid,
        all_errors=[e for r in validated for e in r.errors],
    )
