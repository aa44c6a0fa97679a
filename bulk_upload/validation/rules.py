from __future__ import annotations

from datetime import UTC, datetime

from ..models.property_row import PropertyField
from ..models.validation_rule import ValidationRule, ValueKind

"""Upload rule table.

This table is the schema contract the upload wizard depends on. It is built
once at startup and passed to the validator; nothing mutates it afterwards.
"""

__all__ = [
    "COUNTRIES",
    "LISTING_TYPES",
    "PROPERTY_TYPES",
    "YEAR_BUILT_LOOKAHEAD",
    "build_rules",
]

COUNTRIES = ("US", "Mexico", "Spain", "Germany", "Austria", "United Kingdom")
PROPERTY_TYPES = ("House", "Apartment", "Condo", "Villa", "Townhouse", "Commercial", "Land")
LISTING_TYPES = ("Sale", "Rent")

YEAR_BUILT_MIN = 1800
YEAR_BUILT_LOOKAHEAD = 5  # 竣工予定物件を許容する年数


def build_rules(
    current_year: int | None = None, year_built_lookahead: int = YEAR_BUILT_LOOKAHEAD
) -> tuple[ValidationRule, ...]:
    """Build the rule table in evaluation order.

    ``current_year`` defaults to the current UTC year; yearBuilt may be up to
    ``year_built_lookahead`` years in the future.
    """
    if current_year is None:
        current_year = datetime.now(UTC).year
    f = PropertyField
    return (
        ValidationRule(f.TITLE, True, ValueKind.STRING, minimum=5, maximum=200),
        ValidationRule(f.COUNTRY, True, ValueKind.ENUM, enum_values=COUNTRIES),
        ValidationRule(f.ADDRESS, True, ValueKind.STRING, minimum=5, maximum=500),
        ValidationRule(f.CITY, True, ValueKind.STRING, minimum=2, maximum=100),
        ValidationRule(f.ZIP_CODE, True, ValueKind.STRING, minimum=3, maximum=20),
        ValidationRule(f.TELEPHONE, True, ValueKind.STRING, minimum=8, maximum=20),
        ValidationRule(f.PRICE, True, ValueKind.NUMBER, minimum=0),
        ValidationRule(f.PROPERTY_TYPE, True, ValueKind.ENUM, enum_values=PROPERTY_TYPES),
        ValidationRule(f.LISTING_TYPE, True, ValueKind.ENUM, enum_values=LISTING_TYPES),
        ValidationRule(f.BEDROOMS, True, ValueKind.NUMBER, minimum=0, maximum=20),
        ValidationRule(f.TOILETS, True, ValueKind.NUMBER, minimum=0, maximum=20),
        ValidationRule(f.PROPERTY_SIZE, True, ValueKind.NUMBER, minimum=1),
        ValidationRule(
            f.YEAR_BUILT,
            False,
            ValueKind.NUMBER,
            minimum=YEAR_BUILT_MIN,
            maximum=current_year + year_built_lookahead,
        ),
        ValidationRule(f.PARKING_SPACE, False, ValueKind.STRING, maximum=100),
        ValidationRule(f.DESCRIPTION, True, ValueKind.STRING, minimum=10, maximum=2000),
    )
