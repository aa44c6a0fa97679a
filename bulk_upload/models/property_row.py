from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""PropertyRow model and the PropertyField enum.

PropertyRow represents one spreadsheet row after header mapping. It is created
fresh at parse time and replaced (never mutated) by the validator, which fills
errors / warnings / is_valid.
"""

__all__ = [
    "FieldError",
    "PropertyField",
    "PropertyRow",
]


class PropertyField(Enum):
    """Canonical field identifiers.

    The enum value is the name used in validation messages and by the upload
    wizard; ``attribute`` is the matching PropertyRow attribute.
    """
    TITLE = "title"
    COUNTRY = "country"
    ADDRESS = "address"
    CITY = "city"
    ZIP_CODE = "zipCode"
    TELEPHONE = "telephone"
    PRICE = "price"
    PROPERTY_TYPE = "propertyType"
    LISTING_TYPE = "listingType"
    BEDROOMS = "bedrooms"
    TOILETS = "toilets"
    PROPERTY_SIZE = "propertySize"
    YEAR_BUILT = "yearBuilt"
    PARKING_SPACE = "parkingSpace"
    DESCRIPTION = "description"

    @property
    def attribute(self) -> str:
        return self.name.lower()

    @property
    def is_numeric(self) -> bool:
        return self in NUMERIC_FIELDS


NUMERIC_FIELDS = frozenset({
    PropertyField.PRICE,
    PropertyField.BEDROOMS,
    PropertyField.TOILETS,
    PropertyField.PROPERTY_SIZE,
    PropertyField.YEAR_BUILT,
})


@dataclass(frozen=True)
class FieldError:
    """One rule violation, keyed by the field it belongs to."""
    field: PropertyField
    message: str


@dataclass(frozen=True)
class PropertyRow:
    """One spreadsheet row mapped to a structured record.

    Field values are whatever the reader (or caller) put there; the validator
    does not assume they already have the right type.
    """
    id: str  # row-scoped identifier, not persisted
    title: Any = None
    country: Any = None
    address: Any = None
    city: Any = None
    zip_code: Any = None
    telephone: Any = None
    price: Any = None
    property_type: Any = None
    listing_type: Any = None
    bedrooms: Any = None
    toilets: Any = None
    property_size: Any = None
    year_built: Any = None  # optional
    parking_space: Any = None  # optional
    description: Any = None
    row_number: int = -1  # spreadsheet row (header = 1). -1 when not from a sheet
    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    # errors と同順 (フィールド付き)
    field_errors: list[FieldError] = field(default_factory=list)

    def get(self, property_field: PropertyField) -> Any:
        return getattr(self, property_field.attribute)
