from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from ..models.property_row import PropertyField

"""Header dictionary and value coercion.

Headers are parsed once into PropertyField members; cells are then coerced per
field. Coercion never fails: a numeric cell with nothing parseable becomes 0 and
is left to the validator's range checks.
"""

__all__ = [
    "HEADER_ALIASES",
    "build_header_map",
    "coerce_value",
    "normalize_header",
]

F = PropertyField

HEADER_ALIASES: dict[str, PropertyField] = {
    "property title": F.TITLE,
    "title": F.TITLE,
    "country": F.COUNTRY,
    "address": F.ADDRESS,
    "city": F.CITY,
    "zip code": F.ZIP_CODE,
    "zipcode": F.ZIP_CODE,
    "postal code": F.ZIP_CODE,
    "telephone": F.TELEPHONE,
    "phone": F.TELEPHONE,
    "phone number": F.TELEPHONE,
    "price": F.PRICE,
    "property type": F.PROPERTY_TYPE,
    "type": F.PROPERTY_TYPE,
    "listing type": F.LISTING_TYPE,
    "bedrooms": F.BEDROOMS,
    "beds": F.BEDROOMS,
    "toilets": F.TOILETS,
    "bathrooms": F.TOILETS,
    "baths": F.TOILETS,
    "property size": F.PROPERTY_SIZE,
    "size": F.PROPERTY_SIZE,
    "square feet": F.PROPERTY_SIZE,
    "sqft": F.PROPERTY_SIZE,
    "year built": F.YEAR_BUILT,
    "built year": F.YEAR_BUILT,
    "parking space": F.PARKING_SPACE,
    "parking": F.PARKING_SPACE,
    "property description": F.DESCRIPTION,
    "description": F.DESCRIPTION,
}

_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")
_NUMBER_PREFIX_RE = re.compile(r"-?(\d+(\.\d*)?|\.\d+)")


def normalize_header(header: Any) -> str | None:
    if not isinstance(header, str):
        return None
    return header.strip().lower()


def build_header_map(headers: Sequence[Any]) -> dict[int, PropertyField]:
    """Map column index -> field. Unknown headers are ignored.

    When two columns map to the same field the later column wins, matching
    cell-by-cell assignment in column order.
    """
    mapping: dict[int, PropertyField] = {}
    for index, header in enumerate(headers):
        key = normalize_header(header)
        if key is None:
            continue
        field = HEADER_ALIASES.get(key)
        if field is not None:
            mapping[index] = field
    return mapping


def _parse_number(text: str) -> int | float:
    cleaned = _NON_NUMERIC_RE.sub("", text)
    m = _NUMBER_PREFIX_RE.match(cleaned)
    if not m:
        return 0
    number = float(m.group(0))
    return int(number) if number.is_integer() else number


def coerce_value(field: PropertyField, raw: str) -> Any:
    """Convert trimmed cell text to the field's value."""
    if field.is_numeric:
        return _parse_number(raw)
    if field is PropertyField.LISTING_TYPE:
        return "Rent" if raw.lower() == "rent" else "Sale"
    return raw
