from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .property_row import PropertyField

__all__ = [
    "ValidationRule",
    "ValueKind",
]


class ValueKind(Enum):
    STRING = "string"
    NUMBER = "number"
    ENUM = "enum"


@dataclass(frozen=True)
class ValidationRule:
    """One declarative constraint on a single field.

    ``minimum`` / ``maximum`` bound the length for STRING rules and the value
    for NUMBER rules. Rules are static configuration built once per process.
    """
    field: PropertyField
    required: bool
    kind: ValueKind
    minimum: float | None = None
    maximum: float | None = None
    enum_values: tuple[str, ...] | None = None
    pattern: re.Pattern[str] | None = None
