"""Domain models for the bulk property upload validator.

All models are dataclasses; records produced by the validator are frozen and
treated as immutable by downstream consumers.
"""

from .city_validation import (
    CityCheck,
    CityCorrection,
    CitySearchHit,
    CityValidationResult,
    CityValidationSummary,
    PostalCodeMatch,
    SearchSuggestion,
)
from .error_record import ErrorRecord
from .processing_result import BatchValidation, FileStat, ProcessingResult
from .property_row import FieldError, PropertyField, PropertyRow
from .validation_rule import ValidationRule, ValueKind

__all__ = [
    # Row / rule models
    "FieldError",
    "PropertyField",
    "PropertyRow",
    "ValidationRule",
    "ValueKind",
    # Result models
    "BatchValidation",
    "ErrorRecord",
    "FileStat",
    "ProcessingResult",
    # Location models
    "CityCheck",
    "CityCorrection",
    "CitySearchHit",
    "CityValidationResult",
    "CityValidationSummary",
    "PostalCodeMatch",
    "SearchSuggestion",
]
