from __future__ import annotations

from dataclasses import dataclass, field

"""Result models for the location matcher.

All of these are ephemeral: computed on demand for a single call and never stored.
"""

__all__ = [
    "CityValidationResult",
    "CityCheck",
    "CityCorrection",
    "CityValidationSummary",
    "CitySearchHit",
    "PostalCodeMatch",
    "SearchSuggestion",
]


@dataclass(frozen=True)
class CityValidationResult:
    """Outcome of checking one (city, country) pair."""
    is_valid: bool
    suggested_cities: list[str]  # best-first
    message: str


@dataclass(frozen=True)
class CityCheck:
    """A CityValidationResult tied back to the row it was computed for."""
    row_id: str
    city: str
    country: str
    validation: CityValidationResult


@dataclass(frozen=True)
class CityCorrection:
    """Auto-correction outcome for one row.

    ``city`` is the (possibly corrected) value; ``original_city`` always keeps
    the value read from the sheet.
    """
    row_id: str
    city: str
    country: str
    was_auto_corrected: bool
    original_city: str


@dataclass(frozen=True)
class CityValidationSummary:
    total: int
    valid: int
    invalid: int
    valid_percentage: float  # 0.0 for an empty batch
    invalid_by_country: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class CitySearchHit:
    city: str
    country: str


@dataclass(frozen=True)
class PostalCodeMatch:
    city: str
    country: str


@dataclass(frozen=True)
class SearchSuggestion:
    """'Did you mean' suggestion for a free-text location query."""
    term: str
    source: str  # "postal_code" | "fuzzy"
    score: float
