from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace

from ..models.city_validation import (
    CityCheck,
    CityCorrection,
    CitySearchHit,
    CityValidationResult,
    CityValidationSummary,
)
from ..models.property_row import PropertyRow
from .directory import LocationDirectory, normalize_name
from .similarity import similarity

"""Location matcher: city/country cross-check, ranked suggestions and auto-correction."""

__all__ = [
    "DEFAULT_AUTO_CORRECT_THRESHOLD",
    "DEFAULT_MAX_SUGGESTIONS",
    "DEFAULT_SUGGESTION_THRESHOLD",
    "LocationMatcher",
    "apply_city_corrections",
    "summarize_city_checks",
]

DEFAULT_SUGGESTION_THRESHOLD = 0.3
DEFAULT_MAX_SUGGESTIONS = 5
DEFAULT_AUTO_CORRECT_THRESHOLD = 0.8

_MESSAGE_SUGGESTIONS = 3
_PREFIX_SCORE = 1.0
_CONTAINS_SCORE = 0.7


class LocationMatcher:
    """Decide whether a city is known for a country and rank corrections.

    Thresholds are strict: a candidate must score *more than*
    ``suggestion_threshold`` to be suggested, and the top suggestion must score
    more than ``auto_correct_threshold`` to be applied automatically.
    """

    def __init__(
        self,
        directory: LocationDirectory,
        *,
        suggestion_threshold: float = DEFAULT_SUGGESTION_THRESHOLD,
        max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
        auto_correct_threshold: float = DEFAULT_AUTO_CORRECT_THRESHOLD,
    ) -> None:
        self.directory = directory
        self.suggestion_threshold = suggestion_threshold
        self.max_suggestions = max_suggestions
        self.auto_correct_threshold = auto_correct_threshold

    def cities_for_country(self, country: str | None) -> list[str]:
        return list(self.directory.cities_for_country(country))

    def validate_city_for_country(self, city: str, country: str) -> CityValidationResult:
        available = self.directory.cities_for_country(country)
        if not available:
            return CityValidationResult(
                is_valid=True,
                suggested_cities=[],
                message=f"No city validation available for {country}",
            )

        if self.directory.contains_city(country, city):
            return CityValidationResult(
                is_valid=True,
                suggested_cities=[],
                message=f"{city} is valid for {country}",
            )

        suggestions = self._find_similar_cities(city, available)
        if suggestions:
            message = (
                f'"{city}" is not valid for {country}. '
                f"Did you mean: {', '.join(suggestions[:_MESSAGE_SUGGESTIONS])}?"
            )
        else:
            message = f'"{city}" is not a valid city for {country}'
        return CityValidationResult(is_valid=False, suggested_cities=suggestions, message=message)

    def _find_similar_cities(self, city: str, available: Sequence[str]) -> list[str]:
        query = normalize_name(city)
        scored = [(candidate, similarity(query, candidate)) for candidate in available]
        scored = [item for item in scored if item[1] > self.suggestion_threshold]
        # list.sort は安定: 同点はテーブル順のまま
        scored.sort(key=lambda item: item[1], reverse=True)
        return [candidate for candidate, _ in scored[: self.max_suggestions]]

    def batch_validate_cities(self, rows: Iterable[PropertyRow]) -> list[CityCheck]:
        checks: list[CityCheck] = []
        for row in rows:
            city = _text(row.city)
            country = _text(row.country)
            checks.append(
                CityCheck(
                    row_id=row.id,
                    city=city,
                    country=country,
                    validation=self.validate_city_for_country(city, country),
                )
            )
        return checks

    def auto_correct_cities(self, rows: Iterable[PropertyRow]) -> list[CityCorrection]:
        """Propose high-confidence city replacements.

        Only the city field and correction metadata are produced; row errors
        and warnings are not consulted.
        """
        corrections: list[CityCorrection] = []
        for row in rows:
            city = _text(row.city)
            country = _text(row.country)
            validation = self.validate_city_for_country(city, country)
            corrected = city
            if not validation.is_valid and validation.suggested_cities:
                best = validation.suggested_cities[0]
                if similarity(city, best) > self.auto_correct_threshold:
                    corrected = best
            corrections.append(
                CityCorrection(
                    row_id=row.id,
                    city=corrected,
                    country=country,
                    was_auto_corrected=corrected != city,
                    original_city=city,
                )
            )
        return corrections

    def search_cities_globally(self, query: str, limit: int = 10) -> list[CitySearchHit]:
        """Substring search across every country; prefix matches rank first."""
        needle = normalize_name(query)
        scored: list[tuple[CitySearchHit, float]] = []
        for country, city in self.directory.iter_cities():
            candidate = city.lower()
            if needle in candidate:
                score = _PREFIX_SCORE if candidate.startswith(needle) else _CONTAINS_SCORE
                scored.append((CitySearchHit(city=city, country=country), score))
        scored.sort(key=lambda item: item[1], reverse=True)
        return [hit for hit, _ in scored[: max(limit, 0)]]


def summarize_city_checks(checks: Sequence[CityCheck]) -> CityValidationSummary:
    """Tally city checks; invalid rows are grouped by the row's declared country."""
    total = len(checks)
    valid = sum(1 for c in checks if c.validation.is_valid)
    invalid_by_country: dict[str, int] = {}
    for check in checks:
        if not check.validation.is_valid:
            invalid_by_country[check.country] = invalid_by_country.get(check.country, 0) + 1
    return CityValidationSummary(
        total=total,
        valid=valid,
        invalid=total - valid,
        valid_percentage=(valid / total * 100) if total else 0.0,
        invalid_by_country=invalid_by_country,
    )


def apply_city_corrections(
    rows: Sequence[PropertyRow], corrections: Sequence[CityCorrection]
) -> list[PropertyRow]:
    """Return rows with auto-corrected cities substituted (matched by row id)."""
    by_id = {c.row_id: c for c in corrections if c.was_auto_corrected}
    return [replace(row, city=by_id[row.id].city) if row.id in by_id else row for row in rows]


def _text(value: object) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
