from __future__ import annotations

from ..models.city_validation import SearchSuggestion
from .directory import CountryEntry, LocationDirectory, normalize_name
from .postal import is_postal_code
from .similarity import similarity

"""Locale-aware location lookup and 'did you mean' search suggestions.

Locale resolution: exact tag first (``en-GB``), then language only (``en`` ->
every ``en-*`` country). Without any match the whole directory is used.
"""

__all__ = [
    "MIN_QUERY_LENGTH",
    "SUGGESTION_THRESHOLD",
    "cities_for_locale",
    "locations_for_locale",
    "suggest_search_term",
]

MIN_QUERY_LENGTH = 3
SUGGESTION_THRESHOLD = 0.5


def _normalize_tag(locale: str) -> str:
    return locale.strip().replace("_", "-").lower()


def _language(tag: str) -> str:
    return tag.split("-", 1)[0]


def _countries_for_locale(directory: LocationDirectory, tag: str) -> tuple[list[CountryEntry], bool]:
    """Return (matched countries, exact) for a normalized locale tag."""
    exact = [e for e in directory.entries.values() if tag in {_normalize_tag(x) for x in e.locales}]
    if exact:
        return exact, True
    lang = _language(tag)
    by_language = [
        e for e in directory.entries.values()
        if any(_language(_normalize_tag(x)) == lang for x in e.locales)
    ]
    return by_language, False


def _terms_for_locale(directory: LocationDirectory, tag: str, exact: bool) -> list[str]:
    terms: list[str] = []
    for raw_tag, values in directory.locale_terms.items():
        other = _normalize_tag(raw_tag)
        if other == tag or (not exact and _language(other) == _language(tag)):
            terms.extend(values)
    return terms


def cities_for_locale(directory: LocationDirectory, locale: str | None) -> list[str]:
    if not locale:
        return [city for _, city in directory.iter_cities()]
    countries, _ = _countries_for_locale(directory, _normalize_tag(locale))
    if not countries:
        return [city for _, city in directory.iter_cities()]
    return [city for entry in countries for city in entry.cities]


def locations_for_locale(directory: LocationDirectory, locale: str | None) -> list[str]:
    """Country names, locale terms and cities relevant to ``locale``."""
    all_names = [name for e in directory.entries.values() for name in (e.key, *e.names)]
    if not locale:
        return all_names + cities_for_locale(directory, None)
    tag = _normalize_tag(locale)
    countries, exact = _countries_for_locale(directory, tag)
    terms = _terms_for_locale(directory, tag, exact)
    if not countries and not terms:
        return all_names + cities_for_locale(directory, None)
    names = [name for e in countries for name in (e.key, *e.names)]
    return names + terms + cities_for_locale(directory, locale)


def suggest_search_term(
    query: str | None, locale: str | None, directory: LocationDirectory
) -> SearchSuggestion | None:
    """Suggest a corrected location for a free-text search query.

    A query shaped like a postal code is resolved through the postal table
    first (``"<city>, <country>"``). Otherwise the closest known location
    above SUGGESTION_THRESHOLD wins; exact matches are never suggested.
    """
    if not query or len(query.strip()) < MIN_QUERY_LENGTH:
        return None

    if is_postal_code(query):
        match = directory.city_for_postal_code(query)
        if match is not None:
            return SearchSuggestion(term=f"{match.city}, {match.country}", source="postal_code", score=1.0)

    needle = normalize_name(query)
    best: SearchSuggestion | None = None
    for location in locations_for_locale(directory, locale):
        if location.lower() == needle:
            continue
        score = similarity(needle, location)
        if score > SUGGESTION_THRESHOLD and (best is None or score > best.score):
            best = SearchSuggestion(term=location, source="fuzzy", score=score)
    return best
