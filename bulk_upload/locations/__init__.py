"""Location directory, similarity scoring and city matching."""

from .directory import LocationDataError, LocationDirectory, load_location_directory
from .locale import cities_for_locale, locations_for_locale, suggest_search_term
from .matcher import LocationMatcher, apply_city_corrections, summarize_city_checks
from .postal import is_postal_code
from .similarity import levenshtein_distance, similarity

__all__ = [
    "LocationDataError",
    "LocationDirectory",
    "LocationMatcher",
    "apply_city_corrections",
    "cities_for_locale",
    "is_postal_code",
    "levenshtein_distance",
    "load_location_directory",
    "locations_for_locale",
    "similarity",
    "suggest_search_term",
    "summarize_city_checks",
]
