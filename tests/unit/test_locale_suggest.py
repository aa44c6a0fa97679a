from __future__ import annotations

import pytest

from bulk_upload.locations.directory import CountryEntry, LocationDirectory
from bulk_upload.locations.locale import (
    cities_for_locale,
    locations_for_locale,
    suggest_search_term,
)
from bulk_upload.locations.postal import is_postal_code
from bulk_upload.models.city_validation import PostalCodeMatch


@pytest.fixture()
def small_directory() -> LocationDirectory:
    entries = {
        "US": CountryEntry("US", ("United States",), ("en-US",), ("New York", "Boston")),
        "United Kingdom": CountryEntry("United Kingdom", ("UK",), ("en-GB",), ("London", "Leeds")),
        "Spain": CountryEntry("Spain", ("España",), ("es-ES", "ca-ES"), ("Madrid", "Barcelona")),
    }
    postal = {"10001": PostalCodeMatch(city="New York", country="US")}
    terms = {"ca-ES": ("Catalunya",)}
    return LocationDirectory.build(entries, postal, terms)


@pytest.mark.parametrize("text", ["10001", "10001-1234", "SW1A 1AA", "M1 1AE", "1010", "K1A 0B1", "1000-001", "1012 AB"])
def test_is_postal_code_true(text: str):
    assert is_postal_code(text) is True


@pytest.mark.parametrize("text", ["Madrid", "123", "", None, "10001-12"])
def test_is_postal_code_false(text):
    assert is_postal_code(text) is False


def test_cities_for_exact_locale(small_directory):
    assert cities_for_locale(small_directory, "en-GB") == ["London", "Leeds"]
    assert cities_for_locale(small_directory, "en_gb") == ["London", "Leeds"]


def test_cities_for_language_only_locale(small_directory):
    assert cities_for_locale(small_directory, "en") == ["New York", "Boston", "London", "Leeds"]


def test_cities_for_unknown_or_missing_locale(small_directory):
    everything = ["New York", "Boston", "London", "Leeds", "Madrid", "Barcelona"]
    assert cities_for_locale(small_directory, "xx-YY") == everything
    assert cities_for_locale(small_directory, None) == everything


def test_locations_for_locale_includes_terms(small_directory):
    locations = locations_for_locale(small_directory, "ca-ES")
    assert locations[:2] == ["Spain", "España"]
    assert "Catalunya" in locations
    assert "Madrid" in locations
    assert "London" not in locations


def test_suggest_postal_code_first(small_directory):
    s = suggest_search_term("10001", "en-GB", small_directory)
    assert s is not None
    assert s.term == "New York, US"
    assert s.source == "postal_code"
    assert s.score == 1.0


def test_suggest_fuzzy(small_directory):
    s = suggest_search_term("Lodnon", "en-GB", small_directory)
    assert s is not None
    assert s.term == "London"
    assert s.source == "fuzzy"
    assert s.score > 0.5


def test_suggest_uses_locale_terms(small_directory):
    s = suggest_search_term("Catalunia", "ca-ES", small_directory)
    assert s is not None
    assert s.term == "Catalunya"


def test_suggest_exact_match_is_not_suggested(small_directory):
    assert suggest_search_term("London", "en-GB", small_directory) is None


def test_suggest_short_query(small_directory):
    assert suggest_search_term("Lo", "en-GB", small_directory) is None
    assert suggest_search_term("", None, small_directory) is None
    assert suggest_search_term(None, None, small_directory) is None


def test_suggest_unknown_postal_code_falls_back_to_fuzzy(small_directory):
    # 形は郵便番号だが表に無い → 類似語もなし
    assert suggest_search_term("99999", None, small_directory) is None


def test_suggest_with_packaged_directory(directory):
    s = suggest_search_term("SW1A 1AA", None, directory)
    assert s is not None
    assert s.term == "London, United Kingdom"
