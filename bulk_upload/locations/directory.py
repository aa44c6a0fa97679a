from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ..models.city_validation import PostalCodeMatch

"""Country -> city directory.

A single consolidated table keyed by the country identifiers accepted by the
upload rules. Alternative country names (``United States``, ``Deutschland``)
resolve to the same key. The directory is loaded once and passed explicitly to
the validator and matcher.

Absence of a country means "no data", never "invalid".
"""

__all__ = [
    "DEFAULT_LOCATIONS_PATH",
    "CountryEntry",
    "LocationDataError",
    "LocationDirectory",
    "load_location_directory",
    "normalize_name",
]

logger = logging.getLogger(__name__)

DEFAULT_LOCATIONS_PATH = Path(__file__).with_name("locations.yml")

_RANGE_RE = re.compile(r"^(\d+)\.\.(\d+)$")


class LocationDataError(Exception):
    """Raised when the location data file is missing or malformed."""


def normalize_name(value: str) -> str:
    return value.strip().lower()


def normalize_postal_code(value: str) -> str:
    return re.sub(r"\s+", "", value.strip().upper())


@dataclass(frozen=True)
class CountryEntry:
    key: str
    names: tuple[str, ...]
    locales: tuple[str, ...]
    cities: tuple[str, ...]


@dataclass(frozen=True)
class LocationDirectory:
    """Immutable country/city/postal-code tables."""
    entries: Mapping[str, CountryEntry]
    postal_codes: Mapping[str, PostalCodeMatch] = field(default_factory=dict)
    locale_terms: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    # 検索用インデックス (normalize_name(name) -> key)
    _aliases: Mapping[str, str] = field(default_factory=dict, repr=False, compare=False)
    _city_index: Mapping[str, frozenset[str]] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def build(
        cls,
        entries: Mapping[str, CountryEntry],
        postal_codes: Mapping[str, PostalCodeMatch] | None = None,
        locale_terms: Mapping[str, tuple[str, ...]] | None = None,
    ) -> LocationDirectory:
        aliases: dict[str, str] = {}
        city_index: dict[str, frozenset[str]] = {}
        for key, entry in entries.items():
            for name in (key, *entry.names):
                aliases.setdefault(normalize_name(name), key)
            city_index[key] = frozenset(normalize_name(c) for c in entry.cities)
        return cls(
            entries=dict(entries),
            postal_codes=dict(postal_codes or {}),
            locale_terms=dict(locale_terms or {}),
            _aliases=aliases,
            _city_index=city_index,
        )

    def countries(self) -> list[str]:
        return list(self.entries)

    def resolve_country(self, country: str | None) -> str | None:
        """Return the canonical key for a country key or alternative name."""
        if not isinstance(country, str):
            return None
        return self._aliases.get(normalize_name(country))

    def cities_for_country(self, country: str | None) -> tuple[str, ...]:
        """Known cities for ``country``; empty for an unknown country."""
        key = self.resolve_country(country)
        if key is None:
            return ()
        return self.entries[key].cities

    def contains_city(self, country: str | None, city: str) -> bool:
        key = self.resolve_country(country)
        if key is None:
            return False
        return normalize_name(city) in self._city_index[key]

    def iter_cities(self) -> Iterator[tuple[str, str]]:
        """Yield (country, city) pairs in table order."""
        for key, entry in self.entries.items():
            for city in entry.cities:
                yield key, city

    def city_for_postal_code(self, postal_code: str | None) -> PostalCodeMatch | None:
        """Look up city and country for a postal code.

        UK postcodes fall back to the outward code (``SW1A 1AA`` -> ``SW1A``),
        ZIP+4 falls back to the 5-digit ZIP.
        """
        if not postal_code or not isinstance(postal_code, str):
            return None
        normalized = normalize_postal_code(postal_code)
        match = self.postal_codes.get(normalized)
        if match is not None:
            return match

        original = postal_code.strip().upper()
        if _UK_POSTCODE_RE.match(original):
            outward = original.split()[0] if " " in original else normalized[:-3]
            match = self.postal_codes.get(outward)
            if match is not None:
                return match
            # outward code が取れない形式は先頭4文字でも引く
            match = self.postal_codes.get(normalized[:4])
            if match is not None:
                return match

        if _ZIP_PLUS4_RE.match(original):
            return self.postal_codes.get(original.split("-")[0])

        return None


_UK_POSTCODE_RE = re.compile(r"^[A-Z]{1,2}\d[A-Z\d]?\s?\d[A-Z]{2}$", re.IGNORECASE)
_ZIP_PLUS4_RE = re.compile(r"^\d{5}-\d{4}$")


def _expand_codes(raw: list[Any], where: str) -> list[str]:
    codes: list[str] = []
    for item in raw:
        text = str(item).strip()
        m = _RANGE_RE.match(text)
        if not m:
            codes.append(normalize_postal_code(text))
            continue
        start, end = m.group(1), m.group(2)
        if len(start) != len(end) or int(start) > int(end):
            raise LocationDataError(f"{where}: invalid postal code range {text!r}")
        width = len(start)
        codes.extend(str(n).zfill(width) for n in range(int(start), int(end) + 1))
    return codes


def _str_list(value: Any, where: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise LocationDataError(f"{where}: expected a list of strings")
    return value


def _parse_directory(data: Any) -> LocationDirectory:
    if not isinstance(data, dict) or not isinstance(data.get("countries"), dict):
        raise LocationDataError("location data must contain a 'countries' mapping")

    entries: dict[str, CountryEntry] = {}
    postal: dict[str, PostalCodeMatch] = {}
    for key, raw in data["countries"].items():
        key = str(key)
        if not isinstance(raw, dict):
            raise LocationDataError(f"country '{key}': expected a mapping")
        cities: list[str] = []
        seen: set[str] = set()
        for city in _str_list(raw.get("cities"), f"country '{key}' cities"):
            norm = normalize_name(city)
            if norm in seen:
                logger.debug("duplicate city dropped country=%s city=%s", key, city)
                continue
            seen.add(norm)
            cities.append(city)
        entries[key] = CountryEntry(
            key=key,
            names=tuple(_str_list(raw.get("names"), f"country '{key}' names")),
            locales=tuple(_str_list(raw.get("locales"), f"country '{key}' locales")),
            cities=tuple(cities),
        )
        postal_raw = raw.get("postal_codes") or {}
        if not isinstance(postal_raw, dict):
            raise LocationDataError(f"country '{key}' postal_codes: expected a mapping")
        for city, codes in postal_raw.items():
            if not isinstance(codes, list):
                raise LocationDataError(f"country '{key}' postal_codes.{city}: expected a list")
            for code in _expand_codes(codes, f"country '{key}' postal_codes.{city}"):
                # 先勝ち (同一コードが複数国に現れた場合)
                postal.setdefault(code, PostalCodeMatch(city=str(city), country=key))

    terms_raw = data.get("locale_terms") or {}
    if not isinstance(terms_raw, dict):
        raise LocationDataError("locale_terms: expected a mapping")
    locale_terms = {
        str(tag): tuple(_str_list(terms, f"locale_terms.{tag}")) for tag, terms in terms_raw.items()
    }
    return LocationDirectory.build(entries, postal, locale_terms)


def load_location_directory(path: Path | None = None) -> LocationDirectory:
    """Load the location directory from YAML (default: packaged data file)."""
    path = path or DEFAULT_LOCATIONS_PATH
    if not path.exists():
        raise LocationDataError(f"location data not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise LocationDataError(f"invalid yaml: {e}") from e
    directory = _parse_directory(data)
    logger.debug(
        "location directory loaded path=%s countries=%d postal_codes=%d",
        path,
        len(directory.entries),
        len(directory.postal_codes),
    )
    return directory
