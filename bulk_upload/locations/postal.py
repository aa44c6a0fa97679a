from __future__ import annotations

import re

"""Postal code shape detection.

Used by search suggestions to decide whether a free-text query should be
resolved through the postal code table before fuzzy matching.
"""

__all__ = [
    "is_postal_code",
]

_POSTAL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\d{5}(-\d{4})?$"),  # US ZIP / ZIP+4, also DE/ES/FR/MX/IT 5 digits
    re.compile(r"^[A-Z]{1,2}\d[A-Z\d]?\s?\d[A-Z]{2}$", re.IGNORECASE),  # UK
    re.compile(r"^\d{4}$"),  # AT / CH
    re.compile(r"^[A-Z]\d[A-Z]\s?\d[A-Z]\d$", re.IGNORECASE),  # CA
    re.compile(r"^\d{4}-\d{3}$"),  # PT
    re.compile(r"^\d{4}\s?[A-Z]{2}$", re.IGNORECASE),  # NL
)


def is_postal_code(text: str | None) -> bool:
    """Return True when ``text`` has the shape of a known postal code format."""
    if not text:
        return False
    trimmed = text.strip()
    return any(p.match(trimmed) for p in _POSTAL_PATTERNS)
