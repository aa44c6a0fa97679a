from __future__ import annotations

"""Edit-distance similarity used for city suggestions and auto-correction."""

__all__ = [
    "levenshtein_distance",
    "similarity",
]


def levenshtein_distance(s1: str, s2: str) -> int:
    """Classic Levenshtein edit distance (insert / delete / substitute, cost 1)."""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def similarity(a: str, b: str) -> float:
    """Normalized similarity ``1 - distance / max(len)`` over lower-cased input.

    Both empty -> 1.0, exactly one empty -> 0.0. Symmetric and deterministic.
    """
    a = a.lower()
    b = b.lower()
    if not a:
        return 1.0 if not b else 0.0
    if not b:
        return 0.0
    return 1 - levenshtein_distance(a, b) / max(len(a), len(b))
