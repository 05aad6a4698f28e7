"""
Normalized edit-distance similarity used by the text matching rules.

ratio = (longest - levenshtein(a, b)) / longest, computed on lowercased
strings with unit-cost insertions, deletions and substitutions. Two empty
strings are identical (ratio 1.0).
"""

from rapidfuzz.distance import Levenshtein


def levenshtein_ratio(a: str | None, b: str | None) -> float:
    """Return the normalized Levenshtein similarity of two strings in [0, 1]."""
    a = (a or "").lower()
    b = (b or "").lower()

    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0

    distance = Levenshtein.distance(a, b)
    return (longest - distance) / longest
