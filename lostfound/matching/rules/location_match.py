"""
Location matching rule (Weight: 10 points).

Locations are free text ("Main Library", "library entrance"), so they are
compared with the same Levenshtein ratio as titles. A missing location on
either side earns nothing rather than counting as a match.

Scoring:
  - Both locations present: ratio x weight
  - Missing location on one or both sides: 0 pts
"""

from lostfound.matching.similarity import levenshtein_ratio


def score(item_a, item_b, weight: float = 10.0) -> dict:
    """
    Score location similarity between two items.

    Returns:
        dict with keys: score (float), max_score (float), details (str)
    """
    location_a = item_a.location
    location_b = item_b.location

    if not location_a or not location_b:
        return {
            "score": 0.0,
            "max_score": weight,
            "details": "Missing location on one or both sides",
        }

    ratio = levenshtein_ratio(location_a, location_b)
    return {
        "score": weight * ratio,
        "max_score": weight,
        "details": f"Location similarity {ratio:.0%}: '{location_a}' ~ '{location_b}'",
    }
