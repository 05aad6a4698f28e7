"""
Category matching rule (Weight: 40 points).

Categories come from a fixed list chosen by the reporter, so a category
mismatch is a strong signal the items are different objects.

Scoring:
  - Same category (case-insensitive): full weight (40 pts)
  - Different category: 0 pts
"""


def _normalize(value: str | None) -> str:
    if not value:
        return ""
    return value.lower()


def score(item_a, item_b, weight: float = 40.0) -> dict:
    """
    Score category match between two items.

    Returns:
        dict with keys: score (float), max_score (float), details (str)
    """
    category_a = _normalize(item_a.category)
    category_b = _normalize(item_b.category)

    if category_a == category_b:
        return {
            "score": weight,
            "max_score": weight,
            "details": f"Same category: '{item_a.category}'",
        }

    return {
        "score": 0.0,
        "max_score": weight,
        "details": f"Category mismatch: '{item_a.category}' != '{item_b.category}'",
    }
