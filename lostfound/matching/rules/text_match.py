"""
Title and description matching rules (Weights: 30 and 20 points).

Both compare free text written by two different people describing the same
object, so they are scored proportionally by normalized Levenshtein ratio
rather than with a cut-off.

Scoring:
  - ratio x weight, where ratio is 1.0 for identical (or both empty) text
    and 0.0 for text with nothing in common
"""

from lostfound.matching.similarity import levenshtein_ratio


def _score_field(item_a, item_b, field_name: str, weight: float) -> dict:
    text_a = getattr(item_a, field_name) or ""
    text_b = getattr(item_b, field_name) or ""

    ratio = levenshtein_ratio(text_a, text_b)
    return {
        "score": weight * ratio,
        "max_score": weight,
        "details": f"{field_name.capitalize()} similarity {ratio:.0%}",
    }


def score_title(item_a, item_b, weight: float = 30.0) -> dict:
    """Score title similarity between two items."""
    return _score_field(item_a, item_b, "title", weight)


def score_description(item_a, item_b, weight: float = 20.0) -> dict:
    """Score description similarity between two items."""
    return _score_field(item_a, item_b, "description", weight)
