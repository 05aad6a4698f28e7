"""
Fallback scorer — runs the attribute rules and produces a total score.

Takes two item records, executes the category, title, description and
location rules with their weights, and returns a combined integer score
(0-100) with a per-rule breakdown for auditability. Used whenever the
text-generation service is not configured or fails.
"""

import math
from dataclasses import dataclass, field

from lostfound.models.match import ConfidenceTier
from lostfound.matching.rules import category_match, text_match, location_match

DEFAULT_WEIGHTS = {
    "category": 40.0,
    "title": 30.0,
    "description": 20.0,
    "location": 10.0,
}

HIGH_CONFIDENCE_THRESHOLD = 85.0
MEDIUM_CONFIDENCE_THRESHOLD = 70.0


@dataclass
class ScoreResult:
    """Result of scoring an item pair with the attribute rules."""

    total_score: int
    max_possible: float
    rule_scores: dict = field(default_factory=dict)


def confidence_tier(
    similarity: float,
    high_threshold: float = HIGH_CONFIDENCE_THRESHOLD,
    medium_threshold: float = MEDIUM_CONFIDENCE_THRESHOLD,
) -> ConfidenceTier:
    """Bucket a 0-100 similarity score into a confidence tier."""
    if similarity >= high_threshold:
        return ConfidenceTier.HIGH
    if similarity >= medium_threshold:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW


def score_pair(item_a, item_b, weights: dict | None = None) -> ScoreResult:
    """
    Score an item pair using all attribute rules.

    Args:
        item_a: First item (any object with title, description, category, location)
        item_b: Second item
        weights: Rule weights keyed by rule name; DEFAULT_WEIGHTS when omitted

    Returns:
        ScoreResult with rounded total, max possible, and per-rule breakdown.
    """
    weights = {**DEFAULT_WEIGHTS, **(weights or {})}

    rules = [
        ("category", category_match.score, weights["category"]),
        ("title", text_match.score_title, weights["title"]),
        ("description", text_match.score_description, weights["description"]),
        ("location", location_match.score, weights["location"]),
    ]

    rule_scores = {}
    total_score = 0.0
    max_possible = 0.0

    for rule_name, rule_fn, weight in rules:
        result = rule_fn(item_a, item_b, weight=weight)
        total_score += result["score"]
        max_possible += result["max_score"]
        rule_scores[rule_name] = {**result, "score": round(result["score"], 2)}

    # Round half up, then bound to the 0-100 scale
    rounded = int(math.floor(total_score + 0.5))
    return ScoreResult(
        total_score=min(100, max(0, rounded)),
        max_possible=round(max_possible, 2),
        rule_scores=rule_scores,
    )


class FallbackScorer:
    """Deterministic lexical/attribute scorer."""

    def __init__(self, weights: dict | None = None):
        self.weights = {**DEFAULT_WEIGHTS, **(weights or {})}

    def score(self, item_a, item_b) -> ScoreResult:
        return score_pair(item_a, item_b, weights=self.weights)
