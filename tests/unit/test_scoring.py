"""Unit tests for the attribute rules, fallback scorer and confidence tiers."""

import pytest

from lostfound.models import ConfidenceTier, Item, ItemType
from lostfound.matching.rules import category_match, location_match, text_match
from lostfound.matching.scoring import FallbackScorer, confidence_tier, score_pair


def _item(**fields) -> Item:
    defaults = {
        "title": "Blue Nike Backpack",
        "description": "Lost near library, has a dent on front pocket",
        "category": "Bags",
        "location": "Main Library",
        "type": ItemType.LOST,
    }
    defaults.update(fields)
    return Item(**defaults)


class TestConfidenceTier:

    def test_thresholds(self):
        assert confidence_tier(85) == ConfidenceTier.HIGH
        assert confidence_tier(84) == ConfidenceTier.MEDIUM
        assert confidence_tier(70) == ConfidenceTier.MEDIUM
        assert confidence_tier(69) == ConfidenceTier.LOW

    def test_extremes(self):
        assert confidence_tier(100) == ConfidenceTier.HIGH
        assert confidence_tier(0) == ConfidenceTier.LOW

    def test_custom_thresholds(self):
        assert confidence_tier(75, high_threshold=75, medium_threshold=50) == ConfidenceTier.HIGH
        assert confidence_tier(50, high_threshold=75, medium_threshold=50) == ConfidenceTier.MEDIUM


class TestRules:

    def test_category_case_insensitive(self):
        result = category_match.score(_item(category="bags"), _item(category="BAGS"))
        assert result["score"] == 40.0
        assert result["max_score"] == 40.0

    def test_category_compared_as_stored(self):
        result = category_match.score(_item(category=" Bags"), _item(category="Bags"))
        assert result["score"] == 0.0

    def test_category_mismatch(self):
        result = category_match.score(_item(category="Bags"), _item(category="Electronics"))
        assert result["score"] == 0.0
        assert "mismatch" in result["details"]

    def test_title_weighted_by_ratio(self):
        result = text_match.score_title(_item(title="Black Wallet"), _item(title="Brown Wallet"))
        assert result["score"] == pytest.approx(30 * 8 / 12)

    def test_description_both_empty_is_full_score(self):
        result = text_match.score_description(_item(description=None), _item(description=""))
        assert result["score"] == 20.0

    def test_location_requires_both_sides(self):
        result = location_match.score(_item(location="Main Library"), _item(location=None))
        assert result["score"] == 0.0
        assert "Missing location" in result["details"]

        result = location_match.score(_item(location=""), _item(location=""))
        assert result["score"] == 0.0

    def test_location_weighted_by_ratio(self):
        result = location_match.score(_item(location="Library"), _item(location="Main Library"))
        assert result["score"] == pytest.approx(10 * 7 / 12)


class TestFallbackScorer:

    def test_identical_items_score_100(self):
        result = score_pair(_item(), _item(type=ItemType.FOUND))
        assert result.total_score == 100
        assert result.max_possible == 100.0

    def test_nothing_in_common_scores_0(self):
        a = _item(category="Electronics", title="iPhone", description="Cracked screen", location="Gym")
        b = _item(category="Clothing", title="Scarf", description="Wool", location="Lab")
        result = score_pair(a, b)
        assert result.total_score == 0
        assert confidence_tier(result.total_score) == ConfidenceTier.LOW

    def test_backpack_example(self):
        lost = _item()
        found = _item(
            title="Blue Nike Bag",
            description="Found near library entrance, front pocket scuffed",
            type=ItemType.FOUND,
        )
        result = score_pair(lost, found)

        assert result.rule_scores["category"]["score"] == 40.0
        assert result.rule_scores["title"]["score"] == pytest.approx(20.0)
        assert result.rule_scores["description"]["score"] == pytest.approx(10.2, abs=0.01)
        assert result.rule_scores["location"]["score"] == 10.0
        # 40 + 20 + 10.2 + 10 = 80.2
        assert result.total_score == 80
        assert confidence_tier(result.total_score) == ConfidenceTier.MEDIUM

    def test_score_is_integer_in_range(self):
        result = score_pair(_item(title="Black Wallet"), _item(title="Brown Wallet"))
        assert isinstance(result.total_score, int)
        assert 0 <= result.total_score <= 100

    def test_rule_breakdown_present(self):
        result = score_pair(_item(), _item())
        assert set(result.rule_scores) == {"category", "title", "description", "location"}
        for rule in result.rule_scores.values():
            assert set(rule) == {"score", "max_score", "details"}

    @pytest.mark.parametrize(
        "field,values",
        [
            ("title", ["Red Umbrella", "Blue Umbrella", "Blue Nike Bag", "Blue Nike Backpack"]),
            ("description", ["Wool", "Found near library", "Lost near library, has a dent", "Lost near library, has a dent on front pocket"]),
            ("location", ["Gym", "Library", "Main Library"]),
        ],
    )
    def test_monotonic_in_each_component(self, field, values):
        reference = _item()
        scores = []
        ratios = []
        for value in values:
            other = _item(**{field: value}, type=ItemType.FOUND)
            scores.append(score_pair(reference, other).total_score)
            ratios.append(score_pair(reference, other).rule_scores[field]["score"])

        # Sort by component contribution; total must never go down as it grows
        ordered = [s for _, s in sorted(zip(ratios, scores))]
        assert ordered == sorted(ordered)

    def test_category_only_raises_score(self):
        a = _item(category="Bags")
        same = score_pair(a, _item(category="Bags", type=ItemType.FOUND)).total_score
        different = score_pair(a, _item(category="Keys", type=ItemType.FOUND)).total_score
        assert same - different == 40

    def test_custom_weights(self):
        scorer = FallbackScorer(weights={"category": 10.0})
        result = scorer.score(_item(), _item())
        assert result.total_score == 70
        assert result.rule_scores["category"]["max_score"] == 10.0
