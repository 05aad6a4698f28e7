from lostfound.matching.engine import find_matches, create_auto_matches, MatchSuggestion, AutoMatchResult
from lostfound.matching.scorer import SimilarityScorer, SimilarityResult

__all__ = [
    "find_matches",
    "create_auto_matches",
    "MatchSuggestion",
    "AutoMatchResult",
    "SimilarityScorer",
    "SimilarityResult",
]
