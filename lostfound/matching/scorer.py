"""
Similarity scorer — primary LLM judgment with a deterministic fallback.

    score(item_a, item_b) -> SimilarityResult(similarity, confidence, ...)

The LLM scorer is tried first when one is configured. If it raises
SimilarityServiceError the pair is rescored with the attribute rules, so
callers always get a usable score and never see service failures. The
confidence tier uses the same thresholds whichever path produced the score.
"""

import logging
from dataclasses import dataclass, field

from lostfound.models.match import ConfidenceTier
from lostfound.matching.llm import LLMScorer, ScorerConfig, SimilarityServiceError
from lostfound.matching.scoring import (
    FallbackScorer,
    confidence_tier,
    HIGH_CONFIDENCE_THRESHOLD,
    MEDIUM_CONFIDENCE_THRESHOLD,
)

logger = logging.getLogger(__name__)

METHOD_LLM = "llm"
METHOD_FALLBACK = "fallback"


@dataclass
class SimilarityResult:
    """Score for one item pair."""

    similarity: float
    confidence: ConfidenceTier
    method: str
    rule_scores: dict = field(default_factory=dict)

    def to_details(self) -> dict:
        """JSON-friendly breakdown stored on persisted matches."""
        return {
            "method": self.method,
            "similarity": self.similarity,
            "rules": self.rule_scores,
        }


class SimilarityScorer:
    """Two-strategy scorer: optional primary, mandatory fallback."""

    def __init__(
        self,
        primary: LLMScorer | None = None,
        fallback: FallbackScorer | None = None,
        high_threshold: float = HIGH_CONFIDENCE_THRESHOLD,
        medium_threshold: float = MEDIUM_CONFIDENCE_THRESHOLD,
    ):
        self.primary = primary
        self.fallback = fallback or FallbackScorer()
        self.high_threshold = high_threshold
        self.medium_threshold = medium_threshold

    @classmethod
    def from_config(
        cls,
        config: ScorerConfig,
        weights: dict | None = None,
        high_threshold: float = HIGH_CONFIDENCE_THRESHOLD,
        medium_threshold: float = MEDIUM_CONFIDENCE_THRESHOLD,
    ) -> "SimilarityScorer":
        """Build a scorer; the LLM path is only wired in when configured."""
        primary = LLMScorer(config) if config.is_configured else None
        return cls(
            primary=primary,
            fallback=FallbackScorer(weights),
            high_threshold=high_threshold,
            medium_threshold=medium_threshold,
        )

    @property
    def uses_llm(self) -> bool:
        return self.primary is not None

    def score(self, item_a, item_b) -> SimilarityResult:
        if self.primary is not None:
            try:
                similarity = float(self.primary.score(item_a, item_b))
                return SimilarityResult(
                    similarity=similarity,
                    confidence=self._tier(similarity),
                    method=METHOD_LLM,
                )
            except SimilarityServiceError as e:
                logger.warning(
                    "LLM scoring failed for %s / %s, using fallback: %s",
                    getattr(item_a, "id", None),
                    getattr(item_b, "id", None),
                    str(e),
                )

        result = self.fallback.score(item_a, item_b)
        similarity = float(result.total_score)
        return SimilarityResult(
            similarity=similarity,
            confidence=self._tier(similarity),
            method=METHOD_FALLBACK,
            rule_scores=result.rule_scores,
        )

    def _tier(self, similarity: float) -> ConfidenceTier:
        return confidence_tier(similarity, self.high_threshold, self.medium_threshold)
