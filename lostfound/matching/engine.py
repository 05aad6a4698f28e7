"""
Match finder and auto-matcher.

Given one reported item, loads every active item of the opposite type,
scores each pair with the similarity scorer, keeps pairs at or above a
threshold and ranks them. The auto-match variant then persists the best
few as pending Match records.

Flow:
  1. Load the query item (missing item -> no suggestions)
  2. Load active candidates of the opposite type, excluding the item itself
  3. Score every (item, candidate) pair
  4. Filter by threshold, stable sort by similarity descending
  5. (auto-match) Persist the top N pairs not already recorded
"""

import uuid
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import lru_cache

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from lostfound.config import get_settings
from lostfound.models.item import Item, ItemStatus, ItemType
from lostfound.models.match import ConfidenceTier, Match, MatchStatus, MatchType
from lostfound.matching.scorer import SimilarityScorer, SimilarityResult

logger = logging.getLogger(__name__)


class MatchingStorageError(Exception):
    """Items could not be read from storage; the matching run cannot proceed."""


@dataclass
class MatchSuggestion:
    """A candidate item with its similarity to the query item."""

    item: Item
    result: SimilarityResult

    @property
    def similarity(self) -> float:
        return self.result.similarity

    @property
    def confidence(self) -> ConfidenceTier:
        return self.result.confidence


@dataclass
class AutoMatchResult:
    """Summary of an auto-match run for one item."""

    item_id: str
    suggestions: list = field(default_factory=list)
    matches_created: list = field(default_factory=list)
    skipped_existing: int = 0
    errors: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "suggestions": len(self.suggestions),
            "matches_created": len(self.matches_created),
            "skipped_existing": self.skipped_existing,
            "errors": self.errors,
        }


@lru_cache
def get_default_scorer() -> SimilarityScorer:
    """Scorer built once from application settings."""
    settings = get_settings()
    return SimilarityScorer.from_config(
        settings.scorer_config(),
        weights=settings.weights,
        high_threshold=settings.high_confidence_threshold,
        medium_threshold=settings.medium_confidence_threshold,
    )


def find_matches(
    db: Session,
    item_id,
    threshold: float | None = None,
    scorer: SimilarityScorer | None = None,
) -> list[MatchSuggestion]:
    """
    Find ranked match suggestions for an item.

    Args:
        db: SQLAlchemy session
        item_id: Id of the query item (UUID or string)
        threshold: Minimum similarity to keep (defaults to suggestion_threshold)
        scorer: Similarity scorer (defaults to the settings-built scorer)

    Returns:
        Suggestions sorted by similarity descending; empty if the item does
        not exist.

    Raises:
        MatchingStorageError: If the item or its candidates cannot be read.
    """
    settings = get_settings()
    if threshold is None:
        threshold = settings.suggestion_threshold
    scorer = scorer or get_default_scorer()

    try:
        item = _load_item(db, item_id)
        if item is None:
            logger.info("Item %s not found, no match suggestions", item_id)
            return []
        candidates = _load_candidates(db, item)
    except SQLAlchemyError as e:
        raise MatchingStorageError(f"Failed to load items for matching {item_id}: {str(e)}") from e

    logger.info(
        "Scoring %s item %s against %d %s candidates",
        item.type.value,
        item.id,
        len(candidates),
        item.type.opposite.value,
    )

    scored = _score_candidates(scorer, item, candidates, settings.scoring_workers)

    suggestions = [s for s in scored if s.similarity >= threshold]
    # list.sort is stable: equal scores keep candidate order
    suggestions.sort(key=lambda s: s.similarity, reverse=True)

    return suggestions


def create_auto_matches(
    db: Session,
    item_id,
    scorer: SimilarityScorer | None = None,
) -> AutoMatchResult:
    """
    Score an item and persist its best suggestions as pending matches.

    Persistence failures are logged and recorded in the result, never
    raised: the scored suggestions are returned either way.

    Raises:
        MatchingStorageError: If the item or its candidates cannot be read.
    """
    settings = get_settings()
    suggestions = find_matches(
        db,
        item_id,
        threshold=settings.auto_match_threshold,
        scorer=scorer,
    )

    result = AutoMatchResult(item_id=str(item_id), suggestions=suggestions)
    retained = suggestions[: settings.auto_match_limit]

    if not retained:
        logger.info("Auto-match for %s: no candidates at or above %.0f", item_id, settings.auto_match_threshold)
        return result

    query_id = _coerce_id(item_id)

    try:
        for suggestion in retained:
            lost_id, found_id = _pair_ids(query_id, suggestion.item)

            if _match_exists(db, lost_id, found_id):
                result.skipped_existing += 1
                continue

            try:
                match = _persist_match(db, lost_id, found_id, suggestion)
            except IntegrityError as e:
                db.rollback()
                existing_id = _existing_match_id(db, lost_id, found_id)
                if existing_id is not None:
                    # Another run recorded the same pair first
                    logger.info("Pair %s / %s already recorded as match %s", lost_id, found_id, existing_id)
                    result.skipped_existing += 1
                else:
                    logger.error("Failed to record match %s / %s: %s", lost_id, found_id, str(e))
                    result.errors.append(f"Integrity error for pair {lost_id} / {found_id}: {str(e)}")
                continue

            result.matches_created.append(str(match.id))
            logger.info(
                "Auto-matched: lost %s ↔ found %s (similarity: %.0f, confidence: %s)",
                lost_id,
                found_id,
                suggestion.similarity,
                suggestion.confidence.value,
            )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to persist auto-matches for item %s: %s", item_id, str(e))
        result.errors.append(f"Persistence error for item {item_id}: {str(e)}")

    logger.info(
        "Auto-match complete for %s: %d suggestions, %d created, %d already recorded",
        item_id,
        len(suggestions),
        len(result.matches_created),
        result.skipped_existing,
    )

    return result


def _coerce_id(item_id) -> uuid.UUID | None:
    if isinstance(item_id, uuid.UUID):
        return item_id
    try:
        return uuid.UUID(str(item_id))
    except ValueError:
        return None


def _load_item(db: Session, item_id) -> Item | None:
    key = _coerce_id(item_id)
    if key is None:
        return None
    return db.get(Item, key)


def _load_candidates(db: Session, item: Item) -> list[Item]:
    """Active items of the opposite type, oldest first."""
    return (
        db.query(Item)
        .filter(
            Item.type == item.type.opposite,
            Item.id != item.id,
            Item.status == ItemStatus.ACTIVE,
        )
        .order_by(Item.created_at.asc(), Item.id.asc())
        .all()
    )


def _score_candidates(
    scorer: SimilarityScorer,
    item: Item,
    candidates: list[Item],
    workers: int = 1,
) -> list[MatchSuggestion]:
    """Score every candidate; a pair that fails is skipped, not fatal."""

    def score_one(candidate: Item) -> MatchSuggestion | None:
        try:
            return MatchSuggestion(item=candidate, result=scorer.score(item, candidate))
        except Exception as e:
            logger.error(
                "Error scoring pair %s / %s: %s",
                item.id,
                candidate.id,
                str(e),
            )
            return None

    if workers > 1 and len(candidates) > 1:
        # map() yields in submission order, so ranking ties stay deterministic
        with ThreadPoolExecutor(max_workers=workers) as pool:
            scored = list(pool.map(score_one, candidates))
    else:
        scored = [score_one(candidate) for candidate in candidates]

    return [s for s in scored if s is not None]


def _pair_ids(query_id: uuid.UUID, candidate: Item) -> tuple[uuid.UUID, uuid.UUID]:
    """Return (lost_item_id, found_item_id) for a query item and its candidate."""
    if candidate.type == ItemType.LOST:
        return candidate.id, query_id
    return query_id, candidate.id


def _existing_match_id(db: Session, lost_id: uuid.UUID, found_id: uuid.UUID) -> uuid.UUID | None:
    row = (
        db.query(Match.id)
        .filter(Match.lost_item_id == lost_id, Match.found_item_id == found_id)
        .first()
    )
    return row[0] if row is not None else None


def _match_exists(db: Session, lost_id: uuid.UUID, found_id: uuid.UUID) -> bool:
    return _existing_match_id(db, lost_id, found_id) is not None


def _persist_match(
    db: Session,
    lost_id: uuid.UUID,
    found_id: uuid.UUID,
    suggestion: MatchSuggestion,
) -> Match:
    """Create and commit a pending AI-generated Match record."""
    match = Match(
        lost_item_id=lost_id,
        found_item_id=found_id,
        similarity=suggestion.similarity,
        confidence=suggestion.confidence,
        status=MatchStatus.PENDING,
        match_type=MatchType.AI_GENERATED,
        match_details=suggestion.result.to_details(),
    )
    db.add(match)
    db.commit()
    return match
