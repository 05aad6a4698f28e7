"""
Matching service — fire-and-forget auto-matching for newly reported items.

Scheduled by the items endpoint as a background task once the new item has
been committed. Runs in its own database session so a failure here can
never roll back or delay the item that triggered it: every error is logged
and swallowed.
"""

import logging
from typing import Callable

from sqlalchemy.orm import Session

from lostfound.db.session import SessionLocal
from lostfound.matching.engine import create_auto_matches, AutoMatchResult
from lostfound.matching.scorer import SimilarityScorer

logger = logging.getLogger(__name__)


def run_auto_match(
    item_id: str,
    session_factory: Callable[[], Session] | None = None,
    scorer: SimilarityScorer | None = None,
) -> AutoMatchResult | None:
    """
    Auto-match one item, isolating all failures from the caller.

    Args:
        item_id: Id of the newly created item
        session_factory: Callable returning a new Session (defaults to SessionLocal)
        scorer: Similarity scorer (defaults to the settings-built scorer)

    Returns:
        AutoMatchResult, or None if the run failed.
    """
    factory = session_factory or SessionLocal
    db = factory()
    try:
        result = create_auto_matches(db, item_id, scorer=scorer)
        logger.info(
            "Auto-matching finished for item %s: %d match(es) created",
            item_id,
            len(result.matches_created),
        )
        return result
    except Exception as e:
        logger.error("Auto-matching failed for item %s: %s", item_id, str(e))
        return None
    finally:
        db.close()
