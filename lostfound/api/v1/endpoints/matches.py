"""Match endpoints — suggestions, auto-matching, scoring and match review."""

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload

from lostfound.db.session import get_db
from lostfound.models.item import Item, ItemType
from lostfound.models.match import Match, MatchStatus, MatchType
from lostfound.matching.engine import (
    MatchingStorageError,
    MatchSuggestion,
    create_auto_matches,
    find_matches,
    get_default_scorer,
)
from lostfound.api.v1.endpoints.items import get_item_or_404
from lostfound.api.v1.schemas.matches import (
    AutoMatchResponse,
    ManualMatchRequest,
    MatchConfirmRequest,
    MatchItemSummary,
    MatchListResponse,
    MatchRejectRequest,
    MatchResponse,
    SimilarityRequest,
    SimilarityResponse,
    SuggestionListResponse,
    SuggestionResponse,
)

router = APIRouter(prefix="/matches", tags=["Matches"])


def _item_summary(item: Item) -> MatchItemSummary:
    return MatchItemSummary(
        id=str(item.id),
        title=item.title,
        category=item.category,
        location=item.location,
        type=item.type.value,
        status=item.status.value,
    )


def _match_to_response(match: Match) -> MatchResponse:
    """Convert a Match ORM object to a MatchResponse schema."""
    return MatchResponse(
        id=str(match.id),
        similarity=match.similarity,
        confidence=match.confidence.value,
        status=match.status.value,
        match_type=match.match_type.value,
        match_details=match.match_details,
        confirmed_by=match.confirmed_by,
        confirmed_at=match.confirmed_at,
        notes=match.notes,
        created_at=match.created_at,
        lost_item=_item_summary(match.lost_item),
        found_item=_item_summary(match.found_item),
    )


def _suggestion_to_response(suggestion: MatchSuggestion) -> SuggestionResponse:
    return SuggestionResponse(
        item=_item_summary(suggestion.item),
        similarity=suggestion.similarity,
        confidence=suggestion.confidence.value,
        method=suggestion.result.method,
    )


def _load_match(db: Session, match_id: str) -> Match:
    try:
        key = uuid.UUID(match_id)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Match {match_id} not found")

    match = (
        db.query(Match)
        .options(joinedload(Match.lost_item), joinedload(Match.found_item))
        .filter(Match.id == key)
        .first()
    )
    if not match:
        raise HTTPException(status_code=404, detail=f"Match {match_id} not found")
    return match


@router.get("", response_model=MatchListResponse)
def list_matches(
    status: str | None = Query(None, description="Filter by status: pending, confirmed, rejected, expired"),
    match_type: str | None = Query(None, description="Filter by match type: ai_generated, user_suggested, manual"),
    db: Session = Depends(get_db),
):
    """
    List match records with optional filtering.

    Use status=pending to see matches awaiting review.
    """
    query = db.query(Match).options(
        joinedload(Match.lost_item),
        joinedload(Match.found_item),
    )

    if status:
        try:
            query = query.filter(Match.status == MatchStatus(status))
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid status '{status}'. Use: pending, confirmed, rejected, expired",
            )

    if match_type:
        try:
            query = query.filter(Match.match_type == MatchType(match_type))
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid match_type '{match_type}'. Use: ai_generated, user_suggested, manual",
            )

    matches = query.order_by(Match.similarity.desc(), Match.created_at.desc()).all()

    return MatchListResponse(
        total=len(matches),
        matches=[_match_to_response(m) for m in matches],
    )


@router.get("/suggestions/{item_id}", response_model=SuggestionListResponse)
def get_suggestions(
    item_id: str,
    threshold: float = Query(60.0, ge=0, le=100, description="Minimum similarity (0-100)"),
    db: Session = Depends(get_db),
):
    """Ranked items of the opposite type that may be the same object."""
    item = get_item_or_404(db, item_id)

    try:
        suggestions = find_matches(db, item.id, threshold=threshold)
    except MatchingStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return SuggestionListResponse(
        item_id=str(item.id),
        threshold=threshold,
        total=len(suggestions),
        suggestions=[_suggestion_to_response(s) for s in suggestions],
    )


@router.post("/auto-match/{item_id}", response_model=AutoMatchResponse)
def auto_match(
    item_id: str,
    db: Session = Depends(get_db),
):
    """
    Run auto-matching for an item now and report what was recorded.

    New items are auto-matched in the background on creation; this endpoint
    re-runs it on demand. Pairs already recorded are not duplicated.
    """
    item = get_item_or_404(db, item_id)

    try:
        result = create_auto_matches(db, item.id)
    except MatchingStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return AutoMatchResponse(
        message=f"Auto-matching completed: {len(result.matches_created)} match(es) created",
        item_id=str(item.id),
        suggestions=[_suggestion_to_response(s) for s in result.suggestions],
        matches_created=result.matches_created,
        skipped_existing=result.skipped_existing,
        errors=result.errors,
    )


@router.post("/similarity", response_model=SimilarityResponse)
def calculate_similarity(
    request: SimilarityRequest,
    db: Session = Depends(get_db),
):
    """Score two items against each other."""
    item1 = get_item_or_404(db, request.item1_id)
    item2 = get_item_or_404(db, request.item2_id)

    result = get_default_scorer().score(item1, item2)

    return SimilarityResponse(
        similarity=result.similarity,
        confidence=result.confidence.value,
        method=result.method,
        rules=result.rule_scores,
        item1=_item_summary(item1),
        item2=_item_summary(item2),
    )


@router.get("/{match_id}", response_model=MatchResponse)
def get_match(
    match_id: str,
    db: Session = Depends(get_db),
):
    """Get a single match by ID with full details."""
    return _match_to_response(_load_match(db, match_id))


@router.post("/manual", response_model=MatchResponse, status_code=201)
def create_manual_match(
    request: ManualMatchRequest,
    db: Session = Depends(get_db),
):
    """
    Record a match proposed by a person rather than the engine.

    The pair is still scored so reviewers can see how similar the engine
    considers the two items.
    """
    if request.match_type == MatchType.AI_GENERATED:
        raise HTTPException(status_code=400, detail="match_type must be manual or user_suggested")

    lost = get_item_or_404(db, request.lost_item_id)
    found = get_item_or_404(db, request.found_item_id)

    if lost.type != ItemType.LOST or found.type != ItemType.FOUND:
        raise HTTPException(
            status_code=400,
            detail="lost_item_id must be a lost item and found_item_id a found item",
        )

    existing = (
        db.query(Match)
        .filter(Match.lost_item_id == lost.id, Match.found_item_id == found.id)
        .first()
    )
    if existing:
        raise HTTPException(status_code=409, detail=f"Match already recorded for this pair: {existing.id}")

    result = get_default_scorer().score(lost, found)

    match = Match(
        lost_item_id=lost.id,
        found_item_id=found.id,
        similarity=result.similarity,
        confidence=result.confidence,
        status=MatchStatus.PENDING,
        match_type=request.match_type,
        match_details=result.to_details(),
        notes=request.notes,
    )
    db.add(match)
    db.commit()

    return _match_to_response(_load_match(db, str(match.id)))


@router.put("/{match_id}/confirm", response_model=MatchResponse)
def confirm_match(
    match_id: str,
    request: MatchConfirmRequest,
    db: Session = Depends(get_db),
):
    """Confirm a pending match."""
    match = _load_match(db, match_id)

    if match.status != MatchStatus.PENDING:
        raise HTTPException(status_code=400, detail=f"Match is already {match.status.value}")

    match.status = MatchStatus.CONFIRMED
    match.confirmed_by = request.confirmed_by
    match.confirmed_at = datetime.utcnow()
    if request.notes:
        match.notes = request.notes

    db.commit()
    db.refresh(match)

    return _match_to_response(match)


@router.put("/{match_id}/reject", response_model=MatchResponse)
def reject_match(
    match_id: str,
    request: MatchRejectRequest = MatchRejectRequest(),
    db: Session = Depends(get_db),
):
    """Reject a pending match."""
    match = _load_match(db, match_id)

    if match.status != MatchStatus.PENDING:
        raise HTTPException(status_code=400, detail=f"Match is already {match.status.value}")

    match.status = MatchStatus.REJECTED
    if request.notes:
        match.notes = request.notes

    db.commit()
    db.refresh(match)

    return _match_to_response(match)
