"""Pydantic schemas for match endpoints."""

from datetime import datetime
from pydantic import BaseModel

from lostfound.models.match import MatchType


class MatchItemSummary(BaseModel):
    """Embedded item info inside match and suggestion responses."""
    id: str
    title: str
    category: str
    location: str | None = None
    type: str
    status: str


class MatchResponse(BaseModel):
    """Single match record."""
    id: str
    similarity: float
    confidence: str
    status: str
    match_type: str
    match_details: dict | None = None
    confirmed_by: str | None = None
    confirmed_at: datetime | None = None
    notes: str | None = None
    created_at: datetime
    lost_item: MatchItemSummary
    found_item: MatchItemSummary


class MatchListResponse(BaseModel):
    """List of matches with count."""
    total: int
    matches: list[MatchResponse]


class SuggestionResponse(BaseModel):
    item: MatchItemSummary
    similarity: float
    confidence: str
    method: str


class SuggestionListResponse(BaseModel):
    item_id: str
    threshold: float
    total: int
    suggestions: list[SuggestionResponse]


class AutoMatchResponse(BaseModel):
    message: str
    item_id: str
    suggestions: list[SuggestionResponse]
    matches_created: list[str]
    skipped_existing: int
    errors: list[str]


class SimilarityRequest(BaseModel):
    """Request body for scoring two items against each other."""
    item1_id: str
    item2_id: str


class SimilarityResponse(BaseModel):
    similarity: float
    confidence: str
    method: str
    rules: dict[str, dict] = {}
    item1: MatchItemSummary
    item2: MatchItemSummary


class ManualMatchRequest(BaseModel):
    """Request body for creating a match by hand."""
    lost_item_id: str
    found_item_id: str
    match_type: MatchType = MatchType.MANUAL
    notes: str | None = None


class MatchConfirmRequest(BaseModel):
    """Request body for confirming a match."""
    confirmed_by: str
    notes: str | None = None


class MatchRejectRequest(BaseModel):
    """Request body for rejecting a match."""
    notes: str | None = None
