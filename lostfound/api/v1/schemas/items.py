"""Pydantic schemas for item endpoints."""

from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from lostfound.models.item import ItemType


class ItemCreateRequest(BaseModel):
    """Request body for reporting a lost or found item."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    category: str = Field(..., min_length=1, max_length=50)
    location: str | None = Field(None, max_length=255)
    type: ItemType
    reported_by: str | None = None

    @field_validator('title', 'category', mode='before')
    @classmethod
    def strip_required_text(cls, v):
        """Strip surrounding whitespace before the length checks run"""
        if isinstance(v, str):
            return v.strip()
        return v


class ItemResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    category: str
    location: str | None = None
    type: str
    status: str
    reported_by: str | None = None
    created_at: datetime


class ItemCreateResponse(BaseModel):
    message: str
    item: ItemResponse
    auto_match_scheduled: bool


class ItemListResponse(BaseModel):
    total: int
    items: list[ItemResponse]
