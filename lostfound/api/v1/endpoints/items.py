"""Item endpoints — report lost/found items and browse listings."""

import uuid

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lostfound.config import get_settings
from lostfound.db.session import get_db
from lostfound.models.item import Item, ItemStatus, ItemType
from lostfound.services.matching_service import run_auto_match
from lostfound.api.v1.schemas.items import (
    ItemCreateRequest,
    ItemCreateResponse,
    ItemListResponse,
    ItemResponse,
)

router = APIRouter(prefix="/items", tags=["Items"])


def _item_to_response(item: Item) -> ItemResponse:
    return ItemResponse(
        id=str(item.id),
        title=item.title,
        description=item.description,
        category=item.category,
        location=item.location,
        type=item.type.value,
        status=item.status.value,
        reported_by=item.reported_by,
        created_at=item.created_at,
    )


def get_item_or_404(db: Session, item_id: str) -> Item:
    """Load an item by id, raising 404 for unknown or malformed ids and 503 if storage fails."""
    try:
        key = uuid.UUID(item_id)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Item {item_id} not found")

    try:
        item = db.get(Item, key)
    except SQLAlchemyError as e:
        raise HTTPException(status_code=503, detail=f"Failed to load item {item_id}: {str(e)}")
    if not item:
        raise HTTPException(status_code=404, detail=f"Item {item_id} not found")
    return item


@router.post("", response_model=ItemCreateResponse, status_code=201)
def create_item(
    request: ItemCreateRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """
    Report a lost or found item.

    Once the item is stored, auto-matching against items of the opposite
    type is scheduled in the background; its outcome never affects this
    response.
    """
    item = Item(
        title=request.title,
        description=request.description,
        category=request.category,
        location=request.location,
        type=request.type,
        status=ItemStatus.ACTIVE,
        reported_by=request.reported_by,
    )
    db.add(item)
    db.commit()
    db.refresh(item)

    schedule = get_settings().auto_match_on_create
    if schedule:
        background_tasks.add_task(run_auto_match, str(item.id))

    return ItemCreateResponse(
        message="Item reported successfully",
        item=_item_to_response(item),
        auto_match_scheduled=schedule,
    )


@router.get("", response_model=ItemListResponse)
def list_items(
    type: str | None = Query(None, description="Filter by item type: lost, found"),
    status: str | None = Query(None, description="Filter by status, e.g. active"),
    db: Session = Depends(get_db),
):
    """List reported items, newest first."""
    query = db.query(Item)

    if type:
        try:
            query = query.filter(Item.type == ItemType(type))
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid type '{type}'. Use: lost, found",
            )

    if status:
        try:
            query = query.filter(Item.status == ItemStatus(status))
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid status '{status}'. Use: {', '.join(s.value for s in ItemStatus)}",
            )

    items = query.order_by(Item.created_at.desc()).all()

    return ItemListResponse(
        total=len(items),
        items=[_item_to_response(i) for i in items],
    )


@router.get("/{item_id}", response_model=ItemResponse)
def get_item(
    item_id: str,
    db: Session = Depends(get_db),
):
    """Get a single item by ID."""
    return _item_to_response(get_item_or_404(db, item_id))
