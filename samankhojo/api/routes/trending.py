from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel

from samankhojo.api.deps import get_current_admin, get_trending_service, require_admin_budget
from samankhojo.api.errors import raise_for_errors
from samankhojo.components.trending import TrendingService
from samankhojo.domain.entities import Item, TrendingItem, User

router = APIRouter()


class TrendingPickResponse(BaseModel):
    item: Item
    shop_name: str
    pinned: bool
    priority: int


class TrendingFeedResponse(BaseModel):
    category: str | None
    items: list[TrendingPickResponse]
    count: int


@router.get("", response_model=TrendingFeedResponse)
def trending_feed(
    category: str | None = None,
    limit: int | None = None,
    service: TrendingService = Depends(get_trending_service),
) -> TrendingFeedResponse:
    """Pinned items first, then popular items that are in stock."""
    picks, errors = service.feed(category, limit)
    if picks is None:
        raise_for_errors(errors)
    return TrendingFeedResponse(
        category=category,
        items=[
            TrendingPickResponse(item=p.item, shop_name=p.shop_name, pinned=p.pinned, priority=p.priority)
            for p in picks
        ],
        count=len(picks),
    )


@router.get("/pinned", response_model=list[TrendingItem])
def list_pinned(
    admin: User = Depends(get_current_admin),
    service: TrendingService = Depends(get_trending_service),
) -> list[TrendingItem]:
    return service.get_all()


@router.post("/pinned", response_model=TrendingItem, status_code=201)
def pin_item(
    data: dict[str, Any] = Body(...),
    admin: User = Depends(require_admin_budget),
    service: TrendingService = Depends(get_trending_service),
) -> TrendingItem:
    entry, errors = service.pin(data)
    if entry is None:
        raise_for_errors(errors)
    return entry


@router.patch("/pinned/{entry_id}", response_model=TrendingItem)
def update_pin(
    entry_id: UUID,
    updates: dict[str, Any] = Body(...),
    admin: User = Depends(require_admin_budget),
    service: TrendingService = Depends(get_trending_service),
) -> TrendingItem:
    entry, errors = service.update(entry_id, updates)
    if entry is None:
        raise_for_errors(errors)
    return entry


@router.post("/pinned/{entry_id}/toggle", response_model=TrendingItem)
def toggle_pin(
    entry_id: UUID,
    admin: User = Depends(require_admin_budget),
    service: TrendingService = Depends(get_trending_service),
) -> TrendingItem:
    entry, errors = service.toggle(entry_id)
    if entry is None:
        raise_for_errors(errors)
    return entry


@router.delete("/pinned/{entry_id}")
def unpin_item(
    entry_id: UUID,
    admin: User = Depends(require_admin_budget),
    service: TrendingService = Depends(get_trending_service),
) -> dict[str, str]:
    success, errors = service.unpin(entry_id)
    if not success:
        raise_for_errors(errors)
    return {"status": "deleted"}
