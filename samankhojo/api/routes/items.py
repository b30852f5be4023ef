"""Catalog routes: items listed under a shop and cross-shop item search."""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import BaseModel

from samankhojo.api.deps import (
    get_item_service,
    require_admin_budget,
    require_admin_heavy_budget,
)
from samankhojo.api.errors import raise_for_errors
from samankhojo.components.items import ItemService
from samankhojo.domain.entities import Item, User

router = APIRouter()


class ItemListResponse(BaseModel):
    items: list[Item]
    count: int


class ItemSearchResponse(BaseModel):
    items: list[Item]
    items_by_shop: dict[str, list[Item]]
    count: int
    shop_count: int


class BulkRowErrorResponse(BaseModel):
    row: int
    errors: list[dict[str, Any]]


class BulkCreateResponse(BaseModel):
    created: list[Item]
    failed: list[BulkRowErrorResponse]
    count: int


class BulkCreateRequest(BaseModel):
    items: list[dict[str, Any]]


@router.get("/shops/{shop_id}/items", response_model=ItemListResponse)
def list_shop_items(
    shop_id: UUID,
    item_type: str | None = Query(None, alias="type"),
    category: str | None = None,
    available_only: bool = False,
    service: ItemService = Depends(get_item_service),
) -> ItemListResponse:
    items, errors = service.list_for_shop(shop_id, item_type, category, available_only)
    if items is None:
        raise_for_errors(errors)
    return ItemListResponse(items=items, count=len(items))


@router.get("/shops/{shop_id}/items/search", response_model=ItemListResponse)
def search_shop_items(
    shop_id: UUID,
    q: str = Query(..., min_length=1),
    item_type: str | None = Query(None, alias="type"),
    service: ItemService = Depends(get_item_service),
) -> ItemListResponse:
    items, errors = service.search_in_shop(shop_id, q, item_type)
    if items is None:
        raise_for_errors(errors)
    return ItemListResponse(items=items, count=len(items))


@router.post("/shops/{shop_id}/items", response_model=Item, status_code=201)
def create_item(
    shop_id: UUID,
    data: dict[str, Any] = Body(...),
    admin: User = Depends(require_admin_budget),
    service: ItemService = Depends(get_item_service),
) -> Item:
    """
    Add an item to a shop.

    Comma-separated strings are accepted for variety, packs and brand_name,
    and "min-max" for price_range.
    """
    item, errors = service.create(shop_id, data)
    if item is None:
        raise_for_errors(errors)
    return item


@router.post("/shops/{shop_id}/items/bulk", response_model=BulkCreateResponse, status_code=201)
def bulk_create_items(
    shop_id: UUID,
    data: BulkCreateRequest,
    admin: User = Depends(require_admin_heavy_budget),
    service: ItemService = Depends(get_item_service),
) -> BulkCreateResponse:
    """Create many items. Valid rows are saved; failures are reported per row."""
    result, errors = service.bulk_create(shop_id, data.items)
    if result is None:
        raise_for_errors(errors)
    return BulkCreateResponse(
        created=list(result.created),
        failed=[
            BulkRowErrorResponse(
                row=failure.row,
                errors=[
                    {"code": err.code, "message": err.message, "field": err.field}
                    for err in failure.errors
                ],
            )
            for failure in result.failed
        ],
        count=result.count,
    )


@router.get("/items/search", response_model=ItemSearchResponse)
def search_items(
    q: str = Query(..., min_length=1),
    item_type: str | None = Query(None, alias="type"),
    service: ItemService = Depends(get_item_service),
) -> ItemSearchResponse:
    """Search items across every shop."""
    result = service.search_all(q, item_type)
    return ItemSearchResponse(
        items=list(result.items),
        items_by_shop={shop_id: list(items) for shop_id, items in result.items_by_shop.items()},
        count=result.count,
        shop_count=result.shop_count,
    )


@router.get("/items/{item_id}", response_model=Item)
def get_item(
    item_id: UUID,
    service: ItemService = Depends(get_item_service),
) -> Item:
    item = service.get_by_id(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


@router.patch("/items/{item_id}", response_model=Item)
def update_item(
    item_id: UUID,
    updates: dict[str, Any] = Body(...),
    admin: User = Depends(require_admin_budget),
    service: ItemService = Depends(get_item_service),
) -> Item:
    item, errors = service.update(item_id, updates)
    if item is None:
        raise_for_errors(errors)
    return item


@router.delete("/items/{item_id}")
def delete_item(
    item_id: UUID,
    admin: User = Depends(require_admin_budget),
    service: ItemService = Depends(get_item_service),
) -> dict[str, str]:
    success, errors = service.delete(item_id)
    if not success:
        raise_for_errors(errors)
    return {"status": "deleted"}
