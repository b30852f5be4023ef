"""Shop directory routes: public listing and details, admin management."""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from samankhojo.api.deps import get_shop_service, require_admin_budget
from samankhojo.api.errors import raise_for_errors
from samankhojo.components.shops import ShopQuery, ShopService, ShopSort
from samankhojo.domain.entities import GeoPoint, Item, Shop, ShopType, User

router = APIRouter()


# --- Request/Response Models ---


class ShopCreateRequest(BaseModel):
    shop_name: str
    owner_name: str
    type: str
    shop_type: ShopType = "product"
    district: str
    address: str
    phone: str
    opening_time: str | None = None
    closing_time: str | None = None
    map_link: str | None = None
    is_featured: bool = False
    is_verified: bool = False
    is_hidden: bool = False
    location: GeoPoint | None = None
    image_url: str | None = None


class ShopUpdateRequest(BaseModel):
    shop_name: str | None = None
    owner_name: str | None = None
    type: str | None = None
    shop_type: ShopType | None = None
    district: str | None = None
    address: str | None = None
    phone: str | None = None
    opening_time: str | None = None
    closing_time: str | None = None
    map_link: str | None = None
    is_featured: bool | None = None
    is_verified: bool | None = None
    is_hidden: bool | None = None
    location: GeoPoint | None = None
    image_url: str | None = None


class ShopListingResponse(BaseModel):
    shop: Shop
    distance_km: float | None
    is_open: bool


class ShopListResponse(BaseModel):
    shops: list[ShopListingResponse]
    total: int


class ItemGroupResponse(BaseModel):
    name: str
    count: int
    items: list[Item]


class ShopDetailsResponse(BaseModel):
    shop: Shop
    items: list[Item]
    categories: list[ItemGroupResponse]
    types: list[ItemGroupResponse]


# --- Routes ---


@router.get("", response_model=ShopListResponse)
def list_shops(
    search: str | None = None,
    category: str | None = None,
    is_open: bool | None = None,
    lat: float | None = None,
    lng: float | None = None,
    radius_km: float = Query(10.0, gt=0),
    sort_by: ShopSort = "distance",
    service: ShopService = Depends(get_shop_service),
) -> ShopListResponse:
    """Public shop listing. Hidden shops are never returned."""
    listings = service.list_shops(
        ShopQuery(
            search=search,
            category=category,
            is_open=is_open,
            lat=lat,
            lng=lng,
            radius_km=radius_km,
            sort_by=sort_by,
        )
    )
    return ShopListResponse(
        shops=[
            ShopListingResponse(shop=entry.shop, distance_km=entry.distance_km, is_open=entry.is_open)
            for entry in listings
        ],
        total=len(listings),
    )


@router.get("/{shop_id}", response_model=ShopDetailsResponse)
def get_shop_details(
    shop_id: UUID,
    item_type: str | None = Query(None, alias="type"),
    service: ShopService = Depends(get_shop_service),
) -> ShopDetailsResponse:
    """A shop with its items grouped by category and by type."""
    details, errors = service.details(shop_id, item_type)
    if details is None:
        raise_for_errors(errors)

    def groups(source: Any) -> list[ItemGroupResponse]:
        return [ItemGroupResponse(name=g.name, count=g.count, items=list(g.items)) for g in source]

    return ShopDetailsResponse(
        shop=details.shop,
        items=list(details.items),
        categories=groups(details.categories),
        types=groups(details.types),
    )


@router.post("", response_model=Shop, status_code=201)
def create_shop(
    data: ShopCreateRequest,
    admin: User = Depends(require_admin_budget),
    service: ShopService = Depends(get_shop_service),
) -> Shop:
    shop, errors = service.create(data.model_dump())
    if shop is None:
        raise_for_errors(errors)
    return shop


@router.patch("/{shop_id}", response_model=Shop)
def update_shop(
    shop_id: UUID,
    data: ShopUpdateRequest,
    admin: User = Depends(require_admin_budget),
    service: ShopService = Depends(get_shop_service),
) -> Shop:
    shop, errors = service.update(shop_id, data.model_dump(exclude_unset=True))
    if shop is None:
        raise_for_errors(errors)
    return shop


@router.delete("/{shop_id}")
def delete_shop(
    shop_id: UUID,
    admin: User = Depends(require_admin_budget),
    service: ShopService = Depends(get_shop_service),
) -> dict[str, str]:
    """Delete a shop together with its items and reviews."""
    success, errors = service.delete(shop_id)
    if not success:
        raise_for_errors(errors)
    return {"status": "deleted"}
