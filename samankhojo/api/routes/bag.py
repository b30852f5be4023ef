"""Per-user shopping bag routes. Users only ever see their own bag."""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from samankhojo.api.deps import get_bag_service, get_current_user
from samankhojo.api.errors import raise_for_errors
from samankhojo.components.bag import AddToBagInput, BagService, BagView
from samankhojo.domain.entities import BagItem, User

router = APIRouter()


class AddToBagRequest(BaseModel):
    item_id: str
    item_name: str
    shop_id: str
    shop_name: str
    quantity: int = 1
    unit: str | None = None
    price: float | None = None


class QuantityRequest(BaseModel):
    quantity: int = Field(..., ge=1)


class BagGroupResponse(BaseModel):
    shop_id: str
    shop_name: str
    items: list[BagItem]
    total_quantity: int


class BagResponse(BaseModel):
    user_id: str
    items: list[BagItem]
    groups: list[BagGroupResponse]
    total_quantity: int
    shop_count: int


def _to_response(view: BagView) -> BagResponse:
    return BagResponse(
        user_id=view.user_id,
        items=list(view.items),
        groups=[
            BagGroupResponse(
                shop_id=g.shop_id,
                shop_name=g.shop_name,
                items=list(g.items),
                total_quantity=g.total_quantity,
            )
            for g in view.groups
        ],
        total_quantity=view.total_quantity,
        shop_count=view.shop_count,
    )


@router.get("", response_model=BagResponse)
def get_my_bag(
    current_user: User = Depends(get_current_user),
    service: BagService = Depends(get_bag_service),
) -> BagResponse:
    return _to_response(service.get(str(current_user.id)))


@router.get("/{user_id}", response_model=BagResponse)
def get_bag(
    user_id: str,
    current_user: User = Depends(get_current_user),
    service: BagService = Depends(get_bag_service),
) -> BagResponse:
    if user_id != str(current_user.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return _to_response(service.get(user_id))


@router.post("/items", response_model=BagResponse)
def add_to_bag(
    data: AddToBagRequest,
    current_user: User = Depends(get_current_user),
    service: BagService = Depends(get_bag_service),
) -> BagResponse:
    """Add an entry; the same item from the same shop merges quantities."""
    view, errors = service.add(str(current_user.id), AddToBagInput(**data.model_dump()))
    if view is None:
        raise_for_errors(errors)
    return _to_response(view)


@router.patch("/items/{item_id}", response_model=BagResponse)
def update_bag_quantity(
    item_id: str,
    data: QuantityRequest,
    current_user: User = Depends(get_current_user),
    service: BagService = Depends(get_bag_service),
) -> BagResponse:
    view, errors = service.update_quantity(str(current_user.id), item_id, data.quantity)
    if view is None:
        raise_for_errors(errors)
    return _to_response(view)


@router.delete("/items/{item_id}", response_model=BagResponse)
def remove_from_bag(
    item_id: str,
    current_user: User = Depends(get_current_user),
    service: BagService = Depends(get_bag_service),
) -> BagResponse:
    view, errors = service.remove(str(current_user.id), item_id)
    if view is None:
        raise_for_errors(errors)
    return _to_response(view)


@router.delete("")
def clear_bag(
    current_user: User = Depends(get_current_user),
    service: BagService = Depends(get_bag_service),
) -> dict[str, str]:
    service.clear(str(current_user.id))
    return {"status": "cleared"}
