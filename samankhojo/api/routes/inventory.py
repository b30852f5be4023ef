"""Inventory routes: stock levels, movement history and back-in-stock alerts."""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from samankhojo.api.deps import (
    get_current_admin,
    get_current_user,
    get_inventory_service,
    require_admin_budget,
    require_admin_heavy_budget,
)
from samankhojo.api.errors import raise_for_errors
from samankhojo.components.inventory import InventoryService, StockChange
from samankhojo.domain.entities import Item, Shop, StockAlert, StockMovement, StockStatus, User

router = APIRouter()


class StockUpdateRequest(BaseModel):
    new_stock: Any = None
    reason: str = "manual"


class BulkStockRequest(BaseModel):
    updates: list[Any]


class InterestRequest(BaseModel):
    item_id: UUID
    search_query: str | None = None


class AvailabilityResponse(BaseModel):
    item: Item
    shop: Shop | None
    status: StockStatus
    threshold: float
    is_available: bool
    is_low_stock: bool
    message: str


class StockChangeResponse(BaseModel):
    item: Item
    movement: StockMovement
    alerts_notified: int


class BulkStockFailureResponse(BaseModel):
    row: int
    item_id: str | None
    errors: list[dict[str, Any]]


class BulkStockResponse(BaseModel):
    successful: list[StockChangeResponse]
    failed: list[BulkStockFailureResponse]
    total_processed: int


class LowStockResponse(BaseModel):
    item: Item
    current_stock: float
    threshold: float
    priority: str


class RestockResponse(BaseModel):
    item: Item
    current_stock: float
    recommended_stock: float
    priority: str
    estimated_cost: float | None


class SummaryResponse(BaseModel):
    tracked_items: int
    in_stock: int
    low_stock: int
    out_of_stock: int


class InterestResponse(BaseModel):
    item_id: UUID
    is_available: bool
    alert: StockAlert | None


def _change(change: StockChange) -> StockChangeResponse:
    return StockChangeResponse(
        item=change.item, movement=change.movement, alerts_notified=change.alerts_notified
    )


@router.get("/items/{item_id}", response_model=AvailabilityResponse)
def check_availability(
    item_id: UUID,
    service: InventoryService = Depends(get_inventory_service),
) -> AvailabilityResponse:
    availability, errors = service.check(item_id)
    if availability is None:
        raise_for_errors(errors)
    return AvailabilityResponse(
        item=availability.item,
        shop=availability.shop,
        status=availability.status,
        threshold=availability.threshold,
        is_available=availability.is_available,
        is_low_stock=availability.is_low_stock,
        message=availability.message,
    )


@router.put("/items/{item_id}/stock", response_model=StockChangeResponse)
def update_stock(
    item_id: UUID,
    data: StockUpdateRequest,
    admin: User = Depends(require_admin_budget),
    service: InventoryService = Depends(get_inventory_service),
) -> StockChangeResponse:
    change, errors = service.update_stock(item_id, data.new_stock, data.reason, str(admin.id))
    if change is None:
        raise_for_errors(errors)
    return _change(change)


@router.post("/bulk-update", response_model=BulkStockResponse)
def bulk_update_stock(
    data: BulkStockRequest,
    admin: User = Depends(require_admin_heavy_budget),
    service: InventoryService = Depends(get_inventory_service),
) -> BulkStockResponse:
    """Update many items at once. Rows fail independently."""
    result, errors = service.bulk_update(data.updates, str(admin.id))
    if result is None:
        raise_for_errors(errors)
    return BulkStockResponse(
        successful=[_change(c) for c in result.successful],
        failed=[
            BulkStockFailureResponse(
                row=f.row,
                item_id=f.item_id,
                errors=[{"code": e.code, "message": e.message, "field": e.field} for e in f.errors],
            )
            for f in result.failed
        ],
        total_processed=result.total_processed,
    )


@router.get("/low-stock", response_model=list[LowStockResponse])
def low_stock(
    shop_id: UUID | None = None,
    threshold: float | None = Query(None, ge=0),
    admin: User = Depends(get_current_admin),
    service: InventoryService = Depends(get_inventory_service),
) -> list[LowStockResponse]:
    return [
        LowStockResponse(
            item=e.item, current_stock=e.current_stock, threshold=e.threshold, priority=e.priority
        )
        for e in service.low_stock(shop_id, threshold)
    ]


@router.get("/restock", response_model=list[RestockResponse])
def restock_recommendations(
    shop_id: UUID | None = None,
    admin: User = Depends(get_current_admin),
    service: InventoryService = Depends(get_inventory_service),
) -> list[RestockResponse]:
    return [
        RestockResponse(
            item=r.item,
            current_stock=r.current_stock,
            recommended_stock=r.recommended_stock,
            priority=r.priority,
            estimated_cost=r.estimated_cost,
        )
        for r in service.restock_recommendations(shop_id)
    ]


@router.get("/summary", response_model=SummaryResponse)
def inventory_summary(
    shop_id: UUID | None = None,
    admin: User = Depends(get_current_admin),
    service: InventoryService = Depends(get_inventory_service),
) -> SummaryResponse:
    summary = service.summary(shop_id)
    return SummaryResponse(
        tracked_items=summary.tracked_items,
        in_stock=summary.in_stock,
        low_stock=summary.low_stock,
        out_of_stock=summary.out_of_stock,
    )


@router.get("/movements", response_model=list[StockMovement])
def stock_movements(
    item_id: UUID | None = None,
    shop_id: UUID | None = None,
    limit: int | None = Query(None, ge=1, le=500),
    admin: User = Depends(get_current_admin),
    service: InventoryService = Depends(get_inventory_service),
) -> list[StockMovement]:
    return service.movements(item_id, shop_id, limit)


@router.post("/alerts", response_model=InterestResponse)
def track_interest(
    data: InterestRequest,
    current_user: User = Depends(get_current_user),
    service: InventoryService = Depends(get_inventory_service),
) -> InterestResponse:
    """Ask to hear when an item is back in stock."""
    result, errors = service.track_interest(str(current_user.id), data.item_id, data.search_query)
    if result is None:
        raise_for_errors(errors)
    return InterestResponse(item_id=result.item.id, is_available=result.is_available, alert=result.alert)


@router.get("/alerts", response_model=list[StockAlert])
def my_alerts(
    status: str = "active",
    current_user: User = Depends(get_current_user),
    service: InventoryService = Depends(get_inventory_service),
) -> list[StockAlert]:
    alerts, errors = service.alerts_for_user(str(current_user.id), None if status == "all" else status)
    if alerts is None:
        raise_for_errors(errors)
    return alerts


@router.delete("/alerts/{alert_id}", response_model=StockAlert)
def cancel_alert(
    alert_id: UUID,
    current_user: User = Depends(get_current_user),
    service: InventoryService = Depends(get_inventory_service),
) -> StockAlert:
    alert, errors = service.cancel_alert(alert_id, str(current_user.id))
    if alert is None:
        raise_for_errors(errors)
    return alert
