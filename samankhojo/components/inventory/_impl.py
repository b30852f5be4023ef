"""
InventoryService - Stock levels, movement history and back-in-stock alerts.

Invariants:
- Only items with a recorded stock (in_stock is not None) are tracked.
- Every stock change made here writes one StockMovement.
- An item whose stock is 0 is unavailable; raising it above 0 makes it
  available again and releases every active alert for it.
- A user holds at most one active alert per item.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from samankhojo.domain.entities import Item, StockAlert, StockMovement, StockStatus
from samankhojo.rules.models import InventoryRules

from .models import (
    BulkStockFailure,
    BulkStockOutput,
    InterestOutput,
    InventorySummary,
    InventoryValidationError,
    ItemAvailability,
    LowStockEntry,
    RestockRecommendation,
    StockChange,
)
from .ports import AlertRepoPort, ClockPort, ItemStorePort, MovementRepoPort, ShopLookupPort

logger = logging.getLogger(__name__)

PRIORITY_ORDER = {"critical": 0, "high": 1, "medium": 2}
ALERT_STATUSES = ("active", "notified", "cancelled")


# --- Stock helpers ---


def parse_stock(value: Any) -> float:
    """Coerce a stock quantity. Raises ValueError for booleans, non-numbers and negatives."""
    if isinstance(value, bool) or value is None or value == "":
        raise ValueError(f"Invalid stock quantity: {value!r}")
    try:
        stock = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid stock quantity: {value!r}") from e
    if stock < 0:
        raise ValueError("Stock quantity must be >= 0")
    return stock


def threshold_for(item: Item, rules: InventoryRules) -> float:
    if item.low_stock_threshold is not None:
        return item.low_stock_threshold
    return rules.low_stock_threshold


def stock_status(item: Item, rules: InventoryRules) -> StockStatus:
    if item.in_stock is None:
        return "untracked"
    if item.in_stock <= 0:
        return "out_of_stock"
    if item.in_stock <= threshold_for(item, rules):
        return "low_stock"
    return "in_stock"


def stock_priority(stock: float, rules: InventoryRules) -> str:
    if stock <= 0:
        return "critical"
    if stock <= rules.high_priority_stock:
        return "high"
    return "medium"


def _item_not_found(item_id: UUID | str) -> InventoryValidationError:
    return InventoryValidationError(code="item_not_found", message=f"Item with ID {item_id} not found")


# --- Inventory Service ---


class InventoryService:
    def __init__(
        self,
        items: ItemStorePort,
        shops: ShopLookupPort,
        movements: MovementRepoPort,
        alerts: AlertRepoPort,
        clock: ClockPort,
        rules: InventoryRules,
    ) -> None:
        self._items = items
        self._shops = shops
        self._movements = movements
        self._alerts = alerts
        self._clock = clock
        self._rules = rules

    def check(self, item_id: UUID) -> tuple[ItemAvailability | None, list[InventoryValidationError]]:
        item = self._items.get_by_id(item_id)
        if not item:
            return None, [_item_not_found(item_id)]
        return (
            ItemAvailability(
                item=item,
                shop=self._shops.get_by_id(item.shop_id),
                status=stock_status(item, self._rules),
                threshold=threshold_for(item, self._rules),
            ),
            [],
        )

    def update_stock(
        self,
        item_id: UUID,
        new_stock: Any,
        reason: str = "manual",
        updated_by: str | None = None,
    ) -> tuple[StockChange | None, list[InventoryValidationError]]:
        """
        Set an item's stock and record the movement.

        Returns:
            Tuple of (change, errors). Change is None if validation fails.
        """
        item = self._items.get_by_id(item_id)
        if not item:
            return None, [_item_not_found(item_id)]

        try:
            stock = parse_stock(new_stock)
        except ValueError:
            return None, [
                InventoryValidationError(
                    code="new_stock_invalid",
                    message="Valid stock quantity is required",
                    field="new_stock",
                )
            ]
        if not isinstance(reason, str) or not reason.strip():
            reason = "manual"

        now = self._clock.now_utc()
        old_stock = item.in_stock
        saved = self._items.save(
            item.model_copy(update={"in_stock": stock, "availability": stock > 0, "updated_at": now})
        )
        movement = self._movements.save(
            StockMovement(
                item_id=item.id,
                shop_id=item.shop_id,
                old_stock=old_stock,
                new_stock=stock,
                reason=reason.strip(),
                updated_by=updated_by,
                created_at=now,
            )
        )

        notified = 0
        if stock > 0 and (old_stock is None or old_stock <= 0):
            notified = self._alerts.mark_notified(item.id, now)
            if notified:
                logger.info("Item %s back in stock, released %d alert(s)", item.id, notified)

        logger.info("Stock for %s changed %s -> %s (%s)", item.id, old_stock, stock, movement.reason)
        return StockChange(item=saved, movement=movement, alerts_notified=notified), []

    def bulk_update(
        self, updates: list[Any], updated_by: str | None = None
    ) -> tuple[BulkStockOutput | None, list[InventoryValidationError]]:
        """Apply many stock updates. Each row succeeds or fails on its own."""
        if not updates:
            return None, [
                InventoryValidationError(
                    code="updates_required", message="Updates array is required", field="updates"
                )
            ]

        successful: list[StockChange] = []
        failed: list[BulkStockFailure] = []
        for index, row in enumerate(updates, start=1):
            if not isinstance(row, dict):
                failed.append(
                    BulkStockFailure(
                        row=index,
                        item_id=None,
                        errors=(
                            InventoryValidationError(code="row_invalid", message="Each update must be an object"),
                        ),
                    )
                )
                continue

            raw_id = row.get("item_id")
            try:
                item_id = UUID(str(raw_id))
            except ValueError:
                failed.append(
                    BulkStockFailure(
                        row=index,
                        item_id=None if raw_id is None else str(raw_id),
                        errors=(
                            InventoryValidationError(
                                code="item_id_invalid", message="A valid item_id is required", field="item_id"
                            ),
                        ),
                    )
                )
                continue

            change, errors = self.update_stock(
                item_id, row.get("new_stock"), row.get("reason") or "bulk_update", updated_by
            )
            if change:
                successful.append(change)
            else:
                failed.append(BulkStockFailure(row=index, item_id=str(item_id), errors=tuple(errors)))

        logger.info("Bulk stock update: %d updated, %d failed", len(successful), len(failed))
        return BulkStockOutput(successful=tuple(successful), failed=tuple(failed)), []

    def _tracked(self, shop_id: UUID | None) -> list[Item]:
        items = self._items.list_by_shop(shop_id) if shop_id else self._items.get_all()
        return [i for i in items if i.in_stock is not None]

    def low_stock(self, shop_id: UUID | None = None, threshold: float | None = None) -> list[LowStockEntry]:
        """Items still in stock but at or under their threshold, most urgent first."""
        entries = []
        for item in self._tracked(shop_id):
            limit = threshold if threshold is not None else threshold_for(item, self._rules)
            stock = item.in_stock or 0.0
            if 0 < stock <= limit:
                entries.append(
                    LowStockEntry(
                        item=item,
                        current_stock=stock,
                        threshold=limit,
                        priority=stock_priority(stock, self._rules),
                    )
                )
        return sorted(entries, key=lambda e: (PRIORITY_ORDER[e.priority], e.current_stock))

    def restock_recommendations(self, shop_id: UUID | None = None) -> list[RestockRecommendation]:
        recommendations = []
        for item in self._tracked(shop_id):
            threshold = threshold_for(item, self._rules)
            stock = item.in_stock or 0.0
            if stock > threshold:
                continue
            target = max(self._rules.restock_minimum, threshold * self._rules.restock_multiplier)
            recommendations.append(
                RestockRecommendation(
                    item=item,
                    current_stock=stock,
                    recommended_stock=target,
                    priority=stock_priority(stock, self._rules),
                    estimated_cost=item.price * target if item.price is not None else None,
                )
            )
        return sorted(recommendations, key=lambda r: (PRIORITY_ORDER[r.priority], r.current_stock))

    def summary(self, shop_id: UUID | None = None) -> InventorySummary:
        statuses = [stock_status(i, self._rules) for i in self._tracked(shop_id)]
        return InventorySummary(
            tracked_items=len(statuses),
            in_stock=statuses.count("in_stock"),
            low_stock=statuses.count("low_stock"),
            out_of_stock=statuses.count("out_of_stock"),
        )

    def movements(
        self, item_id: UUID | None = None, shop_id: UUID | None = None, limit: int | None = None
    ) -> list[StockMovement]:
        return self._movements.recent(limit or self._rules.movements_limit, item_id=item_id, shop_id=shop_id)

    # --- Back-in-stock alerts ---

    def track_interest(
        self, user_id: str, item_id: UUID, search_query: str | None = None
    ) -> tuple[InterestOutput | None, list[InventoryValidationError]]:
        """Create an alert for an unavailable item, or report that it is available."""
        availability, errors = self.check(item_id)
        if availability is None:
            return None, errors

        item = availability.item
        if availability.is_available:
            return InterestOutput(item=item, is_available=True, alert=None), []

        for alert in self._alerts.list_by_user(user_id):
            if alert.item_id == item.id and alert.status == "active":
                return InterestOutput(item=item, is_available=False, alert=alert), []

        alert = self._alerts.save(
            StockAlert(
                user_id=user_id,
                item_id=item.id,
                shop_id=item.shop_id,
                item_name=item.name or "",
                search_query=search_query or f"Interest in {item.name}",
                created_at=self._clock.now_utc(),
            )
        )
        logger.info("User %s waiting for item %s", user_id, item.id)
        return InterestOutput(item=item, is_available=False, alert=alert), []

    def alerts_for_user(
        self, user_id: str, status: str | None = "active"
    ) -> tuple[list[StockAlert] | None, list[InventoryValidationError]]:
        if status is not None and status not in ALERT_STATUSES:
            return None, [
                InventoryValidationError(
                    code="status_invalid",
                    message=f"Status must be one of {', '.join(ALERT_STATUSES)}",
                    field="status",
                )
            ]
        alerts = self._alerts.list_by_user(user_id)
        if status is not None:
            alerts = [a for a in alerts if a.status == status]
        return alerts, []

    def cancel_alert(
        self, alert_id: UUID, user_id: str
    ) -> tuple[StockAlert | None, list[InventoryValidationError]]:
        alert = self._alerts.get_by_id(alert_id)
        if not alert:
            return None, [
                InventoryValidationError(code="alert_not_found", message=f"Alert with ID {alert_id} not found")
            ]
        if alert.user_id != user_id:
            return None, [InventoryValidationError(code="forbidden", message="Not your alert")]
        if alert.status != "active":
            return alert, []
        return self._alerts.save(alert.model_copy(update={"status": "cancelled"})), []
