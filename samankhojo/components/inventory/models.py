"""
Inventory component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from samankhojo.domain.entities import Item, Shop, StockAlert, StockMovement, StockStatus


@dataclass(frozen=True)
class InventoryValidationError:
    """Inventory validation error."""

    code: str
    message: str
    field: str | None = None


# --- Output Models ---


@dataclass(frozen=True)
class ItemAvailability:
    item: Item
    shop: Shop | None
    status: StockStatus
    threshold: float

    @property
    def is_available(self) -> bool:
        return self.item.availability and self.status != "out_of_stock"

    @property
    def is_low_stock(self) -> bool:
        return self.status == "low_stock"

    @property
    def message(self) -> str:
        if self.status == "out_of_stock" or not self.item.availability:
            return "Out of stock"
        if self.status == "low_stock":
            return f"Low stock: {self.item.in_stock:g} units left"
        if self.status == "in_stock":
            return f"In stock: {self.item.in_stock:g} units"
        return "Available"


@dataclass(frozen=True)
class StockChange:
    """Result of a stock update: the saved item, its movement record and alerts released."""

    item: Item
    movement: StockMovement
    alerts_notified: int = 0


@dataclass(frozen=True)
class BulkStockFailure:
    row: int
    item_id: str | None
    errors: tuple[InventoryValidationError, ...]


@dataclass(frozen=True)
class BulkStockOutput:
    successful: tuple[StockChange, ...]
    failed: tuple[BulkStockFailure, ...]

    @property
    def total_processed(self) -> int:
        return len(self.successful) + len(self.failed)


@dataclass(frozen=True)
class LowStockEntry:
    item: Item
    current_stock: float
    threshold: float
    priority: str


@dataclass(frozen=True)
class RestockRecommendation:
    item: Item
    current_stock: float
    recommended_stock: float
    priority: str
    estimated_cost: float | None


@dataclass(frozen=True)
class InventorySummary:
    tracked_items: int
    in_stock: int
    low_stock: int
    out_of_stock: int


@dataclass(frozen=True)
class InterestOutput:
    """Outcome of a customer asking to hear about an item. alert is None while it is available."""

    item: Item
    is_available: bool
    alert: StockAlert | None
