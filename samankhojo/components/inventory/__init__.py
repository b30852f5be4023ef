"""
Inventory component - Stock levels, movement history and back-in-stock alerts.
"""

from ._impl import InventoryService, parse_stock, stock_priority, stock_status, threshold_for
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
from .ports import AlertRepoPort, ItemStorePort, MovementRepoPort

__all__ = [
    "InventoryService",
    "InventoryValidationError",
    "ItemAvailability",
    "StockChange",
    "BulkStockFailure",
    "BulkStockOutput",
    "LowStockEntry",
    "RestockRecommendation",
    "InventorySummary",
    "InterestOutput",
    "ItemStorePort",
    "MovementRepoPort",
    "AlertRepoPort",
    "parse_stock",
    "stock_priority",
    "stock_status",
    "threshold_for",
]
