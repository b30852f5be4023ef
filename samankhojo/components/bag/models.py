"""
Bag component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from samankhojo.domain.entities import BagItem


@dataclass(frozen=True)
class BagValidationError:
    """Bag validation error."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class AddToBagInput:
    item_id: str
    item_name: str
    shop_id: str
    shop_name: str
    quantity: int = 1
    unit: str | None = None
    price: float | None = None


@dataclass(frozen=True)
class BagShopGroup:
    shop_id: str
    shop_name: str
    items: tuple[BagItem, ...]
    total_quantity: int


@dataclass(frozen=True)
class BagView:
    """A user's bag with per-shop grouping and totals."""

    user_id: str
    items: tuple[BagItem, ...]
    groups: tuple[BagShopGroup, ...]
    total_quantity: int
    shop_count: int
