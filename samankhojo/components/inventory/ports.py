"""
Inventory component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from samankhojo.domain.entities import Item, Shop, StockAlert, StockMovement


class ItemStorePort(Protocol):
    def save(self, item: Item) -> Item: ...

    def get_by_id(self, item_id: UUID) -> Item | None: ...

    def list_by_shop(self, shop_id: UUID) -> list[Item]: ...

    def get_all(self) -> list[Item]: ...


class ShopLookupPort(Protocol):
    def get_by_id(self, shop_id: UUID) -> Shop | None: ...


class MovementRepoPort(Protocol):
    """Append-only log of stock changes."""

    def save(self, movement: StockMovement) -> StockMovement: ...

    def recent(
        self, limit: int, item_id: UUID | None = None, shop_id: UUID | None = None
    ) -> list[StockMovement]: ...


class AlertRepoPort(Protocol):
    def save(self, alert: StockAlert) -> StockAlert: ...

    def get_by_id(self, alert_id: UUID) -> StockAlert | None: ...

    def list_by_user(self, user_id: str) -> list[StockAlert]: ...

    def list_active_for_item(self, item_id: UUID) -> list[StockAlert]: ...

    def mark_notified(self, item_id: UUID, now: datetime) -> int: ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime: ...
