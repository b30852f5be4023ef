"""
Trending component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from samankhojo.domain.entities import Item, Shop, TrendingItem


class TrendingRepoPort(Protocol):
    """Repository interface for admin-pinned trending items."""

    def save(self, entry: TrendingItem) -> TrendingItem: ...

    def get_by_id(self, entry_id: UUID) -> TrendingItem | None: ...

    def get_by_item(self, item_id: UUID) -> TrendingItem | None: ...

    def get_all(self) -> list[TrendingItem]: ...

    def delete(self, entry_id: UUID) -> None: ...


class ItemLookupPort(Protocol):
    def get_by_id(self, item_id: UUID) -> Item | None: ...

    def get_all(self) -> list[Item]: ...


class ShopLookupPort(Protocol):
    def get_by_id(self, shop_id: UUID) -> Shop | None: ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime: ...
