"""
Items component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from samankhojo.domain.entities import Item, Shop


class ItemRepoPort(Protocol):
    """Repository interface for catalog items."""

    def save(self, item: Item) -> Item: ...

    def get_by_id(self, item_id: UUID) -> Item | None: ...

    def list_by_shop(self, shop_id: UUID) -> list[Item]: ...

    def get_all(self) -> list[Item]: ...

    def delete(self, item_id: UUID) -> None: ...

    def max_reference_sequence(self, prefix: str) -> int: ...


class ShopLookupPort(Protocol):
    def get_by_id(self, shop_id: UUID) -> Shop | None: ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime: ...
