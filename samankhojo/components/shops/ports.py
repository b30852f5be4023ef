"""
Shops component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime, time
from typing import Protocol
from uuid import UUID

from samankhojo.domain.entities import Item, Review, Shop


class ShopRepoPort(Protocol):
    """Repository interface for shops."""

    def save(self, shop: Shop) -> Shop: ...

    def get_by_id(self, shop_id: UUID) -> Shop | None: ...

    def get_all(self) -> list[Shop]: ...

    def delete(self, shop_id: UUID) -> None: ...

    def max_reference_sequence(self, prefix: str) -> int:
        """Highest sequence number already used under a reference prefix."""
        ...


class ShopItemsPort(Protocol):
    def list_by_shop(self, shop_id: UUID) -> list[Item]: ...

    def delete(self, item_id: UUID) -> None: ...


class ShopReviewsPort(Protocol):
    def list_by_shop(self, shop_id: UUID) -> list[Review]: ...

    def delete(self, review_id: UUID) -> None: ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime: ...

    def local_time(self) -> time: ...
