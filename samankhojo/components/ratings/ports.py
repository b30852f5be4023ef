"""
Ratings component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from samankhojo.domain.entities import Booking, Review, Shop


class ReviewRepoPort(Protocol):
    """Repository interface for shop reviews."""

    def save(self, review: Review) -> Review: ...

    def get_by_id(self, review_id: UUID) -> Review | None: ...

    def get_by_shop_and_user(self, shop_id: UUID, user_id: str) -> Review | None: ...

    def list_by_shop(self, shop_id: UUID) -> list[Review]: ...

    def list_by_user(self, user_id: str) -> list[Review]: ...

    def delete(self, review_id: UUID) -> None: ...


class RatedShopPort(Protocol):
    """Shops whose rating aggregates are kept up to date."""

    def get_by_id(self, shop_id: UUID) -> Shop | None: ...

    def save(self, shop: Shop) -> Shop: ...


class UserBookingsPort(Protocol):
    def list_by_user(self, user_id: str) -> list[Booking]: ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime: ...
