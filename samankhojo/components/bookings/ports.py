"""
Bookings component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from samankhojo.domain.entities import Bag, Booking, Shop


class BookingRepoPort(Protocol):
    """Repository interface for bookings."""

    def save(self, booking: Booking) -> Booking: ...

    def get_by_id(self, booking_id: UUID) -> Booking | None: ...

    def list_by_user(self, user_id: str) -> list[Booking]: ...

    def get_all(self) -> list[Booking]: ...


class BagStorePort(Protocol):
    def get(self, user_id: str) -> Bag | None: ...

    def delete(self, user_id: str) -> None: ...


class ShopLookupPort(Protocol):
    def get_by_id(self, shop_id: UUID) -> Shop | None: ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime: ...
