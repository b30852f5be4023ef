"""
Analytics component - Port interfaces.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol

from samankhojo.domain.entities import Booking, Item, Review, SearchLog, Shop, User


class AnalyticsSourcePort(Protocol):
    """Read-only access to every collection the dashboard scans."""

    def shops(self) -> list[Shop]: ...

    def items(self) -> list[Item]: ...

    def bookings(self) -> list[Booking]: ...

    def reviews(self) -> list[Review]: ...

    def users(self) -> list[User]: ...

    def search_logs(self) -> list[SearchLog]: ...


class ClockPort(Protocol):
    def today_utc(self) -> date: ...
