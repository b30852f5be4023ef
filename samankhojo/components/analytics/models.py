"""
Analytics component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal


@dataclass(frozen=True)
class DailyStat:
    day: date
    bookings: int
    searches: int
    new_users: int


@dataclass(frozen=True)
class TopShop:
    shop_id: str
    name: str
    total_bookings: int
    average_rating: float
    total_reviews: int


@dataclass(frozen=True)
class TopSearch:
    query: str
    count: int


@dataclass(frozen=True)
class TopBookedItem:
    item_name: str
    shop_id: str
    shop_name: str
    booked_quantity: int
    last_booked: datetime


@dataclass(frozen=True)
class Activity:
    kind: Literal["booking", "review"]
    description: str
    timestamp: datetime
    user_id: str
    shop_id: str | None


@dataclass(frozen=True)
class Totals:
    shops: int
    items: int
    bookings: int
    reviews: int
    users: int


@dataclass(frozen=True)
class Dashboard:
    totals: Totals
    daily_stats: tuple[DailyStat, ...]
    top_shops: tuple[TopShop, ...]
    top_searches: tuple[TopSearch, ...]
    top_booked_items: tuple[TopBookedItem, ...]
    recent_activity: tuple[Activity, ...]
