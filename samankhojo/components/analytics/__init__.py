"""
Analytics component - Admin dashboard aggregates.
"""

from ._aggregate import daily_stats, recent_activity, top_booked_items, top_searches, top_shops
from ._impl import AnalyticsService
from .models import (
    Activity,
    DailyStat,
    Dashboard,
    TopBookedItem,
    TopSearch,
    TopShop,
    Totals,
)
from .ports import AnalyticsSourcePort

__all__ = [
    "AnalyticsService",
    "AnalyticsSourcePort",
    "Dashboard",
    "Totals",
    "DailyStat",
    "TopShop",
    "TopSearch",
    "TopBookedItem",
    "Activity",
    "daily_stats",
    "recent_activity",
    "top_booked_items",
    "top_searches",
    "top_shops",
]
