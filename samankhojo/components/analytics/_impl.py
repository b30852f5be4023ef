"""
AnalyticsService - Admin dashboard.
"""

from __future__ import annotations

from ._aggregate import daily_stats, recent_activity, top_booked_items, top_searches, top_shops
from .models import Dashboard, Totals
from .ports import AnalyticsSourcePort, ClockPort


class AnalyticsService:
    def __init__(self, source: AnalyticsSourcePort, clock: ClockPort) -> None:
        self._source = source
        self._clock = clock

    def dashboard(self, days: int = 30) -> Dashboard:
        shops = self._source.shops()
        items = self._source.items()
        bookings = self._source.bookings()
        reviews = self._source.reviews()
        users = self._source.users()
        logs = self._source.search_logs()

        return Dashboard(
            totals=Totals(
                shops=len(shops),
                items=len(items),
                bookings=len(bookings),
                reviews=len(reviews),
                users=len(users),
            ),
            daily_stats=tuple(daily_stats(self._clock.today_utc(), days, bookings, logs, users)),
            top_shops=tuple(top_shops(shops, bookings, reviews)),
            top_searches=tuple(top_searches(logs)),
            top_booked_items=tuple(top_booked_items(bookings, shops)),
            recent_activity=tuple(recent_activity(bookings, reviews)),
        )
