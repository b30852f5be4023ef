"""
Tests for dashboard aggregation.
"""

from datetime import UTC, date, datetime, timedelta

import pytest

from samankhojo.adapters.clock import FixedClock
from samankhojo.components.analytics import (
    AnalyticsService,
    daily_stats,
    recent_activity,
    top_booked_items,
    top_searches,
    top_shops,
)
from samankhojo.domain.entities import Booking, BookingLine, BookingShop, Review, SearchLog, Shop, User

NOW = datetime(2025, 11, 1, 6, 30, tzinfo=UTC)


def _shop(name: str, rating: float | None = None) -> Shop:
    return Shop(
        shop_name=name,
        owner_name="Owner",
        type="Grocery",
        district="Mangan",
        address="Main Road",
        phone="9800011111",
        average_rating=rating,
    )


def _booking(shop: Shop, *lines: tuple[str, int], at: datetime = NOW, user_id: str = "u1") -> Booking:
    return Booking(
        user_id=user_id,
        user_name="Sita",
        shops=[
            BookingShop(
                shop_id=str(shop.id),
                shop_name=shop.shop_name,
                items=[BookingLine(item_name=name, quantity=qty, unit="kg") for name, qty in lines],
            )
        ],
        created_at=at,
    )


@pytest.fixture
def alpha() -> Shop:
    return _shop("Alpha Store", 4.5)


@pytest.fixture
def beta() -> Shop:
    return _shop("Beta Store", 3.0)


# --- Aggregates ---


def test_daily_stats_oldest_first():
    bookings = [Booking(user_id="u1", user_name="Sita", created_at=NOW - timedelta(days=1))]
    logs = [SearchLog(query="rice", result_count=2, created_at=NOW)] * 2
    users = [User(email="a@example.com", display_name="A", password_hash="x", created_at=NOW)]

    stats = daily_stats(NOW.date(), 3, bookings, logs, users)

    assert [s.day for s in stats] == [date(2025, 10, 30), date(2025, 10, 31), date(2025, 11, 1)]
    assert stats[1].bookings == 1
    assert stats[2].searches == 2
    assert stats[2].new_users == 1
    assert stats[0].bookings == 0


def test_top_shops_by_bookings_then_rating(alpha: Shop, beta: Shop):
    gamma = _shop("Gamma Store", 5.0)
    bookings = [_booking(beta, ("Rice", 1)), _booking(beta, ("Dal", 1)), _booking(alpha, ("Rice", 1))]

    ranked = top_shops([alpha, beta, gamma], bookings, [])

    assert [s.name for s in ranked] == ["Beta Store", "Alpha Store", "Gamma Store"]
    assert ranked[0].total_bookings == 2
    assert ranked[2].average_rating == 5.0


def test_top_searches_ignores_short_queries():
    logs = [
        SearchLog(query="Rice", result_count=1),
        SearchLog(query="rice ", result_count=1),
        SearchLog(query="dal", result_count=1),
        SearchLog(query="ok", result_count=0),
    ]

    ranked = top_searches(logs)

    assert ranked[0].query == "rice"
    assert ranked[0].count == 2
    assert "ok" not in [t.query for t in ranked]


def test_top_booked_items_sums_quantities(alpha: Shop, beta: Shop):
    later = NOW + timedelta(hours=2)
    bookings = [
        _booking(alpha, ("Rice", 2), ("Dal", 1)),
        _booking(alpha, ("Rice", 3), at=later),
        _booking(beta, ("Rice", 1)),
    ]

    ranked = top_booked_items(bookings, [alpha, beta])

    assert ranked[0].item_name == "Rice"
    assert ranked[0].shop_id == str(alpha.id)
    assert ranked[0].booked_quantity == 5
    assert ranked[0].last_booked == later
    assert ranked[0].shop_name == "Alpha Store"


def test_top_booked_items_unknown_shop_uses_section_name(alpha: Shop):
    ranked = top_booked_items([_booking(alpha, ("Rice", 1))], [])
    assert ranked[0].shop_name == "Alpha Store"


def test_recent_activity_merges_and_sorts(alpha: Shop):
    booking = _booking(alpha, ("Rice", 1), at=NOW - timedelta(hours=1))
    review = Review(shop_id=alpha.id, user_id="u2", user_name="Ram", rating=4, created_at=NOW)

    activity = recent_activity([booking], [review])

    assert [a.kind for a in activity] == ["review", "booking"]
    assert activity[0].description == "Ram rated a shop 4/5"
    assert activity[1].description == "New booking at Alpha Store"
    assert activity[1].shop_id == str(alpha.id)


# --- Service ---


class MockSource:
    def __init__(self, shops, bookings) -> None:
        self._shops = shops
        self._bookings = bookings

    def shops(self):
        return self._shops

    def items(self):
        return []

    def bookings(self):
        return self._bookings

    def reviews(self):
        return []

    def users(self):
        return []

    def search_logs(self):
        return [SearchLog(query="red rice", result_count=3, created_at=NOW)]


def test_dashboard(alpha: Shop, beta: Shop):
    service = AnalyticsService(
        source=MockSource([alpha, beta], [_booking(alpha, ("Rice", 1))]),
        clock=FixedClock(NOW),
    )

    dashboard = service.dashboard(days=7)

    assert dashboard.totals.shops == 2
    assert dashboard.totals.bookings == 1
    assert len(dashboard.daily_stats) == 7
    assert dashboard.daily_stats[-1].day == NOW.date()
    assert dashboard.daily_stats[-1].searches == 1
    assert dashboard.top_shops[0].name == "Alpha Store"
    assert dashboard.top_searches[0].query == "red rice"
    assert len(dashboard.recent_activity) == 1
