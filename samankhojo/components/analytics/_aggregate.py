"""
Dashboard aggregations.

Every function is a linear scan over in-memory lists; all days are UTC.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from datetime import date, timedelta

from samankhojo.domain.entities import Booking, Review, SearchLog, Shop, User

from .models import Activity, DailyStat, TopBookedItem, TopSearch, TopShop


def daily_stats(
    today: date,
    days: int,
    bookings: Sequence[Booking],
    logs: Sequence[SearchLog],
    users: Sequence[User],
) -> list[DailyStat]:
    """Counts per day for the last `days` days, oldest first."""
    booking_days = Counter(b.created_at.date() for b in bookings)
    search_days = Counter(log.created_at.date() for log in logs)
    user_days = Counter(u.created_at.date() for u in users)

    stats = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        stats.append(
            DailyStat(
                day=day,
                bookings=booking_days[day],
                searches=search_days[day],
                new_users=user_days[day],
            )
        )
    return stats


def top_shops(
    shops: Sequence[Shop],
    bookings: Sequence[Booking],
    reviews: Sequence[Review],
    limit: int = 10,
) -> list[TopShop]:
    booking_counts = Counter(section.shop_id for b in bookings for section in b.shops)
    review_counts = Counter(str(r.shop_id) for r in reviews)

    ranked = [
        TopShop(
            shop_id=str(shop.id),
            name=shop.shop_name,
            total_bookings=booking_counts[str(shop.id)],
            average_rating=shop.average_rating or 0.0,
            total_reviews=review_counts[str(shop.id)],
        )
        for shop in shops
    ]
    ranked.sort(key=lambda s: (s.total_bookings, s.average_rating), reverse=True)
    return ranked[:limit]


def top_searches(logs: Sequence[SearchLog], limit: int = 10) -> list[TopSearch]:
    counts: Counter[str] = Counter()
    for log in logs:
        query = log.query.lower().strip()
        if len(query) > 2:
            counts[query] += 1
    return [TopSearch(query=q, count=c) for q, c in counts.most_common(limit)]


def top_booked_items(
    bookings: Sequence[Booking], shops: Sequence[Shop], limit: int = 10
) -> list[TopBookedItem]:
    """Item quantities summed across every booking section, keyed by item name and shop."""
    names = {str(s.id): s.shop_name for s in shops}
    totals: dict[tuple[str, str], int] = {}
    last_seen: dict[tuple[str, str], Booking] = {}
    section_names: dict[str, str] = {}

    for booking in bookings:
        for section in booking.shops:
            section_names.setdefault(section.shop_id, section.shop_name)
            for line in section.items:
                key = (line.item_name, section.shop_id)
                totals[key] = totals.get(key, 0) + line.quantity
                previous = last_seen.get(key)
                if previous is None or booking.created_at > previous.created_at:
                    last_seen[key] = booking

    ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)[:limit]
    return [
        TopBookedItem(
            item_name=item_name,
            shop_id=shop_id,
            shop_name=names.get(shop_id) or section_names.get(shop_id, "Unknown Shop"),
            booked_quantity=quantity,
            last_booked=last_seen[(item_name, shop_id)].created_at,
        )
        for (item_name, shop_id), quantity in ranked
    ]


def recent_activity(
    bookings: Sequence[Booking], reviews: Sequence[Review], limit: int = 10
) -> list[Activity]:
    activity: list[Activity] = []
    for booking in bookings:
        shop_names = ", ".join(s.shop_name for s in booking.shops) or "unknown shop"
        activity.append(
            Activity(
                kind="booking",
                description=f"New booking at {shop_names}",
                timestamp=booking.created_at,
                user_id=booking.user_id,
                shop_id=booking.shops[0].shop_id if booking.shops else None,
            )
        )
    for review in reviews:
        activity.append(
            Activity(
                kind="review",
                description=f"{review.user_name} rated a shop {review.rating}/5",
                timestamp=review.created_at,
                user_id=review.user_id,
                shop_id=str(review.shop_id),
            )
        )
    activity.sort(key=lambda a: a.timestamp, reverse=True)
    return activity[:limit]
