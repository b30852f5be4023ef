import math
from datetime import time

from samankhojo.domain.entities import GeoPoint

EARTH_RADIUS_KM = 6371.0


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in kilometres, rounded to 2 decimals."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return round(EARTH_RADIUS_KM * c, 2)


def parse_hhmm(value: str) -> time:
    """Parse "HH:MM" into a time. Raises ValueError on bad input."""
    hours, minutes = value.split(":")
    return time(hour=int(hours), minute=int(minutes))


def is_open_at(opening: str | None, closing: str | None, at: time) -> bool:
    """
    Whether a shop is open at the given local time.

    Shops without hours are treated as open. A closing time earlier than
    the opening time wraps past midnight.
    """
    if not opening or not closing:
        return True

    open_t = parse_hhmm(opening)
    close_t = parse_hhmm(closing)

    if close_t > open_t:
        return open_t <= at <= close_t
    return at >= open_t or at <= close_t
