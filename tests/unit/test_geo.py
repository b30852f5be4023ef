from datetime import time

import pytest

from samankhojo.domain.entities import GeoPoint
from samankhojo.domain.geo import haversine_km, is_open_at, parse_hhmm


def test_haversine_same_point_is_zero():
    p = GeoPoint(lat=27.5, lng=88.5)
    assert haversine_km(p, p) == 0.0


def test_haversine_known_distance():
    # Gangtok to Mangan, roughly 20 km as the crow flies
    gangtok = GeoPoint(lat=27.3389, lng=88.6065)
    mangan = GeoPoint(lat=27.5073, lng=88.5290)
    assert 18 < haversine_km(gangtok, mangan) < 25


def test_haversine_rounds_to_two_decimals():
    d = haversine_km(GeoPoint(lat=0, lng=0), GeoPoint(lat=0.01, lng=0.01))
    assert d == round(d, 2)


def test_parse_hhmm():
    assert parse_hhmm("09:30") == time(9, 30)
    with pytest.raises(ValueError):
        parse_hhmm("930")


def test_open_without_hours():
    assert is_open_at(None, None, time(3, 0)) is True
    assert is_open_at("09:00", None, time(3, 0)) is True


def test_open_during_day_hours():
    assert is_open_at("09:00", "18:00", time(12, 0)) is True
    assert is_open_at("09:00", "18:00", time(9, 0)) is True
    assert is_open_at("09:00", "18:00", time(18, 0)) is True
    assert is_open_at("09:00", "18:00", time(20, 0)) is False


def test_open_past_midnight():
    assert is_open_at("18:00", "02:00", time(23, 0)) is True
    assert is_open_at("18:00", "02:00", time(1, 0)) is True
    assert is_open_at("18:00", "02:00", time(12, 0)) is False
