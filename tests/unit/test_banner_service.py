from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from samankhojo.adapters.clock import FixedClock
from samankhojo.components.banners import BannerService, validate_banner_data
from samankhojo.domain.entities import Banner


class MockBannerRepo:
    def __init__(self) -> None:
        self.banners: dict[UUID, Banner] = {}

    def save(self, banner: Banner) -> Banner:
        self.banners[banner.id] = banner
        return banner

    def get_by_id(self, banner_id: UUID) -> Banner | None:
        return self.banners.get(banner_id)

    def get_all(self) -> list[Banner]:
        return list(self.banners.values())

    def delete(self, banner_id: UUID) -> None:
        self.banners.pop(banner_id, None)


@pytest.fixture
def service() -> BannerService:
    return BannerService(repo=MockBannerRepo(), clock=FixedClock(datetime(2025, 11, 1, tzinfo=UTC)))


def test_validate_banner_data():
    assert validate_banner_data({}, require_name=True)[0].code == "name_required"
    assert validate_banner_data({"position": "ceiling"})[0].code == "position_invalid"
    assert validate_banner_data({"name": "Sale", "position": "popup"}) == []


def test_create_banner(service: BannerService):
    banner, errors = service.create({"name": " Winter Sale ", "position": "navbar", "priority": 2})

    assert errors == []
    assert banner.name == "Winter Sale"
    assert banner.is_active is False
    assert banner.position == "navbar"


def test_active_sorted_by_priority_and_filtered(service: BannerService):
    service.create({"name": "Low", "is_active": True, "priority": 1})
    service.create({"name": "High", "is_active": True, "priority": 9})
    service.create({"name": "Footer", "is_active": True, "priority": 5, "position": "footer"})
    service.create({"name": "Off", "is_active": False, "priority": 100})

    assert [b.name for b in service.active()] == ["High", "Footer", "Low"]
    assert [b.name for b in service.active("hero")] == ["High", "Low"]


def test_update_and_toggle(service: BannerService):
    banner, _ = service.create({"name": "Sale"})

    updated, errors = service.update(banner.id, {"description": "Up to 50% off"})
    assert errors == []
    assert updated.description == "Up to 50% off"

    toggled, _ = service.toggle(banner.id)
    assert toggled.is_active is True


def test_update_invalid_position(service: BannerService):
    banner, _ = service.create({"name": "Sale"})
    updated, errors = service.update(banner.id, {"position": "ceiling"})
    assert updated is None
    assert errors[0].code == "position_invalid"


def test_missing_banner(service: BannerService):
    assert service.update(uuid4(), {})[1][0].code == "banner_not_found"
    assert service.toggle(uuid4())[1][0].code == "banner_not_found"
    success, errors = service.delete(uuid4())
    assert success is False
    assert errors[0].code == "banner_not_found"


def test_delete_banner(service: BannerService):
    banner, _ = service.create({"name": "Sale"})
    success, errors = service.delete(banner.id)
    assert success is True
    assert service.get_by_id(banner.id) is None


@pytest.mark.parametrize(
    "updates, code",
    [
        ({"priority": None}, "priority_invalid"),
        ({"is_active": None}, "is_active_invalid"),
        ({"style": "gold"}, "style_invalid"),
        ({"name": None}, "name_required"),
    ],
)
def test_update_rejects_bad_values(service: BannerService, updates, code):
    banner, _ = service.create({"name": "Sale", "priority": 3})

    updated, errors = service.update(banner.id, updates)

    assert updated is None
    assert errors[0].code == code
    assert service.get_by_id(banner.id).priority == 3


def test_create_reports_field_errors(service: BannerService):
    banner, errors = service.create({"name": "Sale", "priority": "top"})
    assert banner is None
    assert errors[0].code == "priority_invalid"
