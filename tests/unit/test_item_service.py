"""
Tests for ItemService and item normalization.
"""

from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from samankhojo.adapters.clock import FixedClock
from samankhojo.components.items import (
    ItemService,
    item_matches,
    normalize_item_data,
    parse_price_range,
    split_csv,
)
from samankhojo.domain.entities import Item, Shop
from samankhojo.rules.models import CatalogRules


class MockItemRepo:
    def __init__(self) -> None:
        self.items: dict[UUID, Item] = {}

    def save(self, item: Item) -> Item:
        self.items[item.id] = item
        return item

    def get_by_id(self, item_id: UUID) -> Item | None:
        return self.items.get(item_id)

    def list_by_shop(self, shop_id: UUID) -> list[Item]:
        return [i for i in self.items.values() if i.shop_id == shop_id]

    def get_all(self) -> list[Item]:
        return list(self.items.values())

    def delete(self, item_id: UUID) -> None:
        self.items.pop(item_id, None)

    def max_reference_sequence(self, prefix: str) -> int:
        numbers = [
            int(i.reference_id[len(prefix):])
            for i in self.items.values()
            if i.reference_id and i.reference_id.startswith(prefix)
        ]
        return max(numbers, default=0)


class MockShopLookup:
    def __init__(self, *shops: Shop) -> None:
        self.shops = {s.id: s for s in shops}

    def get_by_id(self, shop_id: UUID) -> Shop | None:
        return self.shops.get(shop_id)


@pytest.fixture
def shop() -> Shop:
    return Shop(
        shop_name="Lepcha General Store",
        owner_name="Karma",
        type="Grocery",
        district="Mangan",
        address="Main Road, Mangan",
        phone="9800011111",
    )


@pytest.fixture
def repo() -> MockItemRepo:
    return MockItemRepo()


@pytest.fixture
def service(repo, shop) -> ItemService:
    return ItemService(
        repo=repo,
        shops=MockShopLookup(shop),
        clock=FixedClock(datetime(2025, 11, 1, 6, 30, tzinfo=UTC)),
        rules=CatalogRules(
            item_types=["product", "menu", "service"],
            shop_types=["product", "menu", "service", "office"],
        ),
    )


# --- Normalization ---


def test_split_csv():
    assert split_csv("1kg, 5kg ,,10kg") == ["1kg", "5kg", "10kg"]
    assert split_csv(["a", " ", "b "]) == ["a", "b"]
    assert split_csv(None) == []


def test_parse_price_range():
    assert parse_price_range("50-120") == (50.0, 120.0)
    assert parse_price_range([10, 20]) == (10.0, 20.0)
    assert parse_price_range("") is None
    with pytest.raises(ValueError):
        parse_price_range("50")


def test_normalize_price_range_order():
    _, errors = normalize_item_data({"type": "product", "price_range": "100-50"})
    assert [e.code for e in errors] == ["price_range_order"]


def test_normalize_price_range_invalid():
    out, errors = normalize_item_data({"type": "product", "price_range": "cheap"})
    assert out["price_range"] is None
    assert errors[0].code == "price_range_invalid"


def test_normalize_product_requires_packs_when_given():
    _, errors = normalize_item_data({"type": "product", "packs": " , "})
    assert errors[0].code == "packs_required"


def test_normalize_negative_stock():
    _, errors = normalize_item_data({"type": "product", "in_stock": -2})
    assert errors[0].code == "in_stock_invalid"


def test_normalize_companies_derive_price_range_and_primary():
    out, errors = normalize_item_data(
        {
            "type": "product",
            "companies": [
                {"company_name": "", "variations": [{"size": "1kg", "price": 10}]},
                {
                    "company_name": "Tata",
                    "variations": [{"size": "1kg", "price": 30}, {"size": "5kg", "price": 140}],
                },
                {"company_name": "Aashirvaad", "variations": [{"size": "1kg", "price": 35}]},
            ],
        }
    )

    assert errors == []
    assert [c["company_name"] for c in out["companies"]] == ["Tata", "Aashirvaad"]
    assert out["price_range"] == (30.0, 140.0)
    assert out["primary_company"] == "Tata"
    assert out["availability"] is True


def test_normalize_string_price():
    out, errors = normalize_item_data({"type": "menu", "price": "45.5"})
    assert errors == []
    assert out["price"] == 45.5

    _, errors = normalize_item_data({"type": "menu", "price": "abc"})
    assert [(e.code, e.field) for e in errors] == [("price_invalid", "price")]


def test_normalize_company_price_not_a_number():
    _, errors = normalize_item_data(
        {
            "type": "product",
            "companies": [{"company_name": "Tata", "variations": [{"size": "1kg", "price": "n/a"}]}],
        }
    )
    assert [(e.code, e.field) for e in errors] == [("price_invalid", "companies")]


# --- Create ---


def test_create_item_success(service: ItemService, shop: Shop):
    item, errors = service.create(
        shop.id, {"type": "product", "name": " Basmati Rice ", "packs": "1kg,5kg", "price": 120}
    )

    assert errors == []
    assert item.reference_id == "PRD-MAN-001"
    assert item.name == "Basmati Rice"
    assert item.packs == ["1kg", "5kg"]
    assert item.shop_id == shop.id


def test_create_item_prefix_by_type(service: ItemService, shop: Shop):
    menu, _ = service.create(shop.id, {"type": "menu", "name": "Momo"})
    service_item, _ = service.create(shop.id, {"type": "service", "name": "Tailoring"})
    second_menu, _ = service.create(shop.id, {"type": "menu", "name": "Thukpa"})

    assert menu.reference_id == "MNU-MAN-001"
    assert service_item.reference_id == "SRV-MAN-001"
    assert second_menu.reference_id == "MNU-MAN-002"


def test_create_item_shop_not_found(service: ItemService):
    item, errors = service.create(uuid4(), {"type": "product", "name": "Rice"})
    assert item is None
    assert errors[0].code == "shop_not_found"


def test_create_item_validation(service: ItemService, shop: Shop):
    item, errors = service.create(shop.id, {"type": "gadget", "name": "", "price": -1})

    assert item is None
    assert {e.code for e in errors} == {"name_required", "type_invalid", "price_invalid"}


# --- Bulk ---


def test_bulk_create_reports_failed_rows(service: ItemService, shop: Shop):
    output, errors = service.bulk_create(
        shop.id,
        [
            {"type": "product", "name": "Rice", "in_stock": 10, "price": 60},
            {"type": "product", "name": "Sugar"},
            {"type": "menu", "name": "Momo"},
            {"type": "menu", "name": ""},
        ],
    )

    assert errors == []
    assert output.count == 2
    assert [f.row for f in output.failed] == [2, 4]
    assert {e.code for e in output.failed[0].errors} == {"in_stock_required", "price_required"}


def test_bulk_create_reports_malformed_rows(service: ItemService, shop: Shop):
    output, errors = service.bulk_create(
        shop.id,
        [
            {"type": "menu", "name": "Momo", "price": 80},
            {"type": "menu", "name": "Tea", "category": 5},
            {"type": "menu", "name": "Thukpa", "price": "abc"},
            {"type": "service", "name": "Delivery"},
        ],
    )

    assert errors == []
    assert [i.name for i in output.created] == ["Momo", "Delivery"]
    assert [f.row for f in output.failed] == [2, 3]
    assert output.failed[0].errors[0].code == "category_invalid"
    assert output.failed[1].errors[0].code == "price_invalid"


def test_bulk_create_requires_rows(service: ItemService, shop: Shop):
    output, errors = service.bulk_create(shop.id, [])
    assert output is None
    assert errors[0].code == "items_required"


# --- Update / Delete ---


def test_update_item_keeps_type_and_identity(service: ItemService, shop: Shop):
    item, _ = service.create(shop.id, {"type": "product", "name": "Rice"})

    updated, errors = service.update(item.id, {"price": 55.5, "variety": "Basmati, Sona"})

    assert errors == []
    assert updated.id == item.id
    assert updated.reference_id == item.reference_id
    assert updated.type == "product"
    assert updated.price == 55.5
    assert updated.variety == ["Basmati", "Sona"]


def test_update_item_does_not_reset_availability(service: ItemService, shop: Shop):
    item, _ = service.create(shop.id, {"type": "product", "name": "Rice", "availability": False})

    updated, _ = service.update(item.id, {"price": 10})

    assert updated.availability is False


def test_update_item_not_found(service: ItemService):
    updated, errors = service.update(uuid4(), {"price": 1})
    assert updated is None
    assert errors[0].code == "item_not_found"


@pytest.mark.parametrize(
    "updates, code",
    [
        ({"is_popular": None}, "is_popular_invalid"),
        ({"price": "cheap"}, "price_invalid"),
        ({"name": None}, "name_required"),
        ({"category": ["Grains"]}, "category_invalid"),
    ],
)
def test_update_item_rejects_bad_values(service: ItemService, shop: Shop, updates, code):
    item, _ = service.create(shop.id, {"type": "menu", "name": "Momo", "price": 80})

    updated, errors = service.update(item.id, updates)

    assert updated is None
    assert code in [e.code for e in errors]
    assert service.get_by_id(item.id).price == 80


def test_delete_item(service: ItemService, shop: Shop, repo: MockItemRepo):
    item, _ = service.create(shop.id, {"type": "menu", "name": "Momo"})
    success, errors = service.delete(item.id)
    assert success is True
    assert repo.items == {}


# --- Listing / Search ---


def test_list_for_shop_filters(service: ItemService, shop: Shop):
    service.create(shop.id, {"type": "product", "name": "Rice", "category": "Grains"})
    service.create(shop.id, {"type": "product", "name": "Oil", "category": "Oils", "availability": False})
    service.create(shop.id, {"type": "menu", "name": "Momo"})

    products, _ = service.list_for_shop(shop.id, item_type="product")
    grains, _ = service.list_for_shop(shop.id, category="Grains")
    available, _ = service.list_for_shop(shop.id, available_only=True)

    assert len(products) == 2
    assert [i.name for i in grains] == ["Rice"]
    assert sorted(i.name for i in available) == ["Momo", "Rice"]


def test_item_matches_lists():
    item = Item(shop_id=uuid4(), type="product", name="Flour", brand_name=["Aashirvaad"], tags=["atta"])
    assert item_matches(item, "aash")
    assert item_matches(item, "ATTA")
    assert not item_matches(item, "rice")


def test_search_all_groups_by_shop(service: ItemService, shop: Shop, repo: MockItemRepo):
    service.create(shop.id, {"type": "product", "name": "Red Rice"})
    other = Item(shop_id=uuid4(), type="product", name="Rice Flakes")
    repo.save(other)

    result = service.search_all("rice")

    assert result.count == 2
    assert result.shop_count == 2
    assert set(result.items_by_shop) == {str(shop.id), str(other.shop_id)}
