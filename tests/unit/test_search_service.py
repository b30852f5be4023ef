"""
Tests for universal search, scoring helpers, suggestions and popular terms.
"""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from samankhojo.adapters.clock import FixedClock
from samankhojo.components.search import (
    SearchQuery,
    SearchService,
    levenshtein,
    match_score,
    relevance,
    substring_filter,
)
from samankhojo.domain.entities import GeoPoint, Item, SearchLog, Shop
from samankhojo.rules.models import SearchRules

# --- Mocks ---


class MockCatalog:
    def __init__(self) -> None:
        self.shop_list: list[Shop] = []
        self.item_list: list[Item] = []

    def shops(self) -> list[Shop]:
        return list(self.shop_list)

    def items(self) -> list[Item]:
        return list(self.item_list)


class MockSearchLogRepo:
    def __init__(self) -> None:
        self.logs: list[SearchLog] = []

    def save(self, log: SearchLog) -> SearchLog:
        self.logs.append(log)
        return log

    def recent(self, limit: int) -> list[SearchLog]:
        return list(reversed(self.logs))[:limit]


def _shop(name: str, shop_type: str = "Grocery", address: str = "Main Road, Mangan", **kw) -> Shop:
    return Shop(
        shop_name=name,
        owner_name="Owner",
        type=shop_type,
        district="Mangan",
        address=address,
        phone="9800011111",
        **kw,
    )


@pytest.fixture
def catalog() -> MockCatalog:
    return MockCatalog()


@pytest.fixture
def logs() -> MockSearchLogRepo:
    return MockSearchLogRepo()


@pytest.fixture
def service(catalog, logs) -> SearchService:
    return SearchService(
        catalog=catalog,
        logs=logs,
        clock=FixedClock(datetime(2025, 11, 1, 6, 30, tzinfo=UTC)),
        rules=SearchRules(),
    )


# --- Scoring helpers ---


def test_levenshtein():
    assert levenshtein("kitten", "sitting") == 3
    assert levenshtein("", "abc") == 3
    assert levenshtein("same", "same") == 0


def test_match_score_tiers():
    assert match_score("Rice", "rice") == 10.0
    assert match_score("Rice Flakes", "rice") == 8.0
    assert match_score("Brown Rice", "rice") == 6.0
    assert match_score("Basmati Rice", "rice basmati") == 5.0
    assert match_score("momos", "momoz") == pytest.approx(0.8 * 3)
    assert match_score("Oil", "sugar") == 0.0
    assert match_score(None, "rice") == 0.0


def test_relevance_exact_name_beats_substring():
    exact = _shop("Tea")
    partial = _shop("Tea Corner")
    assert relevance(exact, ["tea"], "shop") > relevance(partial, ["tea"], "shop")


def test_relevance_is_capped_and_normalized():
    shop = _shop("grocery", shop_type="grocery", address="grocery")
    assert relevance(shop, ["grocery"], "shop") == 1.0
    assert relevance(shop, [], "shop") == 0.0


def test_substring_filter_handles_lists():
    items = [
        Item(shop_id=uuid4(), type="product", name="Flour", brand_name=["Aashirvaad"]),
        Item(shop_id=uuid4(), type="product", name="Salt"),
    ]
    kept = substring_filter(items, "aash", ["name", "brand_name"])
    assert [i.name for i in kept] == ["Flour"]


# --- Universal search ---


def test_short_query_returns_nothing(service: SearchService, logs: MockSearchLogRepo):
    output = service.universal(SearchQuery(text="a"))
    assert output.results == ()
    assert logs.logs == []


def test_search_finds_shops_and_items(service: SearchService, catalog: MockCatalog, logs):
    shop = _shop("Rice Mart", shop_type="Rice Wholesale")
    catalog.shop_list.append(shop)
    catalog.item_list.append(Item(shop_id=shop.id, type="product", name="Rice", category="Grains"))
    catalog.item_list.append(
        Item(shop_id=shop.id, type="menu", name="Fried Rice", category="Rice Dishes")
    )

    output = service.universal(SearchQuery(text="rice", user_id="u1"))

    kinds = {r.kind for r in output.results}
    assert kinds == {"shop", "item", "menu"}
    assert output.used_fallback is False
    assert output.results[0].kind == "shop"
    assert [r.relevance for r in output.results] == sorted(
        (r.relevance for r in output.results), reverse=True
    )
    assert logs.logs[0].query == "rice"
    assert logs.logs[0].result_count == len(output.results)
    assert logs.logs[0].user_id == "u1"


def test_search_skips_hidden_shops_and_their_items(service: SearchService, catalog: MockCatalog):
    hidden = _shop("Rice Depot", is_hidden=True)
    catalog.shop_list.append(hidden)
    catalog.item_list.append(Item(shop_id=hidden.id, type="product", name="Rice"))

    output = service.universal(SearchQuery(text="rice"))

    assert output.results == ()


def test_search_falls_back_to_substring(service: SearchService, catalog: MockCatalog):
    """A weak match in a low-weight field is found only by the fallback filter."""
    shop = _shop("Karma Store", address="Near Monastery Gate, Mangan")
    catalog.shop_list.append(shop)

    output = service.universal(SearchQuery(text="monastery"))

    assert output.used_fallback is True
    assert [r.name for r in output.results] == ["Karma Store"]
    assert output.results[0].relevance == 0.0


def test_search_distance_and_limit(service: SearchService, catalog: MockCatalog):
    near = _shop("Tea House", location=GeoPoint(lat=27.5073, lng=88.5290))
    far = _shop("Tea House", location=GeoPoint(lat=27.3389, lng=88.6065))
    catalog.shop_list.extend([far, near])

    output = service.universal(SearchQuery(text="tea house", lat=27.5, lng=88.53, limit=1))

    assert len(output.results) == 1
    assert output.results[0].id == str(near.id)
    assert output.results[0].distance_km is not None


# --- Suggestions ---


def test_suggestions_items_before_shops(service: SearchService, catalog: MockCatalog):
    shop = _shop("Momo Palace", address="MG Marg, Gangtok")
    catalog.shop_list.append(shop)
    catalog.item_list.append(Item(shop_id=shop.id, type="menu", name="Momo", category="Snacks"))

    suggestions = service.suggestions("momo")

    assert suggestions[0].text == "Momo"
    assert suggestions[0].kind == "item"
    assert ("Momo Palace", "shop") in [(s.text, s.kind) for s in suggestions]


def test_suggestions_include_address_parts(service: SearchService, catalog: MockCatalog):
    catalog.shop_list.append(_shop("Karma Store", address="Lower Market, Gangtok"))

    suggestions = service.suggestions("gangtok")

    assert [s.text for s in suggestions] == ["Gangtok"]


def test_did_you_mean_fuzzy(service: SearchService, catalog: MockCatalog):
    catalog.item_list.append(Item(shop_id=uuid4(), type="menu", name="momos"))

    assert service.did_you_mean("momoz") == ["momos"]
    assert service.did_you_mean("x") == []


# --- Popular terms ---


def test_popular_counts_words(service: SearchService, logs: MockSearchLogRepo):
    for query in ("red rice", "rice", "Rice of Gangtok"):
        logs.save(SearchLog(query=query, result_count=1))

    popular = service.popular(limit=2)

    assert popular[0].term == "rice"
    assert popular[0].count == 3
    assert len(popular) == 2
    assert "of" not in [p.term for p in service.popular()]
