"""
SearchService - Universal search over shops, items and menu items.

Scored search runs first; when it finds nothing, a plain substring
filter over the same records is used instead. Every universal search is
written to the search log.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from uuid import uuid4

from samankhojo.domain.entities import GeoPoint, Item, SearchLog, Shop
from samankhojo.domain.geo import haversine_km
from samankhojo.rules.models import SearchRules

from ._scoring import match_score, relevance, substring_filter
from .models import PopularTerm, SearchOutput, SearchQuery, SearchResult, Suggestion
from .ports import ClockPort, SearchCatalogPort, SearchLogRepoPort

logger = logging.getLogger(__name__)

SHOP_FALLBACK_FIELDS = ("shop_name", "address", "type")
ITEM_FALLBACK_FIELDS = ("name", "description", "category", "brand_name", "variety", "tags")

SUGGESTION_THRESHOLD = 0.3


class _CatalogSnapshot:
    def __init__(self, catalog: SearchCatalogPort) -> None:
        self.shops = catalog.shops()
        self.visible = {str(s.id): s for s in self.shops if not s.is_hidden}
        self.items = catalog.items()


def _shop_result(shop: Shop, score: float, distance: float | None) -> SearchResult:
    return SearchResult(
        kind="shop",
        id=str(shop.id),
        name=shop.shop_name,
        description=f"{shop.type or 'Shop'} • {shop.address}",
        shop_id=str(shop.id),
        shop_name=shop.shop_name,
        shop_address=shop.address,
        shop_phone=shop.phone,
        relevance=score,
        distance_km=distance,
        image_url=shop.image_url,
    )


def _item_result(item: Item, shop: Shop, score: float, distance: float | None) -> SearchResult:
    is_menu = item.type == "menu"
    label = item.category or ("Food" if is_menu else "Item")
    return SearchResult(
        kind="menu" if is_menu else "item",
        id=str(item.id),
        name=item.name or ("Menu Item" if is_menu else "Unknown Item"),
        description=f"{label} at {shop.shop_name}",
        shop_id=str(shop.id),
        shop_name=shop.shop_name,
        shop_address=shop.address,
        shop_phone=shop.phone,
        relevance=score,
        distance_km=distance,
        category=item.category,
        price=item.price,
        image_url=item.image_url,
    )


class SearchService:
    def __init__(
        self,
        catalog: SearchCatalogPort,
        logs: SearchLogRepoPort,
        clock: ClockPort,
        rules: SearchRules,
    ) -> None:
        self._catalog = catalog
        self._logs = logs
        self._clock = clock
        self._rules = rules

    def universal(self, query: SearchQuery) -> SearchOutput:
        text = query.text.strip()
        if len(text) < self._rules.min_query_length:
            return SearchOutput(results=(), used_fallback=False)

        snapshot = _CatalogSnapshot(self._catalog)
        origin = (
            GeoPoint(lat=query.lat, lng=query.lng)
            if query.lat is not None and query.lng is not None
            else None
        )

        def distance_to(shop: Shop) -> float | None:
            if origin and shop.location:
                return haversine_km(origin, shop.location)
            return None

        results = self._scored(snapshot, text.lower().split(), distance_to)
        used_fallback = False
        if not results:
            results = self._fallback(snapshot, text, distance_to)
            used_fallback = bool(results)

        results.sort(
            key=lambda r: (
                -r.relevance,
                r.distance_km if r.distance_km is not None else float("inf"),
            )
        )
        limited = tuple(results[: query.limit or self._rules.default_limit])

        self._logs.save(
            SearchLog(
                id=uuid4(),
                query=text,
                result_count=len(limited),
                user_id=query.user_id,
                created_at=self._clock.now_utc(),
            )
        )
        logger.debug("Search %r returned %d results (fallback=%s)", text, len(limited), used_fallback)
        return SearchOutput(results=limited, used_fallback=used_fallback)

    def _scored(
        self,
        snapshot: _CatalogSnapshot,
        keywords: list[str],
        distance_to: Callable[[Shop], float | None],
    ) -> list[SearchResult]:
        threshold = self._rules.relevance_threshold
        results: list[SearchResult] = []

        for shop in snapshot.visible.values():
            score = relevance(shop, keywords, "shop")
            if score > threshold:
                results.append(_shop_result(shop, score, distance_to(shop)))

        for item in snapshot.items:
            shop = snapshot.visible.get(str(item.shop_id))
            if shop is None:
                continue
            score = relevance(item, keywords, "menu" if item.type == "menu" else "item")
            if score > threshold:
                results.append(_item_result(item, shop, score, distance_to(shop)))

        return results

    def _fallback(
        self,
        snapshot: _CatalogSnapshot,
        text: str,
        distance_to: Callable[[Shop], float | None],
    ) -> list[SearchResult]:
        shops = substring_filter(snapshot.visible.values(), text, SHOP_FALLBACK_FIELDS)
        results = [_shop_result(s, 0.0, distance_to(s)) for s in shops]

        visible_items = [i for i in snapshot.items if str(i.shop_id) in snapshot.visible]
        for item in substring_filter(visible_items, text, ITEM_FALLBACK_FIELDS):
            shop = snapshot.visible[str(item.shop_id)]
            results.append(_item_result(item, shop, 0.0, distance_to(shop)))
        return results

    def suggestions(self, text: str) -> list[Suggestion]:
        """Autocomplete: item-side texts first, then shop names and address parts."""
        q = text.strip()
        if len(q) < self._rules.min_query_length:
            return []

        snapshot = _CatalogSnapshot(self._catalog)

        item_texts: dict[str, None] = {}
        for item in snapshot.items:
            for candidate in (item.name, item.category, *item.brand_name):
                if candidate and match_score(candidate, q) > SUGGESTION_THRESHOLD:
                    item_texts[candidate] = None

        shop_texts: dict[str, None] = {}
        for shop in snapshot.visible.values():
            if match_score(shop.shop_name, q) > SUGGESTION_THRESHOLD:
                shop_texts[shop.shop_name] = None
            if match_score(shop.address, q) > SUGGESTION_THRESHOLD:
                for part in shop.address.split(","):
                    part = part.strip()
                    if len(part) > 2 and match_score(part, q) > SUGGESTION_THRESHOLD:
                        shop_texts[part] = None

        out = [Suggestion(text=t, kind="item") for t in list(item_texts)[: self._rules.item_suggestions]]
        out += [Suggestion(text=t, kind="shop") for t in list(shop_texts)[: self._rules.shop_suggestions]]
        return out[: self._rules.max_suggestions]

    def did_you_mean(self, text: str) -> list[str]:
        q = text.strip()
        if len(q) < self._rules.min_query_length:
            return []

        found: dict[str, None] = {}
        for item in self._catalog.items():
            for candidate in (item.name, item.category):
                if candidate and match_score(candidate, q) > SUGGESTION_THRESHOLD:
                    found[candidate] = None
        return list(found)[: self._rules.did_you_mean_limit]

    def popular(self, limit: int = 10) -> list[PopularTerm]:
        """Most frequent words (longer than 2 characters) across recent searches."""
        counts: dict[str, int] = {}
        for log in self._logs.recent(self._rules.popular_window):
            for word in log.query.lower().split():
                if len(word) > 2:
                    counts[word] = counts.get(word, 0) + 1

        ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:limit]
        return [PopularTerm(term=term, count=count) for term, count in ranked]
