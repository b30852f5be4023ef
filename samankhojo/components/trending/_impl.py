"""
TrendingService - Admin-pinned and popular in-stock items.

The public feed lists active pinned entries first (priority, then newest)
and fills the remaining slots with orderable items ranked by popularity
and the rating of their shop. Out-of-stock items never appear.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID, uuid4

from samankhojo.domain.entities import Item, Shop, TrendingItem
from samankhojo.rules.models import TrendingRules

from .models import TrendingPick, TrendingValidationError
from .ports import ClockPort, ItemLookupPort, ShopLookupPort, TrendingRepoPort

logger = logging.getLogger(__name__)


def is_orderable(item: Item) -> bool:
    return item.availability and (item.in_stock is None or item.in_stock > 0)


def _matches_category(item: Item, category: str | None) -> bool:
    if not category or category.lower() == "all":
        return True
    return (item.category or "").lower() == category.lower()


def _not_found(entry_id: UUID) -> TrendingValidationError:
    return TrendingValidationError(
        code="trending_not_found", message=f"Trending entry with ID {entry_id} not found"
    )


def _check_priority(value: Any) -> list[TrendingValidationError]:
    if isinstance(value, bool) or not isinstance(value, int):
        return [
            TrendingValidationError(code="priority_invalid", message="Priority must be an integer", field="priority")
        ]
    return []


def _check_active(value: Any) -> list[TrendingValidationError]:
    if not isinstance(value, bool):
        return [
            TrendingValidationError(
                code="is_active_invalid", message="is_active must be true or false", field="is_active"
            )
        ]
    return []


class TrendingService:
    def __init__(
        self,
        repo: TrendingRepoPort,
        items: ItemLookupPort,
        shops: ShopLookupPort,
        clock: ClockPort,
        rules: TrendingRules,
    ) -> None:
        self._repo = repo
        self._items = items
        self._shops = shops
        self._clock = clock
        self._rules = rules

    def get_all(self) -> list[TrendingItem]:
        return self._repo.get_all()

    def pin(self, data: dict[str, Any]) -> tuple[TrendingItem | None, list[TrendingValidationError]]:
        """Pin an item to the trending list. Names are copied from the item and its shop."""
        try:
            item_id = UUID(str(data.get("item_id")))
        except ValueError:
            return None, [
                TrendingValidationError(code="item_id_invalid", message="A valid item_id is required", field="item_id")
            ]

        priority = data.get("priority", self._rules.default_priority)
        is_active = data.get("is_active", True)
        errors = _check_priority(priority) + _check_active(is_active)
        if errors:
            return None, errors

        item = self._items.get_by_id(item_id)
        if not item:
            return None, [TrendingValidationError(code="item_not_found", message=f"Item with ID {item_id} not found")]
        if self._repo.get_by_item(item_id):
            return None, [
                TrendingValidationError(
                    code="trending_duplicate", message="Item is already trending", field="item_id"
                )
            ]

        shop = self._shops.get_by_id(item.shop_id)
        now = self._clock.now_utc()
        entry = self._repo.save(
            TrendingItem(
                id=uuid4(),
                item_id=item.id,
                shop_id=item.shop_id,
                item_name=item.name or "",
                shop_name=shop.shop_name if shop else "",
                category=item.category,
                image_url=item.image_url,
                priority=priority,
                is_active=is_active,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info("Pinned item %s as trending (priority %d)", item.id, priority)
        return entry, []

    def update(
        self, entry_id: UUID, updates: dict[str, Any]
    ) -> tuple[TrendingItem | None, list[TrendingValidationError]]:
        entry = self._repo.get_by_id(entry_id)
        if not entry:
            return None, [_not_found(entry_id)]

        errors: list[TrendingValidationError] = []
        if "priority" in updates:
            errors += _check_priority(updates["priority"])
        if "is_active" in updates:
            errors += _check_active(updates["is_active"])
        if errors:
            return None, errors

        changes = {k: updates[k] for k in ("priority", "is_active") if k in updates}
        changes["updated_at"] = self._clock.now_utc()
        return self._repo.save(entry.model_copy(update=changes)), []

    def toggle(self, entry_id: UUID) -> tuple[TrendingItem | None, list[TrendingValidationError]]:
        entry = self._repo.get_by_id(entry_id)
        if not entry:
            return None, [_not_found(entry_id)]
        return self.update(entry_id, {"is_active": not entry.is_active})

    def unpin(self, entry_id: UUID) -> tuple[bool, list[TrendingValidationError]]:
        if not self._repo.get_by_id(entry_id):
            return False, [_not_found(entry_id)]
        self._repo.delete(entry_id)
        return True, []

    def feed(
        self, category: str | None = None, limit: int | None = None
    ) -> tuple[list[TrendingPick] | None, list[TrendingValidationError]]:
        limit = self._rules.default_limit if limit is None else limit
        if limit < 1 or limit > self._rules.max_limit:
            return None, [
                TrendingValidationError(
                    code="limit_invalid",
                    message=f"Limit must be between 1 and {self._rules.max_limit}",
                    field="limit",
                )
            ]

        shops: dict[UUID, Shop | None] = {}

        def shop_for(item: Item) -> Shop | None:
            if item.shop_id not in shops:
                shops[item.shop_id] = self._shops.get_by_id(item.shop_id)
            return shops[item.shop_id]

        def visible(item: Item) -> bool:
            shop = shop_for(item)
            return shop is not None and not shop.is_hidden

        picks: list[TrendingPick] = []
        seen: set[UUID] = set()
        for entry in self._repo.get_all():
            if not entry.is_active:
                continue
            item = self._items.get_by_id(entry.item_id)
            if item is None or not is_orderable(item) or not _matches_category(item, category):
                continue
            if not visible(item):
                continue
            shop = shop_for(item)
            picks.append(
                TrendingPick(
                    item=item,
                    shop_name=shop.shop_name if shop else entry.shop_name,
                    pinned=True,
                    priority=entry.priority,
                )
            )
            seen.add(item.id)
            if len(picks) >= limit:
                return picks, []

        candidates = [
            i
            for i in self._items.get_all()
            if i.id not in seen and is_orderable(i) and _matches_category(i, category) and visible(i)
        ]

        def popularity(item: Item) -> tuple[Any, ...]:
            shop = shop_for(item)
            rating = shop.average_rating if shop and shop.average_rating is not None else 0.0
            reviews = shop.total_reviews if shop else 0
            return (not item.is_popular, not item.is_featured, -rating, -reviews, (item.name or "").lower())

        for item in sorted(candidates, key=popularity)[: limit - len(picks)]:
            shop = shop_for(item)
            picks.append(TrendingPick(item=item, shop_name=shop.shop_name if shop else "", pinned=False))
        return picks, []
