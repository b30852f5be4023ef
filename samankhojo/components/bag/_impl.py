"""
BagService - Per-user shopping bag.

Adding an item that is already in the bag for the same shop adds to its
quantity instead of creating a second entry.
"""

from __future__ import annotations

from samankhojo.domain.entities import Bag, BagItem

from .models import AddToBagInput, BagShopGroup, BagValidationError, BagView
from .ports import BagRepoPort, ClockPort


def group_by_shop(items: list[BagItem]) -> tuple[BagShopGroup, ...]:
    groups: dict[str, list[BagItem]] = {}
    for entry in items:
        groups.setdefault(entry.shop_id, []).append(entry)
    return tuple(
        BagShopGroup(
            shop_id=shop_id,
            shop_name=entries[0].shop_name,
            items=tuple(entries),
            total_quantity=sum(e.quantity for e in entries),
        )
        for shop_id, entries in groups.items()
    )


def build_view(user_id: str, bag: Bag | None) -> BagView:
    items = list(bag.items) if bag else []
    groups = group_by_shop(items)
    return BagView(
        user_id=user_id,
        items=tuple(items),
        groups=groups,
        total_quantity=sum(i.quantity for i in items),
        shop_count=len(groups),
    )


def _item_not_in_bag(item_id: str) -> BagValidationError:
    return BagValidationError(code="item_not_in_bag", message=f"Item {item_id} is not in the bag")


class BagService:
    def __init__(self, repo: BagRepoPort, clock: ClockPort, default_unit: str = "piece") -> None:
        self._repo = repo
        self._clock = clock
        self._default_unit = default_unit

    def get(self, user_id: str) -> BagView:
        return build_view(user_id, self._repo.get(user_id))

    def add(self, user_id: str, inp: AddToBagInput) -> tuple[BagView | None, list[BagValidationError]]:
        errors: list[BagValidationError] = []
        for field in ("item_id", "item_name", "shop_id", "shop_name"):
            if not str(getattr(inp, field) or "").strip():
                errors.append(
                    BagValidationError(code=f"{field}_required", message=f"{field} is required", field=field)
                )
        if inp.quantity < 1:
            errors.append(
                BagValidationError(code="quantity_invalid", message="Quantity must be at least 1", field="quantity")
            )
        if errors:
            return None, errors

        now = self._clock.now_utc()
        bag = self._repo.get(user_id) or Bag(user_id=user_id, created_at=now, updated_at=now)

        existing = next(
            (e for e in bag.items if e.item_id == inp.item_id and e.shop_id == inp.shop_id),
            None,
        )
        if existing:
            existing.quantity += inp.quantity
        else:
            bag.items.append(
                BagItem(
                    item_id=inp.item_id,
                    item_name=inp.item_name,
                    shop_id=inp.shop_id,
                    shop_name=inp.shop_name,
                    quantity=inp.quantity,
                    unit=inp.unit or self._default_unit,
                    price=inp.price,
                    added_at=now,
                )
            )

        bag.updated_at = now
        return build_view(user_id, self._repo.save(bag)), []

    def update_quantity(
        self, user_id: str, item_id: str, quantity: int
    ) -> tuple[BagView | None, list[BagValidationError]]:
        if quantity < 1:
            return None, [
                BagValidationError(code="quantity_invalid", message="Quantity must be at least 1", field="quantity")
            ]

        bag = self._repo.get(user_id)
        entry = next((e for e in bag.items if e.item_id == item_id), None) if bag else None
        if bag is None or entry is None:
            return None, [_item_not_in_bag(item_id)]

        entry.quantity = quantity
        bag.updated_at = self._clock.now_utc()
        return build_view(user_id, self._repo.save(bag)), []

    def remove(self, user_id: str, item_id: str) -> tuple[BagView | None, list[BagValidationError]]:
        bag = self._repo.get(user_id)
        if bag is None or not any(e.item_id == item_id for e in bag.items):
            return None, [_item_not_in_bag(item_id)]

        bag.items = [e for e in bag.items if e.item_id != item_id]
        bag.updated_at = self._clock.now_utc()
        return build_view(user_id, self._repo.save(bag)), []

    def clear(self, user_id: str) -> None:
        self._repo.delete(user_id)
