"""
ItemService - Shop catalog for products, menu items and services.

Incoming item data is normalized before validation:
- comma-separated strings become lists (variety, packs, brand_name)
- price_range accepts "min-max" and must have min < max
- companies without a name or variations are dropped; the remaining ones
  supply price_range (when absent) and primary_company
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID, uuid4

from pydantic import ValidationError

from samankhojo.domain.entities import Item
from samankhojo.domain.reference_ids import district_code, generate_reference_id, prefix_for_item_type
from samankhojo.rules.models import CatalogRules

from .models import BulkCreateOutput, BulkRowError, ItemSearchOutput, ItemValidationError
from .ports import ClockPort, ItemRepoPort, ShopLookupPort

logger = logging.getLogger(__name__)

LIST_FIELDS = ("variety", "packs", "brand_name", "tags", "highlights")

# --- Normalization ---


def split_csv(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if not isinstance(value, (list, tuple)):
        value = [value]
    return [str(v).strip() for v in value if str(v).strip()]


def parse_price(value: Any) -> float:
    """Coerce a price to float. Raises ValueError for booleans, blanks and non-numbers."""
    if isinstance(value, bool) or value is None or value == "":
        raise ValueError(f"Invalid price: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid price: {value!r}") from e


def parse_price_range(value: Any) -> tuple[float, float] | None:
    """Parse "min-max" or a two-element sequence. Raises ValueError when malformed."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        parts = value.split("-")
        if len(parts) != 2:
            raise ValueError('Invalid price range format. Use "min-max"')
        low, high = float(parts[0].strip()), float(parts[1].strip())
    else:
        low, high = (float(v) for v in value)
    return low, high


def company_price_range(companies: list[dict[str, Any]]) -> tuple[float, float] | None:
    """Lowest and highest variation price. Raises ValueError on a non-numeric price."""
    prices = [
        parse_price(v["price"])
        for company in companies
        for v in company.get("variations", [])
        if isinstance(v, dict) and v.get("price")
    ]
    if not prices:
        return None
    return min(prices), max(prices)


def normalize_item_data(data: dict[str, Any]) -> tuple[dict[str, Any], list[ItemValidationError]]:
    """
    Normalize raw item fields.

    Returns:
        Tuple of (normalized data, errors).
    """
    out = dict(data)
    errors: list[ItemValidationError] = []

    for key in LIST_FIELDS:
        if key in out:
            out[key] = split_csv(out[key])

    if out.get("type") == "product" and "packs" in data and not out["packs"]:
        errors.append(
            ItemValidationError(
                code="packs_required",
                message="Products must have at least one pack size",
                field="packs",
            )
        )

    if "price_range" in out:
        try:
            out["price_range"] = parse_price_range(out["price_range"])
        except (TypeError, ValueError):
            errors.append(
                ItemValidationError(
                    code="price_range_invalid",
                    message='Invalid price range format. Use "min-max"',
                    field="price_range",
                )
            )
            out["price_range"] = None
        else:
            price_range = out["price_range"]
            if price_range and price_range[0] >= price_range[1]:
                errors.append(
                    ItemValidationError(
                        code="price_range_order",
                        message="Price range minimum must be less than maximum",
                        field="price_range",
                    )
                )

    if out.get("type") == "product" and out.get("in_stock") is not None:
        try:
            stock = float(out["in_stock"])
        except (TypeError, ValueError):
            stock = -1.0
        if stock < 0:
            errors.append(
                ItemValidationError(
                    code="in_stock_invalid", message="Stock quantity must be >= 0", field="in_stock"
                )
            )
        else:
            out["in_stock"] = stock

    if out.get("price") is not None:
        try:
            out["price"] = parse_price(out["price"])
        except ValueError:
            errors.append(
                ItemValidationError(code="price_invalid", message="Price must be a number", field="price")
            )
            out["price"] = None

    if "companies" in out and out["companies"] is not None:
        raw = out["companies"] if isinstance(out["companies"], list) else []
        companies = [
            c
            for c in raw
            if isinstance(c, dict) and c.get("company_name") and c.get("variations")
        ]
        out["companies"] = companies
        try:
            derived = company_price_range(companies)
        except ValueError:
            errors.append(
                ItemValidationError(
                    code="price_invalid",
                    message="Company variation prices must be numbers",
                    field="companies",
                )
            )
            derived = None
        if derived and not out.get("price_range"):
            out["price_range"] = derived
        out["primary_company"] = companies[0]["company_name"] if companies else None

    if out.get("availability") is None:
        out["availability"] = True

    return out, errors


def validate_item_data(
    data: dict[str, Any], rules: CatalogRules, require_all: bool = False
) -> list[ItemValidationError]:
    errors: list[ItemValidationError] = []

    if "name" in data or require_all:
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            errors.append(
                ItemValidationError(code="name_required", message="Item name is required", field="name")
            )
        elif len(name) > rules.item_name_max:
            errors.append(
                ItemValidationError(
                    code="name_too_long",
                    message=f"Item name must be {rules.item_name_max} characters or less",
                    field="name",
                )
            )

    if "type" in data or require_all:
        if data.get("type") not in rules.item_types:
            errors.append(
                ItemValidationError(
                    code="type_invalid", message="Valid item type is required", field="type"
                )
            )

    description = data.get("description")
    if description is not None and not isinstance(description, str):
        errors.append(
            ItemValidationError(
                code="description_invalid", message="Description must be text", field="description"
            )
        )
    elif description and len(description) > rules.description_max:
        errors.append(
            ItemValidationError(
                code="description_too_long",
                message=f"Description must be {rules.description_max} characters or less",
                field="description",
            )
        )

    price = data.get("price")
    if price is not None and (isinstance(price, bool) or not isinstance(price, (int, float))):
        errors.append(
            ItemValidationError(code="price_invalid", message="Price must be a number", field="price")
        )
    elif price is not None and price < 0:
        errors.append(
            ItemValidationError(code="price_invalid", message="Price must be >= 0", field="price")
        )

    return errors


def item_matches(item: Item, query: str) -> bool:
    """Case-insensitive substring match over the searchable item fields."""
    q = query.lower()
    texts = [item.name, item.description, item.category]
    texts.extend(item.brand_name)
    texts.extend(item.variety)
    texts.extend(item.packs)
    texts.extend(item.tags)
    return any(t and q in t.lower() for t in texts)


def model_errors(exc: ValidationError) -> list[ItemValidationError]:
    """One error per failing field of a pydantic validation."""
    errors = []
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else None
        errors.append(
            ItemValidationError(code=f"{field or 'item'}_invalid", message=err["msg"], field=field)
        )
    return errors


def _shop_not_found(shop_id: UUID) -> ItemValidationError:
    return ItemValidationError(code="shop_not_found", message=f"Shop with ID {shop_id} not found")


def _item_not_found(item_id: UUID) -> ItemValidationError:
    return ItemValidationError(code="item_not_found", message=f"Item with ID {item_id} not found")


# --- Item Service ---


class ItemService:
    def __init__(
        self,
        repo: ItemRepoPort,
        shops: ShopLookupPort,
        clock: ClockPort,
        rules: CatalogRules,
    ) -> None:
        self._repo = repo
        self._shops = shops
        self._clock = clock
        self._rules = rules

    def get_by_id(self, item_id: UUID) -> Item | None:
        return self._repo.get_by_id(item_id)

    def create(
        self, shop_id: UUID, data: dict[str, Any]
    ) -> tuple[Item | None, list[ItemValidationError]]:
        """
        Add an item to a shop.

        Returns:
            Tuple of (item, errors). Item is None if validation fails.
        """
        shop = self._shops.get_by_id(shop_id)
        if not shop:
            return None, [_shop_not_found(shop_id)]

        normalized, errors = normalize_item_data(data)
        errors += validate_item_data(normalized, self._rules, require_all=True)
        if errors:
            return None, errors

        item_type = normalized["type"]
        prefix = prefix_for_item_type(item_type)
        reference_id = generate_reference_id(
            prefix,
            shop.district,
            self._repo.max_reference_sequence(f"{prefix}-{district_code(shop.district)}-"),
        )

        now = self._clock.now_utc()
        fields = {k: v for k, v in normalized.items() if k in Item.model_fields}
        for key in ("id", "shop_id", "reference_id", "created_at", "updated_at"):
            fields.pop(key, None)
        fields["name"] = str(fields["name"]).strip()

        try:
            item = Item.model_validate(
                {
                    **fields,
                    "id": uuid4(),
                    "shop_id": shop_id,
                    "reference_id": reference_id,
                    "created_at": now,
                    "updated_at": now,
                }
            )
        except ValidationError as e:
            return None, model_errors(e)
        saved = self._repo.save(item)
        logger.info("Added %s %s to shop %s", saved.type, saved.reference_id, shop_id)
        return saved, []

    def bulk_create(self, shop_id: UUID, rows: list[dict[str, Any]]) -> tuple[
        BulkCreateOutput | None, list[ItemValidationError]
    ]:
        """Create many items; valid rows are saved and failures reported per row."""
        if not self._shops.get_by_id(shop_id):
            return None, [_shop_not_found(shop_id)]
        if not rows:
            return None, [
                ItemValidationError(code="items_required", message="Items array is required", field="items")
            ]

        created: list[Item] = []
        failed: list[BulkRowError] = []
        for index, row in enumerate(rows, start=1):
            row_errors = self._bulk_row_errors(row)
            if not row_errors:
                item, row_errors = self.create(shop_id, row)
                if item:
                    created.append(item)
                    continue
            failed.append(BulkRowError(row=index, errors=tuple(row_errors)))

        logger.info("Bulk upload for shop %s: %d created, %d failed", shop_id, len(created), len(failed))
        return BulkCreateOutput(created=tuple(created), failed=tuple(failed)), []

    def _bulk_row_errors(self, row: dict[str, Any]) -> list[ItemValidationError]:
        if row.get("type") != "product":
            return []
        errors: list[ItemValidationError] = []
        if row.get("in_stock") is None:
            errors.append(
                ItemValidationError(
                    code="in_stock_required", message="Stock is required for products", field="in_stock"
                )
            )
        if not row.get("price_range") and row.get("price") is None:
            errors.append(
                ItemValidationError(
                    code="price_required",
                    message="Price or price range is required for products",
                    field="price",
                )
            )
        return errors

    def update(
        self, item_id: UUID, updates: dict[str, Any]
    ) -> tuple[Item | None, list[ItemValidationError]]:
        item = self._repo.get_by_id(item_id)
        if not item:
            return None, [_item_not_found(item_id)]

        normalized, errors = normalize_item_data({"type": item.type, **updates})
        if "type" not in updates:
            normalized.pop("type")
        if "availability" not in updates:
            normalized.pop("availability")
        errors += validate_item_data(normalized, self._rules)
        if errors:
            return None, errors

        for key in ("id", "shop_id", "reference_id", "created_at", "updated_at"):
            normalized.pop(key, None)
        merged = {
            **item.model_dump(),
            **{k: v for k, v in normalized.items() if k in Item.model_fields},
            "updated_at": self._clock.now_utc(),
        }
        try:
            updated = Item.model_validate(merged)
        except ValidationError as e:
            return None, model_errors(e)
        return self._repo.save(updated), []

    def delete(self, item_id: UUID) -> tuple[bool, list[ItemValidationError]]:
        if not self._repo.get_by_id(item_id):
            return False, [_item_not_found(item_id)]
        self._repo.delete(item_id)
        return True, []

    def list_for_shop(
        self,
        shop_id: UUID,
        item_type: str | None = None,
        category: str | None = None,
        available_only: bool = False,
    ) -> tuple[list[Item] | None, list[ItemValidationError]]:
        if not self._shops.get_by_id(shop_id):
            return None, [_shop_not_found(shop_id)]

        items = self._repo.list_by_shop(shop_id)
        if item_type:
            items = [i for i in items if i.type == item_type]
        if category:
            items = [i for i in items if i.category == category]
        if available_only:
            items = [i for i in items if i.availability]
        return items, []

    def search_in_shop(
        self, shop_id: UUID, query: str, item_type: str | None = None
    ) -> tuple[list[Item] | None, list[ItemValidationError]]:
        items, errors = self.list_for_shop(shop_id, item_type=item_type)
        if items is None:
            return None, errors
        return [i for i in items if item_matches(i, query)], []

    def search_all(self, query: str, item_type: str | None = None) -> ItemSearchOutput:
        items = [
            i
            for i in self._repo.get_all()
            if (not item_type or i.type == item_type) and item_matches(i, query)
        ]
        by_shop: dict[str, list[Item]] = {}
        for item in items:
            by_shop.setdefault(str(item.shop_id), []).append(item)
        return ItemSearchOutput(
            items=tuple(items),
            items_by_shop={k: tuple(v) for k, v in by_shop.items()},
        )
