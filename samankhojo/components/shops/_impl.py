"""
ShopService - Shop directory.

Handles shop CRUD, reference ID assignment, the public listing
(search, open-now, distance) and the shop details view.
"""

from __future__ import annotations

import logging
import re
from typing import Any
from uuid import UUID, uuid4

from pydantic import ValidationError

from samankhojo.domain.entities import GeoPoint, Item, Shop
from samankhojo.domain.geo import haversine_km, is_open_at
from samankhojo.domain.reference_ids import district_code, generate_reference_id
from samankhojo.rules.models import CatalogRules

from .models import ItemGroup, ShopDetails, ShopListing, ShopQuery, ShopValidationError
from .ports import ClockPort, ShopItemsPort, ShopRepoPort, ShopReviewsPort

logger = logging.getLogger(__name__)

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
_NON_DIGIT = re.compile(r"\D")

UPDATABLE_FIELDS = (
    "shop_name",
    "owner_name",
    "type",
    "shop_type",
    "district",
    "address",
    "phone",
    "opening_time",
    "closing_time",
    "map_link",
    "is_featured",
    "is_verified",
    "is_hidden",
    "location",
    "image_url",
)

# --- Validation Functions ---


def _required(value: Any, field: str, label: str) -> ShopValidationError | None:
    if value is None or not str(value).strip():
        return ShopValidationError(code=f"{field}_required", message=f"{label} is required", field=field)
    if not isinstance(value, str):
        return ShopValidationError(code=f"{field}_invalid", message=f"{label} must be text", field=field)
    return None


def model_errors(exc: ValidationError) -> list[ShopValidationError]:
    """One error per failing field of a pydantic validation."""
    errors = []
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else None
        errors.append(
            ShopValidationError(code=f"{field or 'shop'}_invalid", message=err["msg"], field=field)
        )
    return errors


def validate_shop_data(
    data: dict[str, Any], rules: CatalogRules, require_all: bool = False
) -> list[ShopValidationError]:
    """Validate shop fields present in `data` (all required fields when require_all)."""
    errors: list[ShopValidationError] = []

    for field, label in (
        ("shop_name", "Shop name"),
        ("owner_name", "Owner name"),
        ("type", "Shop type"),
        ("district", "District"),
        ("address", "Address"),
        ("phone", "Phone"),
    ):
        if field in data or require_all:
            err = _required(data.get(field), field, label)
            if err:
                errors.append(err)

    name = data.get("shop_name")
    if isinstance(name, str) and len(name) > rules.shop_name_max:
        errors.append(
            ShopValidationError(
                code="shop_name_too_long",
                message=f"Shop name must be {rules.shop_name_max} characters or less",
                field="shop_name",
            )
        )

    phone = data.get("phone")
    if isinstance(phone, str) and phone and not 10 <= len(_NON_DIGIT.sub("", phone)) <= 15:
        errors.append(
            ShopValidationError(
                code="phone_invalid", message="Phone must have 10 to 15 digits", field="phone"
            )
        )

    shop_type = data.get("shop_type")
    if shop_type is not None and shop_type not in rules.shop_types:
        errors.append(
            ShopValidationError(
                code="shop_type_invalid",
                message=f"Shop type must be one of {', '.join(rules.shop_types)}",
                field="shop_type",
            )
        )

    for field in ("opening_time", "closing_time"):
        value = data.get(field)
        if value and (not isinstance(value, str) or not _HHMM.match(value)):
            errors.append(
                ShopValidationError(
                    code=f"{field}_invalid", message="Time must be in HH:MM format", field=field
                )
            )

    return errors


def group_items(items: list[Item], key: str, default: str) -> tuple[ItemGroup, ...]:
    """Group items by an attribute, keeping first-seen order of groups."""
    groups: dict[str, list[Item]] = {}
    for item in items:
        name = getattr(item, key) or default
        groups.setdefault(name, []).append(item)
    return tuple(
        ItemGroup(name=name, count=len(members), items=tuple(members))
        for name, members in groups.items()
    )


def _not_found(shop_id: UUID) -> ShopValidationError:
    return ShopValidationError(code="shop_not_found", message=f"Shop with ID {shop_id} not found")


# --- Shop Service ---


class ShopService:
    def __init__(
        self,
        repo: ShopRepoPort,
        items: ShopItemsPort,
        reviews: ShopReviewsPort,
        clock: ClockPort,
        rules: CatalogRules,
    ) -> None:
        self._repo = repo
        self._items = items
        self._reviews = reviews
        self._clock = clock
        self._rules = rules

    def get_by_id(self, shop_id: UUID) -> Shop | None:
        return self._repo.get_by_id(shop_id)

    def create(self, data: dict[str, Any]) -> tuple[Shop | None, list[ShopValidationError]]:
        """
        Create a shop and assign its reference ID.

        Returns:
            Tuple of (shop, errors). Shop is None if validation fails.
        """
        errors = validate_shop_data(data, self._rules, require_all=True)
        if errors:
            return None, errors

        district = data["district"].strip()
        prefix = f"SHP-{district_code(district)}-"
        reference_id = generate_reference_id(
            "SHP", district, self._repo.max_reference_sequence(prefix)
        )

        now = self._clock.now_utc()
        fields = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS}
        for key in ("shop_name", "owner_name", "address", "phone"):
            fields[key] = fields[key].strip()
        fields["district"] = district

        try:
            shop = Shop(id=uuid4(), reference_id=reference_id, created_at=now, updated_at=now, **fields)
        except ValidationError as e:
            return None, model_errors(e)
        saved = self._repo.save(shop)
        logger.info("Created shop %s (%s)", saved.reference_id, saved.id)
        return saved, []

    def update(
        self, shop_id: UUID, updates: dict[str, Any]
    ) -> tuple[Shop | None, list[ShopValidationError]]:
        shop = self._repo.get_by_id(shop_id)
        if not shop:
            return None, [_not_found(shop_id)]

        errors = validate_shop_data(updates, self._rules)
        if errors:
            return None, errors

        merged = {
            **shop.model_dump(),
            **{k: v for k, v in updates.items() if k in UPDATABLE_FIELDS},
            "updated_at": self._clock.now_utc(),
        }
        try:
            updated = Shop.model_validate(merged)
        except ValidationError as e:
            return None, model_errors(e)

        return self._repo.save(updated), []

    def delete(self, shop_id: UUID) -> tuple[bool, list[ShopValidationError]]:
        """Delete a shop together with its items and reviews."""
        if not self._repo.get_by_id(shop_id):
            return False, [_not_found(shop_id)]

        items = self._items.list_by_shop(shop_id)
        for item in items:
            self._items.delete(item.id)
        reviews = self._reviews.list_by_shop(shop_id)
        for review in reviews:
            self._reviews.delete(review.id)

        self._repo.delete(shop_id)
        logger.info(
            "Deleted shop %s with %d items and %d reviews", shop_id, len(items), len(reviews)
        )
        return True, []

    def list_shops(self, query: ShopQuery) -> list[ShopListing]:
        """
        Public shop listing.

        Shops without a location are kept when filtering by radius and
        sort after located shops when sorting by distance.
        """
        now_local = self._clock.local_time()
        origin = (
            GeoPoint(lat=query.lat, lng=query.lng)
            if query.lat is not None and query.lng is not None
            else None
        )

        listings: list[ShopListing] = []
        for shop in self._repo.get_all():
            if shop.is_hidden and not query.include_hidden:
                continue

            distance = haversine_km(origin, shop.location) if origin and shop.location else None
            if distance is not None and distance > query.radius_km:
                continue

            if query.search:
                term = query.search.lower()
                if not (
                    term in shop.shop_name.lower()
                    or term in shop.address.lower()
                    or term in shop.type.lower()
                ):
                    continue

            if query.category and shop.type.lower() != query.category.lower():
                continue

            open_now = is_open_at(shop.opening_time, shop.closing_time, now_local)
            if query.is_open is not None and open_now != query.is_open:
                continue

            listings.append(ShopListing(shop=shop, distance_km=distance, is_open=open_now))

        return _sort_listings(listings, query.sort_by)

    def details(
        self, shop_id: UUID, item_type: str | None = None
    ) -> tuple[ShopDetails | None, list[ShopValidationError]]:
        shop = self._repo.get_by_id(shop_id)
        if not shop:
            return None, [_not_found(shop_id)]

        items = self._items.list_by_shop(shop_id)
        if item_type:
            items = [i for i in items if i.type == item_type]

        return (
            ShopDetails(
                shop=shop,
                items=tuple(items),
                categories=group_items(items, "category", "Other"),
                types=group_items(items, "type", "product"),
            ),
            [],
        )


def _sort_listings(listings: list[ShopListing], sort_by: str) -> list[ShopListing]:
    if sort_by == "distance":
        return sorted(
            listings,
            key=lambda s: (s.distance_km is None, s.distance_km or 0.0),
        )
    if sort_by == "rating":
        return sorted(listings, key=lambda s: s.shop.average_rating or 0.0, reverse=True)
    if sort_by == "name":
        return sorted(listings, key=lambda s: s.shop.shop_name.lower())
    if sort_by == "featured":
        return sorted(listings, key=lambda s: (not s.shop.is_featured, s.shop.shop_name.lower()))
    return listings
