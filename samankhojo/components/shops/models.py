"""
Shops component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from samankhojo.domain.entities import Item, Shop

ShopSort = Literal["distance", "rating", "name", "featured"]

# --- Validation Errors ---


@dataclass(frozen=True)
class ShopValidationError:
    """Shop validation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class ShopQuery:
    """Filters for the public shop listing."""

    search: str | None = None
    category: str | None = None
    is_open: bool | None = None
    lat: float | None = None
    lng: float | None = None
    radius_km: float = 10.0
    sort_by: ShopSort = "distance"
    include_hidden: bool = False


# --- Output Models ---


@dataclass(frozen=True)
class ShopListing:
    """A shop with its distance from the caller and current open state."""

    shop: Shop
    distance_km: float | None
    is_open: bool


@dataclass(frozen=True)
class ItemGroup:
    name: str
    count: int
    items: tuple[Item, ...]


@dataclass(frozen=True)
class ShopDetails:
    shop: Shop
    items: tuple[Item, ...]
    categories: tuple[ItemGroup, ...]
    types: tuple[ItemGroup, ...]
