"""
Search component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class SearchQuery:
    text: str
    lat: float | None = None
    lng: float | None = None
    limit: int | None = None
    user_id: str | None = None


@dataclass(frozen=True)
class SearchResult:
    """One hit from universal search: a shop, a product/service item or a menu item."""

    kind: Literal["shop", "item", "menu"]
    id: str
    name: str
    description: str
    shop_id: str
    shop_name: str
    shop_address: str
    shop_phone: str
    relevance: float
    distance_km: float | None = None
    category: str | None = None
    price: float | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class SearchOutput:
    results: tuple[SearchResult, ...]
    used_fallback: bool


@dataclass(frozen=True)
class Suggestion:
    text: str
    kind: Literal["item", "shop"]


@dataclass(frozen=True)
class PopularTerm:
    term: str
    count: int
