"""
Trending component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from samankhojo.domain.entities import Item


@dataclass(frozen=True)
class TrendingValidationError:
    """Trending validation error."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class TrendingPick:
    """One entry of the public trending feed. pinned marks admin-curated entries."""

    item: Item
    shop_name: str
    pinned: bool
    priority: int = 0
