"""
Categories component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from samankhojo.domain.entities import Category, Shop


class CategoryRepoPort(Protocol):
    """Repository interface for shop categories."""

    def save(self, category: Category) -> Category: ...

    def get_by_id(self, category_id: UUID) -> Category | None: ...

    def get_by_name(self, name: str) -> Category | None: ...

    def get_all(self) -> list[Category]: ...

    def delete(self, category_id: UUID) -> None: ...

    def reorder(self, ordered_ids: list[UUID], now: datetime) -> None: ...


class ShopListPort(Protocol):
    def get_all(self) -> list[Shop]: ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime: ...
