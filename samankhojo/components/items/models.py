"""
Items component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from samankhojo.domain.entities import Item

# --- Validation Errors ---


@dataclass(frozen=True)
class ItemValidationError:
    """Item validation error."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class BulkRowError:
    """Errors for one row of a bulk upload (rows are 1-based)."""

    row: int
    errors: tuple[ItemValidationError, ...]


# --- Output Models ---


@dataclass(frozen=True)
class BulkCreateOutput:
    created: tuple[Item, ...]
    failed: tuple[BulkRowError, ...]

    @property
    def count(self) -> int:
        return len(self.created)


@dataclass(frozen=True)
class ItemSearchOutput:
    items: tuple[Item, ...]
    items_by_shop: dict[str, tuple[Item, ...]]

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def shop_count(self) -> int:
        return len(self.items_by_shop)
