"""
Categories component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from samankhojo.domain.entities import Category


@dataclass(frozen=True)
class CategoryValidationError:
    """Category validation error."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class CategoryUsage:
    category: Category
    shop_count: int


@dataclass(frozen=True)
class CategoryUsageReport:
    """How shops map onto the category list. unmatched_types are shop types with no active category."""

    usage: tuple[CategoryUsage, ...]
    unmatched_types: tuple[str, ...]
