"""
Festivals component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from samankhojo.domain.entities import Asset, Festival

# --- Validation Errors ---


@dataclass(frozen=True)
class FestivalValidationError:
    """Festival validation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class CreateFestivalInput:
    """Input for creating a festival campaign."""

    name: str
    display_name: str
    start_date: date | None
    end_date: date | None
    description: str = ""
    is_active: bool = True
    style: dict[str, Any] | None = None
    asset_ids: tuple[str, ...] = ()
    priority: int = 1
    created_by: str | None = None


@dataclass(frozen=True)
class UpdateFestivalInput:
    """Partial update. Only keys present in `updates` are applied."""

    festival_id: str
    updates: dict[str, Any]


# --- Output Models ---


@dataclass(frozen=True)
class FestivalOperationOutput:
    festival: Festival | None
    errors: tuple[FestivalValidationError, ...]
    success: bool


@dataclass(frozen=True)
class FestivalListOutput:
    festivals: tuple[Festival, ...]
    total: int


@dataclass(frozen=True)
class FestivalBanners:
    """Banner assets for a festival page: hero (top) and background (center)."""

    top: Asset | None
    center: Asset | None
