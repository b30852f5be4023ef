"""
Assets component - Data models.

Festival asset library: uploads, metadata and festival links.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from samankhojo.domain.entities import Asset, AssetCategory, AssetStatus, AssetType, LayoutPosition

# --- Validation Errors ---


@dataclass(frozen=True)
class AssetValidationError:
    """Asset validation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class UploadAssetInput:
    """Input for uploading a new asset file."""

    filename: str
    mime_type: str
    data: bytes
    type: AssetType
    category: AssetCategory = "festival"
    description: str = ""
    tags: tuple[str, ...] = ()
    festival_ids: tuple[str, ...] = ()
    is_public: bool = False
    layout_position: LayoutPosition | None = None
    created_by: str | None = None


@dataclass(frozen=True)
class SearchAssetsInput:
    """Filters and paging for the asset library."""

    type: AssetType | None = None
    category: AssetCategory | None = None
    festival_id: str | None = None
    status: AssetStatus | None = "active"
    text: str | None = None
    page: int = 1
    limit: int = 20


@dataclass(frozen=True)
class UpdateAssetInput:
    asset_id: str
    updates: dict[str, Any] = field(default_factory=dict)


# --- Output Models ---


@dataclass(frozen=True)
class AssetOperationOutput:
    """Output from asset operation."""

    asset: Asset | None
    errors: tuple[AssetValidationError, ...]
    success: bool


@dataclass(frozen=True)
class AssetSearchOutput:
    assets: tuple[Asset, ...]
    total: int
    page: int
    limit: int
    total_pages: int
    has_more: bool


@dataclass(frozen=True)
class AssetStats:
    total_assets: int
    total_size: int
    by_type: dict[str, int]
    by_category: dict[str, int]
    by_status: dict[str, int]
    recent_uploads: tuple[Asset, ...]
