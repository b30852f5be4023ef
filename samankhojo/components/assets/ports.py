"""
Assets component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from samankhojo.domain.entities import Asset, Festival


class AssetRepoPort(Protocol):
    """Repository interface for asset metadata."""

    def save(self, asset: Asset) -> Asset:
        """Save or update asset metadata."""
        ...

    def get_by_id(self, asset_id: UUID) -> Asset | None:
        """Get asset by ID."""
        ...

    def get_all(self) -> list[Asset]:
        """List all assets, newest first."""
        ...

    def delete(self, asset_id: UUID) -> None:
        """Delete asset metadata."""
        ...


class FileStorePort(Protocol):
    """Binary storage for asset files."""

    def save(self, name: str, data: bytes) -> str: ...

    def get(self, path: str) -> bytes: ...

    def delete(self, path: str) -> None: ...


class FestivalLookupPort(Protocol):
    """Read access to festivals, for checking link targets."""

    def get_by_id(self, festival_id: UUID) -> Festival | None: ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime: ...
