"""
Festivals component - Port interfaces.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol
from uuid import UUID

from samankhojo.domain.entities import Asset, Festival


class FestivalRepoPort(Protocol):
    """Repository interface for festivals."""

    def save(self, festival: Festival) -> Festival:
        """Insert a festival, or update an existing one's fields except is_active."""
        ...

    def get_by_id(self, festival_id: UUID) -> Festival | None:
        """Get festival by ID."""
        ...

    def get_by_name(self, name: str) -> Festival | None:
        """Get festival by its unique slug."""
        ...

    def get_all(self) -> list[Festival]:
        """List all festivals, newest first."""
        ...

    def delete(self, festival_id: UUID) -> None:
        """Delete festival."""
        ...

    def activate(self, festival_id: UUID, now: datetime) -> int:
        """Switch festival_id on and every other festival off atomically. Returns others changed."""
        ...

    def deactivate(self, festival_id: UUID, now: datetime) -> None:
        ...

    def deactivate_expired(self, today: date, now: datetime) -> int:
        """Switch off active festivals that ended before today. Returns rows changed."""
        ...


class AssetLinkerPort(Protocol):
    """Keeps asset festival links and usage counts in step."""

    def link(self, asset_id: UUID, festival_id: str) -> tuple[Asset | None, list]: ...

    def unlink(self, asset_id: UUID, festival_id: str) -> tuple[Asset | None, list]: ...

    def for_festival(self, festival_id: str) -> list[Asset]: ...

    def linked_to(self, festival_id: str) -> list[Asset]:
        """Every asset, whatever its status, whose festival_ids contains festival_id."""
        ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime: ...

    def today_utc(self) -> date: ...
