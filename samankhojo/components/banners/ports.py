"""
Banners component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from samankhojo.domain.entities import Banner


class BannerRepoPort(Protocol):
    """Repository interface for standalone banners."""

    def save(self, banner: Banner) -> Banner: ...

    def get_by_id(self, banner_id: UUID) -> Banner | None: ...

    def get_all(self) -> list[Banner]: ...

    def delete(self, banner_id: UUID) -> None: ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime: ...
