"""
Search component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from samankhojo.domain.entities import Item, SearchLog, Shop


class SearchCatalogPort(Protocol):
    """Read access to everything searchable."""

    def shops(self) -> list[Shop]: ...

    def items(self) -> list[Item]: ...


class SearchLogRepoPort(Protocol):
    def save(self, log: SearchLog) -> SearchLog: ...

    def recent(self, limit: int) -> list[SearchLog]: ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime: ...
