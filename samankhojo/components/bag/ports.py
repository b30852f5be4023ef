"""
Bag component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from samankhojo.domain.entities import Bag


class BagRepoPort(Protocol):
    """Repository interface for shopping bags (one per user)."""

    def get(self, user_id: str) -> Bag | None: ...

    def save(self, bag: Bag) -> Bag: ...

    def delete(self, user_id: str) -> None: ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime: ...
