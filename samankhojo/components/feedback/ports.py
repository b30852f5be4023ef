"""
Feedback component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from samankhojo.domain.entities import Feedback


class FeedbackRepoPort(Protocol):
    def save(self, feedback: Feedback) -> Feedback: ...

    def get_by_id(self, feedback_id: UUID) -> Feedback | None: ...

    def list_by_user(self, user_id: str) -> list[Feedback]: ...

    def get_all(self) -> list[Feedback]: ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime: ...
