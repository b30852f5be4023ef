"""
Auth component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from samankhojo.domain.entities import User


class UserRepoPort(Protocol):
    def save(self, user: User) -> User: ...

    def get_by_id(self, user_id: UUID) -> User | None: ...

    def get_by_email(self, email: str) -> User | None: ...


class PasswordHasherPort(Protocol):
    def hash_password(self, password: str) -> str: ...

    def verify_password(self, plain: str, hashed: str) -> bool: ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime: ...
