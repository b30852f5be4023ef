"""
Auth component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthValidationError:
    """Auth validation error."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class RegisterInput:
    email: str
    password: str
    display_name: str
    phone: str | None = None
