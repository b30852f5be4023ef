"""
Banners component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BannerValidationError:
    """Banner validation error."""

    code: str
    message: str
    field: str | None = None
