"""
Feedback component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FeedbackValidationError:
    """Feedback validation error."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class SubmitFeedbackInput:
    type: str
    category: str
    subject: str
    message: str
    rating: int | None = None
    user_id: str | None = None
    user_name: str | None = None
    user_email: str | None = None
    user_agent: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class FeedbackStats:
    total: int
    by_type: dict[str, int]
    by_category: dict[str, int]
    by_status: dict[str, int]
    by_priority: dict[str, int]
    average_rating: float
