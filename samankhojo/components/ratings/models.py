"""
Ratings component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from samankhojo.domain.entities import Review


@dataclass(frozen=True)
class RatingValidationError:
    """Rating validation error."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class SubmitReviewInput:
    shop_id: str
    user_id: str
    user_name: str
    rating: int
    comment: str = ""


@dataclass(frozen=True)
class RatingSummary:
    average_rating: float
    total_reviews: int
    distribution: dict[int, int]


@dataclass(frozen=True)
class ShopReviewsOutput:
    reviews: tuple[Review, ...]
    summary: RatingSummary
    limit: int
    offset: int
    total: int
    has_more: bool


@dataclass(frozen=True)
class UserReviewStats:
    total_reviews: int
    average_rating_given: float
    total_bookings: int
    shops_visited: int
