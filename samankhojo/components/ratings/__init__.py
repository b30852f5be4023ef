"""
Ratings component - Shop reviews and rating aggregates.
"""

from ._impl import RatingService, rating_summary
from .models import (
    RatingSummary,
    RatingValidationError,
    ShopReviewsOutput,
    SubmitReviewInput,
    UserReviewStats,
)
from .ports import ReviewRepoPort

__all__ = [
    "RatingService",
    "ReviewRepoPort",
    "RatingSummary",
    "RatingValidationError",
    "ShopReviewsOutput",
    "SubmitReviewInput",
    "UserReviewStats",
    "rating_summary",
]
