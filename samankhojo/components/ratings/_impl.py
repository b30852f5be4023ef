"""
RatingService - Shop reviews and rating aggregates.

Each user has at most one review per shop; submitting again updates it.
After every submit or delete the shop's average_rating (one decimal) and
total_reviews are recomputed from scratch. A shop with no reviews has no
average.
"""

from __future__ import annotations

import logging
from uuid import UUID, uuid4

from samankhojo.domain.entities import Review
from samankhojo.rules.models import RatingRules

from .models import (
    RatingSummary,
    RatingValidationError,
    ShopReviewsOutput,
    SubmitReviewInput,
    UserReviewStats,
)
from .ports import ClockPort, RatedShopPort, ReviewRepoPort, UserBookingsPort

logger = logging.getLogger(__name__)


def rating_summary(reviews: list[Review], min_rating: int = 1, max_rating: int = 5) -> RatingSummary:
    distribution = {star: 0 for star in range(max_rating, min_rating - 1, -1)}
    if not reviews:
        return RatingSummary(average_rating=0.0, total_reviews=0, distribution=distribution)

    for review in reviews:
        star = round(review.rating)
        if star in distribution:
            distribution[star] += 1

    average = sum(r.rating for r in reviews) / len(reviews)
    return RatingSummary(
        average_rating=round(average, 1),
        total_reviews=len(reviews),
        distribution=distribution,
    )


def _shop_not_found(shop_id: UUID) -> RatingValidationError:
    return RatingValidationError(code="shop_not_found", message=f"Shop with ID {shop_id} not found")


def _review_not_found(review_id: UUID) -> RatingValidationError:
    return RatingValidationError(code="review_not_found", message=f"Review with ID {review_id} not found")


class RatingService:
    def __init__(
        self,
        repo: ReviewRepoPort,
        shops: RatedShopPort,
        bookings: UserBookingsPort,
        clock: ClockPort,
        rules: RatingRules,
    ) -> None:
        self._repo = repo
        self._shops = shops
        self._bookings = bookings
        self._clock = clock
        self._rules = rules

    def submit(self, inp: SubmitReviewInput) -> tuple[Review | None, list[RatingValidationError]]:
        """
        Add or replace the user's review of a shop.

        Returns:
            Tuple of (review, errors). Review is None if validation fails.
        """
        errors: list[RatingValidationError] = []
        if not inp.user_name or not inp.user_name.strip():
            errors.append(
                RatingValidationError(code="user_name_required", message="User name is required", field="user_name")
            )
        if not self._rules.min <= inp.rating <= self._rules.max:
            errors.append(
                RatingValidationError(
                    code="rating_out_of_range",
                    message=f"Rating must be between {self._rules.min} and {self._rules.max}",
                    field="rating",
                )
            )
        if errors:
            return None, errors

        try:
            shop_id = UUID(inp.shop_id)
        except ValueError:
            return None, [
                RatingValidationError(code="shop_not_found", message=f"Shop with ID {inp.shop_id} not found")
            ]
        if not self._shops.get_by_id(shop_id):
            return None, [_shop_not_found(shop_id)]

        now = self._clock.now_utc()
        review = self._repo.get_by_shop_and_user(shop_id, inp.user_id)
        if review:
            review.rating = inp.rating
            review.comment = inp.comment
            review.updated_at = now
        else:
            review = Review(
                id=uuid4(),
                shop_id=shop_id,
                user_id=inp.user_id,
                user_name=inp.user_name.strip(),
                rating=inp.rating,
                comment=inp.comment,
                created_at=now,
                updated_at=now,
            )

        saved = self._repo.save(review)
        self.refresh_shop_rating(shop_id)
        return saved, []

    def refresh_shop_rating(self, shop_id: UUID) -> None:
        shop = self._shops.get_by_id(shop_id)
        if not shop:
            return
        summary = rating_summary(self._repo.list_by_shop(shop_id), self._rules.min, self._rules.max)
        shop.average_rating = summary.average_rating if summary.total_reviews else None
        shop.total_reviews = summary.total_reviews
        shop.updated_at = self._clock.now_utc()
        self._shops.save(shop)

    def for_shop(
        self, shop_id: UUID, limit: int = 20, offset: int = 0
    ) -> tuple[ShopReviewsOutput | None, list[RatingValidationError]]:
        if not self._shops.get_by_id(shop_id):
            return None, [_shop_not_found(shop_id)]

        reviews = sorted(self._repo.list_by_shop(shop_id), key=lambda r: r.created_at, reverse=True)
        total = len(reviews)
        return (
            ShopReviewsOutput(
                reviews=tuple(reviews[offset : offset + limit]),
                summary=rating_summary(reviews, self._rules.min, self._rules.max),
                limit=limit,
                offset=offset,
                total=total,
                has_more=offset + limit < total,
            ),
            [],
        )

    def user_review(self, shop_id: UUID, user_id: str) -> Review | None:
        return self._repo.get_by_shop_and_user(shop_id, user_id)

    def mark_helpful(self, review_id: UUID) -> tuple[Review | None, list[RatingValidationError]]:
        review = self._repo.get_by_id(review_id)
        if not review:
            return None, [_review_not_found(review_id)]
        review.helpful_count += 1
        return self._repo.save(review), []

    def delete(self, review_id: UUID, user_id: str) -> tuple[bool, list[RatingValidationError]]:
        """Delete a review. Only its author may delete it."""
        review = self._repo.get_by_id(review_id)
        if not review:
            return False, [_review_not_found(review_id)]
        if review.user_id != user_id:
            return False, [
                RatingValidationError(code="forbidden", message="You can only delete your own reviews")
            ]

        self._repo.delete(review_id)
        self.refresh_shop_rating(review.shop_id)
        logger.info("Review %s deleted by %s", review_id, user_id)
        return True, []

    def by_user(self, user_id: str, limit: int = 20, offset: int = 0) -> list[Review]:
        reviews = sorted(self._repo.list_by_user(user_id), key=lambda r: r.created_at, reverse=True)
        return reviews[offset : offset + limit]

    def user_stats(self, user_id: str) -> UserReviewStats:
        reviews = self._repo.list_by_user(user_id)
        bookings = self._bookings.list_by_user(user_id)

        visited = {str(r.shop_id) for r in reviews}
        visited.update(section.shop_id for b in bookings for section in b.shops)

        average = round(sum(r.rating for r in reviews) / len(reviews), 1) if reviews else 0.0
        return UserReviewStats(
            total_reviews=len(reviews),
            average_rating_given=average,
            total_bookings=len(bookings),
            shops_visited=len(visited),
        )
