"""Shop review routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from samankhojo.api.deps import get_current_user, get_rating_service
from samankhojo.api.errors import raise_for_errors
from samankhojo.components.ratings import RatingService, SubmitReviewInput
from samankhojo.domain.entities import Review, User

router = APIRouter()


class ReviewRequest(BaseModel):
    rating: int
    comment: str = Field("", max_length=1000)
    user_name: str | None = None


class RatingSummaryResponse(BaseModel):
    average_rating: float
    total_reviews: int
    distribution: dict[int, int]


class ShopReviewsResponse(BaseModel):
    reviews: list[Review]
    summary: RatingSummaryResponse
    limit: int
    offset: int
    total: int
    has_more: bool


class UserStatsResponse(BaseModel):
    total_reviews: int
    average_rating_given: float
    total_bookings: int
    shops_visited: int


@router.post("/shops/{shop_id}/reviews", response_model=Review, status_code=201)
def submit_review(
    shop_id: str,
    data: ReviewRequest,
    current_user: User = Depends(get_current_user),
    service: RatingService = Depends(get_rating_service),
) -> Review:
    """Add or replace the caller's review of a shop."""
    review, errors = service.submit(
        SubmitReviewInput(
            shop_id=shop_id,
            user_id=str(current_user.id),
            user_name=data.user_name or current_user.display_name,
            rating=data.rating,
            comment=data.comment,
        )
    )
    if review is None:
        raise_for_errors(errors)
    return review


@router.get("/shops/{shop_id}/reviews", response_model=ShopReviewsResponse)
def list_shop_reviews(
    shop_id: UUID,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: RatingService = Depends(get_rating_service),
) -> ShopReviewsResponse:
    result, errors = service.for_shop(shop_id, limit, offset)
    if result is None:
        raise_for_errors(errors)
    return ShopReviewsResponse(
        reviews=list(result.reviews),
        summary=RatingSummaryResponse(
            average_rating=result.summary.average_rating,
            total_reviews=result.summary.total_reviews,
            distribution=result.summary.distribution,
        ),
        limit=result.limit,
        offset=result.offset,
        total=result.total,
        has_more=result.has_more,
    )


@router.get("/shops/{shop_id}/reviews/mine", response_model=Review | None)
def my_review(
    shop_id: UUID,
    current_user: User = Depends(get_current_user),
    service: RatingService = Depends(get_rating_service),
) -> Review | None:
    return service.user_review(shop_id, str(current_user.id))


@router.post("/reviews/{review_id}/helpful", response_model=Review)
def mark_helpful(
    review_id: UUID,
    current_user: User = Depends(get_current_user),
    service: RatingService = Depends(get_rating_service),
) -> Review:
    review, errors = service.mark_helpful(review_id)
    if review is None:
        raise_for_errors(errors)
    return review


@router.delete("/reviews/{review_id}")
def delete_review(
    review_id: UUID,
    current_user: User = Depends(get_current_user),
    service: RatingService = Depends(get_rating_service),
) -> dict[str, str]:
    """Delete the caller's own review."""
    success, errors = service.delete(review_id, str(current_user.id))
    if not success:
        raise_for_errors(errors)
    return {"status": "deleted"}


@router.get("/reviews/mine", response_model=list[Review])
def my_reviews(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    service: RatingService = Depends(get_rating_service),
) -> list[Review]:
    return service.by_user(str(current_user.id), limit, offset)


@router.get("/reviews/mine/stats", response_model=UserStatsResponse)
def my_review_stats(
    current_user: User = Depends(get_current_user),
    service: RatingService = Depends(get_rating_service),
) -> UserStatsResponse:
    stats = service.user_stats(str(current_user.id))
    return UserStatsResponse(
        total_reviews=stats.total_reviews,
        average_rating_given=stats.average_rating_given,
        total_bookings=stats.total_bookings,
        shops_visited=stats.shops_visited,
    )
