from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from samankhojo.api.deps import (
    get_current_admin,
    get_current_user,
    get_feedback_service,
    get_optional_user,
    require_admin_budget,
)
from samankhojo.api.errors import raise_for_errors
from samankhojo.components.feedback import FeedbackService, SubmitFeedbackInput
from samankhojo.domain.entities import Feedback, FeedbackStatus, FeedbackType, User

router = APIRouter()


class FeedbackRequest(BaseModel):
    type: str
    category: str
    subject: str
    message: str
    rating: int | None = None
    user_name: str | None = None
    user_email: str | None = None
    url: str | None = None


class FeedbackUpdateRequest(BaseModel):
    status: FeedbackStatus | None = None
    admin_notes: str | None = None


class FeedbackStatsResponse(BaseModel):
    total: int
    by_type: dict[str, int]
    by_category: dict[str, int]
    by_status: dict[str, int]
    by_priority: dict[str, int]
    average_rating: float


@router.post("", response_model=Feedback, status_code=201)
def submit_feedback(
    request: Request,
    data: FeedbackRequest,
    current_user: User | None = Depends(get_optional_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> Feedback:
    """Anyone may send feedback; signed-in users are attributed."""
    feedback, errors = service.submit(
        SubmitFeedbackInput(
            type=data.type,
            category=data.category,
            subject=data.subject,
            message=data.message,
            rating=data.rating,
            user_id=str(current_user.id) if current_user else None,
            user_name=data.user_name or (current_user.display_name if current_user else None),
            user_email=data.user_email or (current_user.email if current_user else None),
            user_agent=request.headers.get("user-agent"),
            url=data.url,
        )
    )
    if feedback is None:
        raise_for_errors(errors)
    return feedback


@router.get("/mine", response_model=list[Feedback])
def my_feedback(
    current_user: User = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> list[Feedback]:
    return service.for_user(str(current_user.id))


@router.get("/stats", response_model=FeedbackStatsResponse)
def feedback_stats(
    admin: User = Depends(get_current_admin),
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackStatsResponse:
    stats = service.stats()
    return FeedbackStatsResponse(
        total=stats.total,
        by_type=stats.by_type,
        by_category=stats.by_category,
        by_status=stats.by_status,
        by_priority=stats.by_priority,
        average_rating=stats.average_rating,
    )


@router.get("", response_model=list[Feedback])
def list_feedback(
    status: FeedbackStatus | None = None,
    type: FeedbackType | None = None,
    category: str | None = None,
    limit: int = Query(50, ge=1, le=500),
    admin: User = Depends(get_current_admin),
    service: FeedbackService = Depends(get_feedback_service),
) -> list[Feedback]:
    return service.list_all(status, type, category, limit)


@router.patch("/{feedback_id}", response_model=Feedback)
def update_feedback(
    feedback_id: UUID,
    data: FeedbackUpdateRequest,
    admin: User = Depends(require_admin_budget),
    service: FeedbackService = Depends(get_feedback_service),
) -> Feedback:
    feedback, errors = service.update(feedback_id, data.status, data.admin_notes)
    if feedback is None:
        raise_for_errors(errors)
    return feedback
