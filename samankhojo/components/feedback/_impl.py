"""
FeedbackService - User feedback intake and admin triage.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import cast
from uuid import UUID, uuid4

from samankhojo.domain.entities import Feedback, FeedbackStatus, FeedbackType, Priority
from samankhojo.rules.models import FeedbackRules

from .models import FeedbackStats, FeedbackValidationError, SubmitFeedbackInput
from .ports import ClockPort, FeedbackRepoPort

logger = logging.getLogger(__name__)


def priority_for(feedback_type: str, rules: FeedbackRules) -> Priority:
    return cast(Priority, rules.priority_by_type.get(feedback_type, rules.default_priority))


def validate_feedback(inp: SubmitFeedbackInput, rules: FeedbackRules) -> list[FeedbackValidationError]:
    errors: list[FeedbackValidationError] = []

    if inp.type not in rules.types:
        errors.append(
            FeedbackValidationError(
                code="type_invalid",
                message=f"Type must be one of {', '.join(rules.types)}",
                field="type",
            )
        )
    if not inp.category or not inp.category.strip():
        errors.append(
            FeedbackValidationError(code="category_required", message="Category is required", field="category")
        )
    if len((inp.subject or "").strip()) < rules.subject_min_length:
        errors.append(
            FeedbackValidationError(
                code="subject_too_short",
                message=f"Subject must be at least {rules.subject_min_length} characters",
                field="subject",
            )
        )
    if len((inp.message or "").strip()) < rules.message_min_length:
        errors.append(
            FeedbackValidationError(
                code="message_too_short",
                message=f"Message must be at least {rules.message_min_length} characters",
                field="message",
            )
        )
    if inp.rating is not None and not 1 <= inp.rating <= 5:
        errors.append(
            FeedbackValidationError(
                code="rating_out_of_range", message="Rating must be between 1 and 5", field="rating"
            )
        )

    return errors


class FeedbackService:
    def __init__(self, repo: FeedbackRepoPort, clock: ClockPort, rules: FeedbackRules) -> None:
        self._repo = repo
        self._clock = clock
        self._rules = rules

    def submit(self, inp: SubmitFeedbackInput) -> tuple[Feedback | None, list[FeedbackValidationError]]:
        errors = validate_feedback(inp, self._rules)
        if errors:
            return None, errors

        now = self._clock.now_utc()
        feedback = Feedback(
            id=uuid4(),
            user_id=inp.user_id,
            user_name=inp.user_name or "Anonymous",
            user_email=inp.user_email,
            type=cast(FeedbackType, inp.type),
            category=inp.category.strip(),
            subject=inp.subject.strip(),
            message=inp.message.strip(),
            rating=inp.rating,
            status="pending",
            priority=priority_for(inp.type, self._rules),
            user_agent=inp.user_agent,
            url=inp.url,
            created_at=now,
            updated_at=now,
        )
        saved = self._repo.save(feedback)
        logger.info("Feedback %s received (%s, priority %s)", saved.id, saved.type, saved.priority)
        return saved, []

    def for_user(self, user_id: str) -> list[Feedback]:
        return sorted(self._repo.list_by_user(user_id), key=lambda f: f.created_at, reverse=True)

    def list_all(
        self,
        status: str | None = None,
        type: str | None = None,
        category: str | None = None,
        limit: int = 50,
    ) -> list[Feedback]:
        entries = self._repo.get_all()
        if status:
            entries = [f for f in entries if f.status == status]
        if type:
            entries = [f for f in entries if f.type == type]
        if category:
            entries = [f for f in entries if f.category == category]
        entries.sort(key=lambda f: f.created_at, reverse=True)
        return entries[:limit]

    def stats(self) -> FeedbackStats:
        entries = self._repo.get_all()
        rated = [f.rating for f in entries if f.rating]
        return FeedbackStats(
            total=len(entries),
            by_type=dict(Counter(f.type for f in entries)),
            by_category=dict(Counter(f.category for f in entries)),
            by_status=dict(Counter(f.status for f in entries)),
            by_priority=dict(Counter(f.priority for f in entries)),
            average_rating=sum(rated) / len(rated) if rated else 0.0,
        )

    def update(
        self, feedback_id: UUID, status: str | None = None, admin_notes: str | None = None
    ) -> tuple[Feedback | None, list[FeedbackValidationError]]:
        feedback = self._repo.get_by_id(feedback_id)
        if not feedback:
            return None, [
                FeedbackValidationError(
                    code="feedback_not_found", message=f"Feedback with ID {feedback_id} not found"
                )
            ]

        if status is not None:
            if status not in self._rules.statuses:
                return None, [
                    FeedbackValidationError(
                        code="status_invalid",
                        message=f"Status must be one of {', '.join(self._rules.statuses)}",
                        field="status",
                    )
                ]
            feedback.status = cast(FeedbackStatus, status)
        if admin_notes:
            feedback.admin_notes = admin_notes

        feedback.updated_at = self._clock.now_utc()
        return self._repo.save(feedback), []
