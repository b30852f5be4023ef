"""
Feedback component - User feedback and admin triage.
"""

from ._impl import FeedbackService, priority_for, validate_feedback
from .models import FeedbackStats, FeedbackValidationError, SubmitFeedbackInput
from .ports import FeedbackRepoPort

__all__ = [
    "FeedbackService",
    "FeedbackRepoPort",
    "FeedbackStats",
    "FeedbackValidationError",
    "SubmitFeedbackInput",
    "priority_for",
    "validate_feedback",
]
