"""Feedback records, alert references and the feedback store."""

from alert_filter.feedback.models import FeedbackLabel, FeedbackRecord
from alert_filter.feedback.reference import AlertReference
from alert_filter.feedback.store import FeedbackStore

__all__ = [
    "FeedbackLabel",
    "FeedbackRecord",
    "AlertReference",
    "FeedbackStore",
]
