"""Collector: verify chat interactions and record feedback."""

from alert_filter.services.collector.models import CollectOutcome
from alert_filter.services.collector.pipeline import FeedbackPipeline

__all__ = [
    "CollectOutcome",
    "FeedbackPipeline",
]
