"""Notifier: triage alerts and notify a human channel."""

from alert_filter.services.notifier.models import AlertEvent, NotifyOutcome
from alert_filter.services.notifier.pipeline import TriagePipeline

__all__ = [
    "AlertEvent",
    "NotifyOutcome",
    "TriagePipeline",
]
