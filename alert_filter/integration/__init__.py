"""Integration with the event source and observability backends."""

from alert_filter.integration.cloudwatch import LogsBatch, decode_logs_event
from alert_filter.integration.metrics import LatencyTracker, MetricsCollector

__all__ = [
    "LogsBatch",
    "decode_logs_event",
    "LatencyTracker",
    "MetricsCollector",
]
