"""Prometheus metrics for the triage and feedback pipelines."""

import time
from typing import Any

from prometheus_client import Counter, Histogram

from alert_filter.common.logging import LoggerMixin

# Registered once per process; every MetricsCollector shares them
TRIAGE_OUTCOMES = Counter(
    "alert_filter_triage_total",
    "Triage invocations by result",
    ["result"],
)
TRIAGE_DEGRADED_READS = Counter(
    "alert_filter_triage_degraded_reads_total",
    "Triage invocations that proceeded without feedback history",
)
INFERENCE_LATENCY = Histogram(
    "alert_filter_inference_latency_seconds",
    "Latency of a single judgment call",
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
)
FEEDBACK_OUTCOMES = Counter(
    "alert_filter_feedback_total",
    "Feedback callbacks by result",
    ["result"],
)


class MetricsCollector(LoggerMixin):
    """Record pipeline outcomes as Prometheus metrics."""

    def __init__(self, enable_prometheus: bool = True) -> None:
        """Initialize metrics collector.

        Args:
            enable_prometheus: Whether to record metrics at all
        """
        self.enable_prometheus = enable_prometheus

    def record_triage(self, result: str, degraded: bool = False) -> None:
        """Record one triage outcome.

        Args:
            result: ``notified``, ``suppressed`` or a failure kind
            degraded: Whether the feedback history read failed
        """
        if not self.enable_prometheus:
            return
        TRIAGE_OUTCOMES.labels(result=result).inc()
        if degraded:
            TRIAGE_DEGRADED_READS.inc()

    def record_feedback(self, result: str) -> None:
        """Record one feedback callback outcome (a label or a failure kind)."""
        if self.enable_prometheus:
            FEEDBACK_OUTCOMES.labels(result=result).inc()

    def observe_inference(self, seconds: float) -> None:
        if self.enable_prometheus:
            INFERENCE_LATENCY.observe(seconds)


class LatencyTracker:
    """Context manager timing a judgment call."""

    def __init__(self, metrics_collector: MetricsCollector) -> None:
        self.metrics_collector = metrics_collector
        self.start_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "LatencyTracker":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.elapsed = time.perf_counter() - self.start_time
        self.metrics_collector.observe_inference(self.elapsed)
