"""Triage pipeline: alert → feedback history → judgment → notification."""

from alert_filter.common import Settings
from alert_filter.common.errors import (
    DegradedRead,
    FailureKind,
    InferenceUnavailable,
    MalformedJudgment,
    NotificationDeliveryError,
)
from alert_filter.common.logging import LoggerMixin
from alert_filter.feedback.models import FeedbackRecord
from alert_filter.feedback.store import FeedbackStore
from alert_filter.inference.client import InferenceClient
from alert_filter.inference.models import JudgmentRequest, JudgmentResult
from alert_filter.integration.metrics import LatencyTracker, MetricsCollector
from alert_filter.notifications.slack import SlackClient
from alert_filter.services.notifier.models import AlertEvent, NotifyOutcome

DEFAULT_HISTORY_LIMIT = 5


class TriagePipeline(LoggerMixin):
    """Decide whether an alert deserves a human and notify if so.

    Dependencies are created once per process and shared read-only by
    every invocation; a triage keeps no state of its own. Concurrent
    alerts for the same source are triaged independently, so duplicate
    deliveries can produce duplicate notifications.
    """

    def __init__(
        self,
        store: FeedbackStore,
        inference: InferenceClient,
        slack: SlackClient,
        channel_id: str,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        metrics: MetricsCollector | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            store: Feedback store (read only here)
            inference: Judgment client
            slack: Notification client
            channel_id: Channel receiving notifications
            history_limit: Most-recent feedback records used as context
            metrics: Optional metrics collector
        """
        self.store = store
        self.inference = inference
        self.slack = slack
        self.channel_id = channel_id
        self.history_limit = history_limit
        self.metrics = metrics or MetricsCollector(enable_prometheus=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TriagePipeline":
        """Build the pipeline and its clients.

        Raises:
            ConfigurationError: if a required setting is missing
        """
        settings.require("slack_channel_id")
        return cls(
            store=FeedbackStore.from_settings(settings),
            inference=InferenceClient.from_settings(settings),
            slack=SlackClient.from_settings(settings),
            channel_id=settings.slack_channel_id,
            history_limit=settings.feedback_history_limit,
            metrics=MetricsCollector(enable_prometheus=settings.metrics_enabled),
        )

    async def triage(self, event: AlertEvent) -> NotifyOutcome:
        """Triage a single alert event."""
        outcome = await self._triage(event)
        self.metrics.record_triage(outcome.result, degraded=outcome.degraded)

        self.logger.info(
            "triage_completed",
            source_key=event.source_key,
            notified=outcome.notified,
            actionable=outcome.verdict.actionable if outcome.verdict else None,
            failure=outcome.failure.value if outcome.failure else None,
            degraded=outcome.degraded,
            history_size=outcome.history_size,
        )
        return outcome

    async def _triage(self, event: AlertEvent) -> NotifyOutcome:
        outcome = NotifyOutcome(source_key=event.source_key)

        if not event.source_key.strip() or not event.text.strip():
            self.logger.warning(
                "triage_invalid_input",
                has_source_key=bool(event.source_key.strip()),
                has_text=bool(event.text.strip()),
            )
            outcome.failure = FailureKind.INVALID_INPUT
            return outcome

        history = await self._load_history(event.source_key, outcome)
        outcome.history_size = len(history)

        request = JudgmentRequest.build(event.text, event.timestamp, history)

        try:
            with LatencyTracker(self.metrics):
                verdict = await self.inference.judge(request)
        except InferenceUnavailable as e:
            # No blind retries: a missed alert beats a storm of duplicates
            self.logger.error(
                "triage_inference_unavailable",
                source_key=event.source_key,
                error=str(e),
            )
            outcome.failure = FailureKind.INFERENCE_UNAVAILABLE
            return outcome
        except MalformedJudgment as e:
            # Fail open toward notifying a human
            self.logger.warning(
                "triage_malformed_judgment",
                source_key=event.source_key,
                error=str(e),
            )
            outcome.failure = FailureKind.MALFORMED_JUDGMENT
            verdict = JudgmentResult(actionable=True, rationale="unparsable judgment; failing open")
        else:
            outcome.verdict = verdict

        if not verdict.actionable:
            return outcome

        try:
            outcome.receipt = await self.slack.post_alert(
                self.channel_id, event.source_key, event.text
            )
        except NotificationDeliveryError as e:
            self.logger.error(
                "triage_notification_failed",
                source_key=event.source_key,
                error=str(e),
            )
            outcome.failure = FailureKind.NOTIFICATION_DELIVERY_ERROR
            return outcome

        outcome.notified = True
        return outcome

    async def _load_history(self, source_key: str, outcome: NotifyOutcome) -> list[FeedbackRecord]:
        try:
            return await self.store.query(source_key, self.history_limit)
        except DegradedRead as e:
            # Never drop a real alert because the store is unavailable
            self.logger.warning(
                "triage_degraded_read",
                source_key=source_key,
                error=str(e),
            )
            outcome.degraded = True
            return []
