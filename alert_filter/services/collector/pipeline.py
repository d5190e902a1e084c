"""Feedback pipeline: signed callback → verification → feedback record."""

from collections.abc import Mapping

from alert_filter.common import Settings
from alert_filter.common.errors import (
    AlertFilterError,
    FailureKind,
    NotificationDeliveryError,
    PersistenceError,
)
from alert_filter.common.logging import LoggerMixin
from alert_filter.feedback.models import FeedbackRecord
from alert_filter.feedback.store import FeedbackStore
from alert_filter.integration.metrics import MetricsCollector
from alert_filter.notifications.slack import SlackClient
from alert_filter.services.collector.models import CollectOutcome
from alert_filter.services.collector.payloads import (
    Interaction,
    InteractionKind,
    parse_interaction,
)
from alert_filter.services.collector.signature import (
    DEFAULT_TOLERANCE_SECONDS,
    verify_request,
)


class FeedbackPipeline(LoggerMixin):
    """Turn verified chat interactions into feedback records.

    Each accepted reaction appends a new record with a fresh id, so a
    redelivered callback yields a duplicate record rather than an update.
    """

    def __init__(
        self,
        store: FeedbackStore,
        slack: SlackClient,
        signing_secret: str,
        tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
        metrics: MetricsCollector | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            store: Feedback store (append only here)
            slack: Chat client for modal and message updates
            signing_secret: Pre-shared request signing secret
            tolerance_seconds: Freshness window for callback timestamps
            metrics: Optional metrics collector
        """
        self.store = store
        self.slack = slack
        self._signing_secret = signing_secret
        self.tolerance_seconds = tolerance_seconds
        self.metrics = metrics or MetricsCollector(enable_prometheus=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "FeedbackPipeline":
        """Build the pipeline and its clients.

        Raises:
            ConfigurationError: if a required setting is missing
        """
        settings.require("slack_signing_secret")
        return cls(
            store=FeedbackStore.from_settings(settings),
            slack=SlackClient.from_settings(settings),
            signing_secret=settings.slack_signing_secret.get_secret_value(),
            tolerance_seconds=settings.signature_tolerance_seconds,
            metrics=MetricsCollector(enable_prometheus=settings.metrics_enabled),
        )

    async def collect(
        self,
        raw_body: bytes,
        headers: Mapping[str, str],
        now: float | None = None,
    ) -> CollectOutcome:
        """Handle one inbound callback."""
        outcome = await self._collect(raw_body, headers, now)
        self.metrics.record_feedback(outcome.result)
        return outcome

    async def _collect(
        self,
        raw_body: bytes,
        headers: Mapping[str, str],
        now: float | None,
    ) -> CollectOutcome:
        try:
            verify_request(
                raw_body,
                headers,
                self._signing_secret,
                tolerance_seconds=self.tolerance_seconds,
                now=now,
            )
            interaction = parse_interaction(raw_body)
        except AlertFilterError as e:
            self.logger.warning("feedback_rejected", failure=e.kind.value, error=str(e))
            return CollectOutcome(acknowledged=False, failure=e.kind)

        if interaction.kind is InteractionKind.IGNORED:
            return CollectOutcome(acknowledged=True, kind=interaction.kind)

        if interaction.kind is InteractionKind.OPEN_MODAL:
            return await self._open_modal(interaction)

        return await self._record(interaction)

    async def _open_modal(self, interaction: Interaction) -> CollectOutcome:
        try:
            await self.slack.open_feedback_modal(interaction.trigger_id, interaction.reference)
        except NotificationDeliveryError as e:
            self.logger.error(
                "feedback_modal_failed",
                source_key=interaction.reference.source_key,
                error=str(e),
            )
            return CollectOutcome(
                acknowledged=False,
                kind=interaction.kind,
                failure=FailureKind.NOTIFICATION_DELIVERY_ERROR,
            )
        return CollectOutcome(acknowledged=True, kind=interaction.kind)

    async def _record(self, interaction: Interaction) -> CollectOutcome:
        reference = interaction.reference
        record = FeedbackRecord(
            source_key=reference.source_key,
            label=interaction.label,
            excerpt=reference.excerpt or None,
            reason=interaction.reason,
            user_id=interaction.user_id,
        )

        try:
            await self.store.put(record)
        except PersistenceError as e:
            # Still acknowledged: a store outage must not look like a broken button
            self.logger.error(
                "feedback_persist_failed",
                feedback_id=record.id,
                source_key=record.source_key,
                error=str(e),
            )
            return CollectOutcome(
                acknowledged=True,
                kind=interaction.kind,
                failure=FailureKind.PERSISTENCE_ERROR,
            )

        self.logger.info(
            "feedback_recorded",
            feedback_id=record.id,
            source_key=record.source_key,
            label=record.label.value,
            user_id=record.user_id,
        )

        if reference.channel_id and reference.message_ts:
            try:
                await self.slack.close_feedback(
                    reference.channel_id,
                    reference.message_ts,
                    reference,
                    record.label,
                    message_blocks=interaction.message_blocks,
                )
            except NotificationDeliveryError as e:
                self.logger.warning(
                    "feedback_close_buttons_failed",
                    channel=reference.channel_id,
                    ts=reference.message_ts,
                    error=str(e),
                )

        return CollectOutcome(acknowledged=True, kind=interaction.kind, record=record)
