"""Slack Web API client."""

from typing import Any

import httpx

from alert_filter.common import Settings
from alert_filter.common.errors import NotificationDeliveryError
from alert_filter.common.logging import LoggerMixin
from alert_filter.common.models import FrozenModel
from alert_filter.feedback.models import FeedbackLabel
from alert_filter.feedback.reference import AlertReference
from alert_filter.notifications.blocks import (
    FEEDBACK_ACTIONS_BLOCK,
    alert_blocks,
    feedback_actions_block,
    feedback_modal,
    feedback_recorded_block,
)


class MessageReceipt(FrozenModel):
    """Delivery receipt for a posted message."""

    channel: str
    ts: str


class SlackClient(LoggerMixin):
    """Post alerts and drive the feedback interaction in Slack.

    A fresh HTTP connection is opened for each call and closed before
    returning; the client itself holds only configuration.
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://slack.com/api",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            token: Bot token used as a Bearer credential
            base_url: Slack Web API base URL
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "SlackClient":
        settings.require("slack_token")
        return cls(
            token=settings.slack_token.get_secret_value(),
            base_url=settings.slack_api_base_url,
            timeout=settings.slack_timeout_seconds,
        )

    async def _call(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Invoke a Web API method.

        Raises:
            NotificationDeliveryError: on transport errors, non-2xx or ``ok: false``
        """
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={
                    "Authorization": f"Bearer {self._token}",
                    "Content-Type": "application/json; charset=utf-8",
                },
                transport=self._transport,
            ) as client:
                response = await client.post(f"{self.base_url}/{method}", json=payload)
        except httpx.HTTPError as e:
            raise NotificationDeliveryError(f"{method} failed: {e}") from e

        if not response.is_success:
            raise NotificationDeliveryError(
                f"{method} failed with HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise NotificationDeliveryError(f"{method} returned invalid JSON") from e

        if not data.get("ok"):
            raise NotificationDeliveryError(
                f"{method} failed: {data.get('error', 'unknown_error')}"
            )
        return data

    async def post_alert(
        self,
        channel_id: str,
        source_key: str,
        message: str,
    ) -> MessageReceipt:
        """Post an alert with feedback buttons referencing ``source_key``."""
        reference = AlertReference(source_key=source_key, excerpt=message)
        blocks = alert_blocks(source_key, message)
        blocks.append(feedback_actions_block(reference.encode()))

        data = await self._call(
            "chat.postMessage",
            {
                "channel": channel_id,
                "text": f"Error detected in {source_key}",
                "blocks": blocks,
            },
        )

        receipt = MessageReceipt(channel=data.get("channel", channel_id), ts=data.get("ts", ""))
        self.logger.info(
            "alert_posted",
            channel=receipt.channel,
            ts=receipt.ts,
            source_key=source_key,
        )
        return receipt

    async def close_feedback(
        self,
        channel_id: str,
        ts: str,
        reference: AlertReference,
        label: FeedbackLabel,
        message_blocks: list[dict[str, Any]] | None = None,
    ) -> None:
        """Replace the feedback buttons of a posted alert with a note.

        The alert body is kept from ``message_blocks`` (the posted message as
        echoed back by Slack). Without them it is rebuilt from the reference
        excerpt, which may be truncated.
        """
        if message_blocks:
            blocks = [b for b in message_blocks if b.get("block_id") != FEEDBACK_ACTIONS_BLOCK]
        else:
            blocks = alert_blocks(reference.source_key, reference.excerpt)
        blocks.append(feedback_recorded_block(label))

        await self._call(
            "chat.update",
            {
                "channel": channel_id,
                "ts": ts,
                "text": f"Error detected in {reference.source_key}",
                "blocks": blocks,
            },
        )

    async def open_feedback_modal(self, trigger_id: str, reference: AlertReference) -> None:
        """Open the feedback modal; the reference travels as private metadata."""
        await self._call(
            "views.open",
            {
                "trigger_id": trigger_id,
                "view": feedback_modal(reference.encode()),
            },
        )
