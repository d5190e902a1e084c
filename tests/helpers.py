"""Payload builders shared by the test suites."""

import json
import time
from typing import Any
from urllib.parse import urlencode

from alert_filter.feedback.reference import AlertReference
from alert_filter.services.collector.signature import (
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    compute_signature,
)

SIGNING_SECRET = "8f742231b10e8888abcd99yyyzzz85a5"
CHANNEL_ID = "C0ALERTS"
MESSAGE_TS = "1700000000.000100"
SOURCE_KEY = "/aws/lambda/checkout-api"


def signed_headers(
    body: bytes,
    secret: str = SIGNING_SECRET,
    timestamp: int | None = None,
) -> dict[str, str]:
    ts = str(int(time.time()) if timestamp is None else timestamp)
    return {
        "Content-Type": "application/x-www-form-urlencoded",
        TIMESTAMP_HEADER: ts,
        SIGNATURE_HEADER: compute_signature(secret, ts, body),
    }


def form_body(payload: dict[str, Any]) -> bytes:
    """Encode an interactivity payload the way Slack posts it."""
    return urlencode({"payload": json.dumps(payload)}).encode("utf-8")


def block_actions_payload(
    action_id: str,
    reference: AlertReference,
    user_id: str = "U0OPERATOR",
    trigger_id: str | None = "13345224609.738474920.8088930838d88f008e0",
    message_blocks: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    payload = {
        "type": "block_actions",
        "user": {"id": user_id, "username": "operator"},
        "trigger_id": trigger_id,
        "container": {
            "type": "message",
            "message_ts": MESSAGE_TS,
            "channel_id": CHANNEL_ID,
        },
        "channel": {"id": CHANNEL_ID},
        "actions": [
            {
                "action_id": action_id,
                "block_id": "feedback_actions",
                "value": reference.encode(),
            }
        ],
    }
    if message_blocks is not None:
        payload["message"] = {"ts": MESSAGE_TS, "blocks": message_blocks}
    return payload


def view_submission_payload(
    label: str,
    reference: AlertReference,
    reason: str | None = None,
    user_id: str = "U0OPERATOR",
) -> dict[str, Any]:
    return {
        "type": "view_submission",
        "user": {"id": user_id},
        "view": {
            "callback_id": "send_feedback",
            "private_metadata": reference.encode(),
            "state": {
                "values": {
                    "feedback_label": {
                        "feedback_label": {
                            "type": "static_select",
                            "selected_option": {"value": label},
                        }
                    },
                    "reason": {"reason": {"type": "plain_text_input", "value": reason}},
                }
            },
        },
    }
