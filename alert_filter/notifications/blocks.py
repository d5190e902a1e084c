"""Slack Block Kit layouts for alert notifications and the feedback modal."""

from typing import Any

from alert_filter.feedback.models import FeedbackLabel

# Action ids carried by the notification buttons
ACTION_FEEDBACK_USEFUL = "feedback_useful"
ACTION_FEEDBACK_NOISE = "feedback_noise"
ACTION_OPEN_MODAL = "open_feedback_modal"

REACTION_LABELS: dict[str, FeedbackLabel] = {
    ACTION_FEEDBACK_USEFUL: FeedbackLabel.USEFUL,
    ACTION_FEEDBACK_NOISE: FeedbackLabel.NOISE,
}

# Modal identifiers
MODAL_CALLBACK_ID = "send_feedback"
MODAL_LABEL_BLOCK = "feedback_label"
MODAL_REASON_BLOCK = "reason"

FEEDBACK_ACTIONS_BLOCK = "feedback_actions"

# Slack rejects section text longer than 3000 characters
MAX_SECTION_CHARS = 2900


def _clip(text: str) -> str:
    if len(text) <= MAX_SECTION_CHARS:
        return text
    return text[: MAX_SECTION_CHARS - 1] + "…"


def alert_blocks(source_key: str, message: str) -> list[dict[str, Any]]:
    """Static part of an alert notification."""
    return [
        {
            "type": "header",
            "block_id": "header",
            "text": {
                "type": "plain_text",
                "text": ":rotating_light: Error detected :rotating_light:",
                "emoji": True,
            },
        },
        {
            "type": "section",
            "block_id": "source_key",
            "text": {"type": "mrkdwn", "text": f"*Source*\n`{_clip(source_key)}`"},
        },
        {
            "type": "section",
            "block_id": "message",
            "text": {"type": "plain_text", "text": _clip(message) or " "},
        },
        {"type": "divider", "block_id": "divider"},
    ]


def feedback_actions_block(reference_token: str) -> dict[str, Any]:
    """Buttons a user reacts with; every button carries the alert reference."""
    return {
        "type": "actions",
        "block_id": FEEDBACK_ACTIONS_BLOCK,
        "elements": [
            {
                "type": "button",
                "action_id": ACTION_FEEDBACK_USEFUL,
                "text": {"type": "plain_text", "text": ":+1: Useful", "emoji": True},
                "style": "primary",
                "value": reference_token,
            },
            {
                "type": "button",
                "action_id": ACTION_FEEDBACK_NOISE,
                "text": {"type": "plain_text", "text": ":-1: Noise", "emoji": True},
                "style": "danger",
                "value": reference_token,
            },
            {
                "type": "button",
                "action_id": ACTION_OPEN_MODAL,
                "text": {"type": "plain_text", "text": "Add reason"},
                "value": reference_token,
            },
        ],
    }


def feedback_recorded_block(label: FeedbackLabel) -> dict[str, Any]:
    return {
        "type": "section",
        "block_id": "feedback_recorded",
        "text": {"type": "mrkdwn", "text": f"_Feedback recorded: {label.value}_"},
    }


def feedback_modal(private_metadata: str) -> dict[str, Any]:
    """Modal asking whether the alert needed a notification, and why."""
    options = [
        {
            "text": {"type": "plain_text", "text": "Noise (no notification needed)"},
            "value": FeedbackLabel.NOISE.value,
        },
        {
            "text": {"type": "plain_text", "text": "Useful (notification needed)"},
            "value": FeedbackLabel.USEFUL.value,
        },
    ]
    return {
        "type": "modal",
        "callback_id": MODAL_CALLBACK_ID,
        "private_metadata": private_metadata,
        "title": {"type": "plain_text", "text": "Alert feedback"},
        "blocks": [
            {
                "type": "section",
                "block_id": MODAL_LABEL_BLOCK,
                "text": {"type": "plain_text", "text": "Was this notification needed?"},
                "accessory": {
                    "type": "static_select",
                    "action_id": MODAL_LABEL_BLOCK,
                    "initial_option": options[0],
                    "options": options,
                },
            },
            {
                "type": "input",
                "block_id": MODAL_REASON_BLOCK,
                "label": {"type": "plain_text", "text": "Reason"},
                "element": {
                    "type": "plain_text_input",
                    "action_id": MODAL_REASON_BLOCK,
                    "multiline": True,
                },
                "optional": True,
            },
        ],
        "close": {"type": "plain_text", "text": "Cancel"},
        "submit": {"type": "plain_text", "text": "Send"},
    }
