"""Slack interactivity payloads and their mapping to feedback interactions."""

import json
from enum import Enum
from typing import Annotated, Any, Literal
from urllib.parse import parse_qs

from pydantic import Field, TypeAdapter, ValidationError

from alert_filter.common.errors import InvalidInput, UnsupportedLabel
from alert_filter.common.models import BaseModel, FrozenModel
from alert_filter.feedback.models import FeedbackLabel
from alert_filter.feedback.reference import AlertReference
from alert_filter.notifications.blocks import (
    ACTION_OPEN_MODAL,
    MODAL_CALLBACK_ID,
    MODAL_LABEL_BLOCK,
    MODAL_REASON_BLOCK,
    REACTION_LABELS,
)


class SlackUser(BaseModel):
    id: str
    username: str | None = None


class SlackAction(BaseModel):
    action_id: str
    block_id: str | None = None
    value: str | None = None


class SlackContainer(BaseModel):
    type: str | None = None
    message_ts: str | None = None
    channel_id: str | None = None


class SlackChannel(BaseModel):
    id: str


class SlackMessage(BaseModel):
    """The message that carried the clicked button."""

    blocks: list[dict[str, Any]] = Field(default_factory=list)


class BlockActionsPayload(BaseModel):
    """A button click on a posted message."""

    type: Literal["block_actions"]
    user: SlackUser
    trigger_id: str | None = None
    actions: list[SlackAction] = Field(default_factory=list)
    container: SlackContainer = Field(default_factory=SlackContainer)
    channel: SlackChannel | None = None
    message: SlackMessage | None = None


class ViewState(BaseModel):
    values: dict[str, dict[str, dict[str, Any]]] = Field(default_factory=dict)


class SlackView(BaseModel):
    callback_id: str = ""
    private_metadata: str = ""
    state: ViewState = Field(default_factory=ViewState)


class ViewSubmissionPayload(BaseModel):
    """Submission of the feedback modal."""

    type: Literal["view_submission"]
    user: SlackUser
    view: SlackView


_PAYLOAD_ADAPTER = TypeAdapter(
    Annotated[BlockActionsPayload | ViewSubmissionPayload, Field(discriminator="type")]
)


class InteractionKind(str, Enum):
    REACTION = "reaction"
    OPEN_MODAL = "open_modal"
    IGNORED = "ignored"


class Interaction(FrozenModel):
    """A verified user interaction, reduced to what the collector needs."""

    kind: InteractionKind
    user_id: str | None = None
    label: FeedbackLabel | None = None
    reason: str | None = None
    reference: AlertReference | None = None
    trigger_id: str | None = None
    message_blocks: list[dict[str, Any]] | None = None


def parse_interaction(raw_body: bytes) -> Interaction:
    """Parse a form-encoded interactivity callback body.

    Raises:
        InvalidInput: if the body is not a well-formed payload
        UnsupportedLabel: if the reaction does not map to a label
        UnresolvableSource: if the alert reference cannot be recovered
    """
    try:
        form = parse_qs(raw_body.decode("utf-8"), strict_parsing=False)
        raw_payload = json.loads(form["payload"][0])
    except (UnicodeDecodeError, KeyError, IndexError, json.JSONDecodeError) as e:
        raise InvalidInput("callback body has no JSON payload field") from e

    if not isinstance(raw_payload, dict):
        raise InvalidInput("callback payload is not an object")

    if raw_payload.get("type") not in ("block_actions", "view_submission"):
        return Interaction(kind=InteractionKind.IGNORED)

    try:
        payload = _PAYLOAD_ADAPTER.validate_python(raw_payload)
    except ValidationError as e:
        raise InvalidInput(f"callback payload is invalid: {e.error_count()} errors") from e

    if isinstance(payload, BlockActionsPayload):
        return _from_block_actions(payload)
    return _from_view_submission(payload)


def _from_block_actions(payload: BlockActionsPayload) -> Interaction:
    if payload.container.type == "view":
        # Select changes inside the open feedback modal
        return Interaction(kind=InteractionKind.IGNORED)
    if not payload.actions:
        raise InvalidInput("block_actions payload carries no action")

    action = payload.actions[0]
    if action.action_id == ACTION_OPEN_MODAL:
        if not payload.trigger_id:
            raise InvalidInput("open_feedback_modal action has no trigger_id")
        kind = InteractionKind.OPEN_MODAL
        label = None
    elif action.action_id in REACTION_LABELS:
        kind = InteractionKind.REACTION
        label = REACTION_LABELS[action.action_id]
    else:
        raise UnsupportedLabel(f"unsupported reaction: {action.action_id!r}")

    channel_id = payload.container.channel_id or (payload.channel.id if payload.channel else None)
    reference = AlertReference.decode(action.value).model_copy(
        update={"channel_id": channel_id, "message_ts": payload.container.message_ts}
    )

    return Interaction(
        kind=kind,
        user_id=payload.user.id,
        label=label,
        reference=reference,
        trigger_id=payload.trigger_id,
        message_blocks=payload.message.blocks if payload.message else None,
    )


def _from_view_submission(payload: ViewSubmissionPayload) -> Interaction:
    if payload.view.callback_id != MODAL_CALLBACK_ID:
        return Interaction(kind=InteractionKind.IGNORED)

    values = payload.view.state.values
    selected = values.get(MODAL_LABEL_BLOCK, {}).get(MODAL_LABEL_BLOCK, {}).get("selected_option")
    if not isinstance(selected, dict) or "value" not in selected:
        raise InvalidInput("feedback modal has no selected label")

    label = FeedbackLabel.parse(selected["value"])
    reason = values.get(MODAL_REASON_BLOCK, {}).get(MODAL_REASON_BLOCK, {}).get("value")

    return Interaction(
        kind=InteractionKind.REACTION,
        user_id=payload.user.id,
        label=label,
        reason=reason.strip() if isinstance(reason, str) and reason.strip() else None,
        reference=AlertReference.decode(payload.view.private_metadata),
    )
