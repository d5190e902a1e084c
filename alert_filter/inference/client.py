"""Bedrock Converse client for notification judgments."""

import asyncio
import json
import re
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from alert_filter.common import Settings
from alert_filter.common.errors import InferenceUnavailable, MalformedJudgment
from alert_filter.common.logging import LoggerMixin
from alert_filter.inference.models import JudgmentRequest, JudgmentResult

TOOL_NAME = "judge_needs_notification"

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class InferenceClient(LoggerMixin):
    """Ask a language model whether an alert needs a human.

    The model is given prior operator feedback as few-shot context and is
    steered to answer through a single tool call whose input carries the
    boolean verdict.
    """

    SYSTEM_PROMPT = """
<role>
You are a log monitor.
</role>
<question>
Refer to the list of past notification feedback (`feedback`) to determine whether a notification is required for the currently occurring error log (`target_log`).
</question>
<data_info>
- feedback: A list of feedback regarding notifications from the operator, oldest first
  - created_at: The date and time when the feedback was added
  - message: The content of the error log that received feedback
  - needs_notification: Whether a notification is required (`true` means required, `false` means not required)
  - reason: Reasons for necessity or non-necessity (optional)
- target_log: The error log subject to the decision
  - message: The content of the log
  - timestamp: The date and time when the log was generated
</data_info>
<rule>
- Think step-by-step.
- Make a decision only if sufficient inference can be drawn from the feedback content; if not, always return `true`.
- Treat feedback as similar if the `message` in both `feedback` and `target_log` matches 80% or more.
- If the referenced `feedback` for inference contains a `reason`, take its content into account.
- If similar feedback contradict each other, prioritize the feedback with the most recent `created_at` timestamp.
- Answer by calling the `judge_needs_notification` tool exactly once.
</rule>
"""

    TOOL_SCHEMA: dict[str, Any] = {
        "type": "object",
        "properties": {
            "needs_notification": {
                "type": "boolean",
                "description": "If notification is necessary, set to true, otherwise set to false.",
            },
            "reason": {
                "type": "string",
                "description": "Short explanation of the decision.",
            },
        },
        "required": ["needs_notification"],
    }

    def __init__(
        self,
        runtime_client: Any,
        model_id: str,
        top_p: float,
        temperature: float,
    ) -> None:
        """Initialize the client.

        Args:
            runtime_client: boto3 ``bedrock-runtime`` client
            model_id: Bedrock model identifier
            top_p: Nucleus sampling parameter
            temperature: Sampling temperature
        """
        self._client = runtime_client
        self.model_id = model_id
        self.top_p = top_p
        self.temperature = temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> "InferenceClient":
        settings.require("bedrock_model_id")
        runtime_client = boto3.client(
            "bedrock-runtime",
            region_name=settings.aws_region,
            config=Config(
                read_timeout=settings.bedrock_timeout_seconds,
                # A single attempt: no SDK-level retries
                retries={"total_max_attempts": 1, "mode": "standard"},
            ),
        )
        return cls(
            runtime_client,
            model_id=settings.bedrock_model_id,
            top_p=settings.bedrock_top_p,
            temperature=settings.bedrock_temperature,
        )

    async def complete(self, request: JudgmentRequest) -> dict[str, Any]:
        """Send one Converse call and return the raw response.

        Raises:
            InferenceUnavailable: on transport, timeout or service errors
        """
        try:
            return await asyncio.to_thread(
                self._client.converse,
                modelId=self.model_id,
                system=[{"text": self.SYSTEM_PROMPT}],
                messages=[{"role": "user", "content": [{"text": request.render()}]}],
                inferenceConfig={"topP": self.top_p, "temperature": self.temperature},
                toolConfig={
                    "tools": [
                        {
                            "toolSpec": {
                                "name": TOOL_NAME,
                                "description": "Determines if notification is required.",
                                "inputSchema": {"json": self.TOOL_SCHEMA},
                            }
                        }
                    ]
                },
            )
        except (BotoCoreError, ClientError) as e:
            raise InferenceUnavailable(f"inference call to {self.model_id} failed: {e}") from e

    async def judge(self, request: JudgmentRequest) -> JudgmentResult:
        """Run a judgment for one alert.

        Raises:
            InferenceUnavailable: if the backend call fails
            MalformedJudgment: if the response has no usable verdict
        """
        response = await self.complete(request)
        result = parse_judgment(response)

        self.logger.debug(
            "judgment_received",
            model_id=self.model_id,
            actionable=result.actionable,
            stop_reason=response.get("stopReason"),
        )
        return result


def parse_judgment(response: dict[str, Any]) -> JudgmentResult:
    """Extract the verdict from a Converse response.

    The tool-use input is preferred; a JSON object in a text block is
    accepted when the model answered in prose instead.

    Raises:
        MalformedJudgment: if no block yields a boolean verdict
    """
    try:
        content = response["output"]["message"]["content"]
    except (KeyError, TypeError) as e:
        raise MalformedJudgment("response has no message content") from e

    if not isinstance(content, list):
        raise MalformedJudgment("response content is not a list")

    for block in content:
        tool_use = block.get("toolUse") if isinstance(block, dict) else None
        if tool_use and tool_use.get("name") == TOOL_NAME:
            return _verdict_from(tool_use.get("input"))

    for block in content:
        text = block.get("text") if isinstance(block, dict) else None
        if not text:
            continue
        match = _JSON_OBJECT.search(text)
        if match is None:
            continue
        try:
            return _verdict_from(json.loads(match.group(0)))
        except (json.JSONDecodeError, MalformedJudgment):
            continue

    raise MalformedJudgment("no verdict found in response")


def _verdict_from(payload: Any) -> JudgmentResult:
    if not isinstance(payload, dict):
        raise MalformedJudgment("verdict payload is not an object")

    verdict = payload.get("needs_notification")
    if not isinstance(verdict, bool):
        raise MalformedJudgment(f"needs_notification is not a boolean: {verdict!r}")

    reason = payload.get("reason")
    return JudgmentResult(
        actionable=verdict,
        rationale=reason if isinstance(reason, str) and reason else None,
    )
