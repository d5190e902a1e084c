"""Judgment request and result models."""

import json
from datetime import datetime, timezone

from pydantic import Field

from alert_filter.common.models import FrozenModel
from alert_filter.feedback.models import FeedbackRecord


def _isoformat(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


class FeedbackExample(FrozenModel):
    """A past human judgment rendered as few-shot context."""

    created_at: str
    message: str
    needs_notification: bool
    reason: str | None = None

    @classmethod
    def from_record(cls, record: FeedbackRecord) -> "FeedbackExample":
        return cls(
            created_at=_isoformat(record.created_at),
            message=record.excerpt or "",
            needs_notification=record.label.needs_notification,
            reason=record.reason,
        )


class JudgmentRequest(FrozenModel):
    """Everything the model sees for one alert."""

    message: str = Field(min_length=1, description="Raw alert text")
    timestamp: datetime = Field(description="When the alert was generated")
    examples: tuple[FeedbackExample, ...] = Field(
        default=(), description="Prior feedback, oldest first"
    )

    @classmethod
    def build(
        cls,
        message: str,
        timestamp: datetime,
        history: list[FeedbackRecord],
    ) -> "JudgmentRequest":
        """Build a request from feedback history in any order."""
        ordered = sorted(history, key=lambda r: r.created_at)
        return cls(
            message=message,
            timestamp=timestamp,
            examples=tuple(FeedbackExample.from_record(r) for r in ordered),
        )

    def render(self) -> str:
        """Render the user turn of the prompt."""
        feedback = json.dumps(
            [example.model_dump() for example in self.examples],
            ensure_ascii=False,
        )
        target_log = json.dumps(
            {"message": self.message, "timestamp": _isoformat(self.timestamp)},
            ensure_ascii=False,
        )
        return f"<feedback>{feedback}</feedback><target_log>{target_log}</target_log>"


class JudgmentResult(FrozenModel):
    """Structured verdict returned by the model."""

    actionable: bool
    rationale: str | None = None
