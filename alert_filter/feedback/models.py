"""Feedback record data model."""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import Field, field_validator

from alert_filter.common.errors import UnsupportedLabel
from alert_filter.common.models import FrozenModel, utcnow


class FeedbackLabel(str, Enum):
    """Human verdict on a past notification."""

    USEFUL = "useful"
    NOISE = "noise"

    @classmethod
    def parse(cls, value: Any) -> "FeedbackLabel":
        """Convert a raw value to a label, never guessing.

        Raises:
            UnsupportedLabel: if the value is not a known label
        """
        try:
            return cls(value)
        except ValueError as e:
            raise UnsupportedLabel(f"unsupported feedback label: {value!r}") from e

    @property
    def needs_notification(self) -> bool:
        return self is FeedbackLabel.USEFUL


class FeedbackRecord(FrozenModel):
    """One human judgment about one past alert.

    Records are append-only: a new record is created for every piece of
    feedback and existing records are never modified.
    """

    id: str = Field(default_factory=lambda: str(uuid4()), description="Primary key")
    source_key: str = Field(min_length=1, description="Origin of the alert")
    label: FeedbackLabel = Field(description="Verdict")
    created_at: datetime = Field(default_factory=utcnow)
    excerpt: str | None = Field(default=None, description="Alert text the feedback refers to")
    reason: str | None = Field(default=None, description="Free-text rationale")
    user_id: str | None = Field(default=None, description="Chat user who gave the feedback")

    @field_validator("created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def created_at_ms(self) -> int:
        return int(self.created_at.timestamp() * 1000)

    def to_item(self) -> dict[str, Any]:
        """Serialize for the DynamoDB resource API."""
        item: dict[str, Any] = {
            "id": self.id,
            "source_key": self.source_key,
            "label": self.label.value,
            "created_at": self.created_at_ms,
        }
        for key in ("excerpt", "reason", "user_id"):
            value = getattr(self, key)
            if value:
                item[key] = value
        return item

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "FeedbackRecord":
        """Deserialize a DynamoDB item.

        Raises:
            UnsupportedLabel: if the stored label is unknown
            ValueError: if created_at is not epoch milliseconds
        """
        created_at = item["created_at"]
        if isinstance(created_at, bool) or not isinstance(created_at, (int, Decimal)):
            raise ValueError(f"created_at is not epoch milliseconds: {created_at!r}")
        created_at = int(created_at)

        return cls(
            id=item["id"],
            source_key=item["source_key"],
            label=FeedbackLabel.parse(item["label"]),
            created_at=datetime.fromtimestamp(created_at / 1000, tz=timezone.utc),
            excerpt=item.get("excerpt"),
            reason=item.get("reason"),
            user_id=item.get("user_id"),
        )
