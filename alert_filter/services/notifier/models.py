"""Notifier request and outcome models."""

from datetime import datetime

from pydantic import Field

from alert_filter.common.errors import FailureKind
from alert_filter.common.models import BaseModel, FrozenModel, utcnow
from alert_filter.inference.models import JudgmentResult
from alert_filter.notifications.slack import MessageReceipt


class AlertEvent(FrozenModel):
    """One incoming log/alert line; lives for a single triage."""

    source_key: str = Field(description="Origin of the alert, e.g. a log group")
    text: str = Field(description="Raw alert text")
    timestamp: datetime = Field(default_factory=utcnow, description="Arrival time")


class NotifyOutcome(BaseModel):
    """What a triage invocation did."""

    source_key: str
    notified: bool = Field(default=False)
    verdict: JudgmentResult | None = Field(
        default=None, description="Parsed verdict; None when no usable verdict exists"
    )
    failure: FailureKind | None = Field(default=None)
    degraded: bool = Field(default=False, description="Feedback history could not be read")
    history_size: int = Field(default=0, description="Feedback records used as context")
    receipt: MessageReceipt | None = Field(default=None)

    @property
    def result(self) -> str:
        if self.failure is not None and self.failure is not FailureKind.MALFORMED_JUDGMENT:
            return self.failure.value
        return "notified" if self.notified else "suppressed"
