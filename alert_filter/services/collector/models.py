"""Collector outcome model."""

from pydantic import Field

from alert_filter.common.errors import FailureKind
from alert_filter.common.models import BaseModel
from alert_filter.feedback.models import FeedbackRecord
from alert_filter.services.collector.payloads import InteractionKind


class CollectOutcome(BaseModel):
    """What a feedback callback did.

    ``acknowledged`` is true iff the callback passed verification and
    parsing; a store failure is recorded in ``failure`` but still
    acknowledged.
    """

    acknowledged: bool = Field(default=False)
    kind: InteractionKind | None = Field(default=None)
    failure: FailureKind | None = Field(default=None)
    record: FeedbackRecord | None = Field(default=None, description="Record written, if any")

    @property
    def result(self) -> str:
        if self.failure is not None:
            return self.failure.value
        if self.record is not None:
            return self.record.label.value
        return self.kind.value if self.kind else "unknown"
