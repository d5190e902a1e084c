"""Language-model judgment of alerts."""

from alert_filter.inference.client import InferenceClient, parse_judgment
from alert_filter.inference.models import FeedbackExample, JudgmentRequest, JudgmentResult

__all__ = [
    "InferenceClient",
    "parse_judgment",
    "FeedbackExample",
    "JudgmentRequest",
    "JudgmentResult",
]
