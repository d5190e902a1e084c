"""Error taxonomy shared by the triage and feedback pipelines."""

from enum import Enum


class FailureKind(str, Enum):
    """Failure recorded on a pipeline outcome."""

    INVALID_INPUT = "invalid_input"
    INFERENCE_UNAVAILABLE = "inference_unavailable"
    MALFORMED_JUDGMENT = "malformed_judgment"
    NOTIFICATION_DELIVERY_ERROR = "notification_delivery_error"
    UNAUTHORIZED = "unauthorized"
    STALE_REQUEST = "stale_request"
    UNSUPPORTED_LABEL = "unsupported_label"
    UNRESOLVABLE_SOURCE = "unresolvable_source"
    PERSISTENCE_ERROR = "persistence_error"
    DEGRADED_READ = "degraded_read"


class AlertFilterError(Exception):
    """Base class for pipeline errors."""

    kind: FailureKind | None = None


class ConfigurationError(AlertFilterError):
    """Required startup configuration is missing or invalid."""


class InvalidInput(AlertFilterError):
    """An event or callback payload failed validation."""

    kind = FailureKind.INVALID_INPUT


class InferenceUnavailable(AlertFilterError):
    """The inference backend could not be reached or returned an error."""

    kind = FailureKind.INFERENCE_UNAVAILABLE


class MalformedJudgment(AlertFilterError):
    """The model response does not have the expected verdict shape."""

    kind = FailureKind.MALFORMED_JUDGMENT


class NotificationDeliveryError(AlertFilterError):
    """The chat system rejected or failed to deliver a message."""

    kind = FailureKind.NOTIFICATION_DELIVERY_ERROR


class Unauthorized(AlertFilterError):
    """A callback signature is missing, malformed or does not match."""

    kind = FailureKind.UNAUTHORIZED


class StaleRequest(AlertFilterError):
    """A callback timestamp falls outside the freshness window."""

    kind = FailureKind.STALE_REQUEST


class UnsupportedLabel(AlertFilterError):
    """A reaction or stored value does not map to a known label."""

    kind = FailureKind.UNSUPPORTED_LABEL


class UnresolvableSource(AlertFilterError):
    """The alert reference in a callback cannot be decoded."""

    kind = FailureKind.UNRESOLVABLE_SOURCE


class PersistenceError(AlertFilterError):
    """Writing a feedback record failed."""

    kind = FailureKind.PERSISTENCE_ERROR


class DegradedRead(AlertFilterError):
    """Reading feedback history failed; callers proceed without history."""

    kind = FailureKind.DEGRADED_READ
