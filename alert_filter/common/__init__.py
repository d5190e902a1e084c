"""Common utilities and shared components for the alert filter pipelines."""

from alert_filter.common.config import Settings, get_settings
from alert_filter.common.errors import AlertFilterError, ConfigurationError, FailureKind
from alert_filter.common.logging import LoggerMixin, get_logger, setup_logging
from alert_filter.common.models import BaseModel, FrozenModel, HealthResponse, utcnow

__all__ = [
    "Settings",
    "get_settings",
    "AlertFilterError",
    "ConfigurationError",
    "FailureKind",
    "LoggerMixin",
    "get_logger",
    "setup_logging",
    "BaseModel",
    "FrozenModel",
    "HealthResponse",
    "utcnow",
]
