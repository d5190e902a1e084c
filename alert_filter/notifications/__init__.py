"""Chat notifications."""

from alert_filter.notifications.slack import MessageReceipt, SlackClient

__all__ = [
    "MessageReceipt",
    "SlackClient",
]
