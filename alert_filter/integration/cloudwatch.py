"""Decoding of CloudWatch Logs subscription events."""

import base64
import binascii
import gzip
import json
import zlib
from datetime import datetime, timezone
from typing import Any

from pydantic import Field, ValidationError

from alert_filter.common.errors import InvalidInput
from alert_filter.common.models import BaseModel
from alert_filter.services.notifier.models import AlertEvent


class LogEvent(BaseModel):
    """A single log line delivered by the subscription filter."""

    id: str = Field(default="")
    timestamp: int = Field(description="Epoch milliseconds")
    message: str


class LogsBatch(BaseModel):
    """Decoded ``awslogs.data`` payload."""

    message_type: str = Field(alias="messageType")
    owner: str = Field(default="")
    log_group: str = Field(alias="logGroup")
    log_stream: str = Field(default="", alias="logStream")
    subscription_filters: list[str] = Field(default_factory=list, alias="subscriptionFilters")
    log_events: list[LogEvent] = Field(default_factory=list, alias="logEvents")

    @property
    def is_control_message(self) -> bool:
        return self.message_type == "CONTROL_MESSAGE"

    def alert_events(self) -> list[AlertEvent]:
        """One alert per log line, keyed by the log group."""
        if self.is_control_message:
            return []
        return [
            AlertEvent(
                source_key=self.log_group,
                text=event.message,
                timestamp=datetime.fromtimestamp(event.timestamp / 1000, tz=timezone.utc),
            )
            for event in self.log_events
        ]


def decode_logs_event(event: dict[str, Any]) -> LogsBatch:
    """Decode a subscription event (``{"awslogs": {"data": base64(gzip(json))}}``).

    Raises:
        InvalidInput: if the envelope or the payload is malformed
    """
    try:
        data = event["awslogs"]["data"]
        raw = gzip.decompress(base64.b64decode(data))
        return LogsBatch.model_validate(json.loads(raw))
    except (KeyError, TypeError) as e:
        raise InvalidInput("event is not a CloudWatch Logs subscription event") from e
    except (binascii.Error, zlib.error, OSError, EOFError, json.JSONDecodeError) as e:
        raise InvalidInput(f"awslogs payload cannot be decoded: {e}") from e
    except ValidationError as e:
        raise InvalidInput(f"awslogs payload is invalid: {e}") from e
