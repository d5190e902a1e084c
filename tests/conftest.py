"""Shared fixtures for alert filter tests."""

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from alert_filter.common.errors import DegradedRead, PersistenceError
from alert_filter.feedback.models import FeedbackRecord
from alert_filter.inference.client import InferenceClient
from alert_filter.inference.models import JudgmentResult
from alert_filter.notifications.slack import MessageReceipt, SlackClient

from helpers import CHANNEL_ID, MESSAGE_TS, SIGNING_SECRET, form_body, signed_headers


class InMemoryFeedbackStore:
    """Feedback store double with the same read/write contract."""

    def __init__(self) -> None:
        self.records: list[FeedbackRecord] = []
        self.fail_reads = False
        self.fail_writes = False
        self.queries: list[tuple[str, int]] = []

    async def put(self, record: FeedbackRecord) -> None:
        if self.fail_writes:
            raise PersistenceError("table unavailable")
        self.records.append(record)

    async def query(self, source_key: str, limit: int) -> list[FeedbackRecord]:
        self.queries.append((source_key, limit))
        if self.fail_reads:
            raise DegradedRead("index unavailable")
        if limit <= 0:
            return []
        matching = [r for r in self.records if r.source_key == source_key]
        matching.sort(key=lambda r: r.created_at, reverse=True)
        return matching[:limit]


@pytest.fixture
def store() -> InMemoryFeedbackStore:
    return InMemoryFeedbackStore()


@pytest.fixture
def slack() -> MagicMock:
    """Slack client double; every call succeeds by default."""
    client = MagicMock(spec=SlackClient)
    client.post_alert = AsyncMock(return_value=MessageReceipt(channel=CHANNEL_ID, ts=MESSAGE_TS))
    client.close_feedback = AsyncMock(return_value=None)
    client.open_feedback_modal = AsyncMock(return_value=None)
    return client


@pytest.fixture
def inference() -> MagicMock:
    """Inference client double; judges every alert actionable by default."""
    client = MagicMock(spec=InferenceClient)
    client.judge = AsyncMock(return_value=JudgmentResult(actionable=True, rationale="novel error"))
    return client


@pytest.fixture
def signing_secret() -> str:
    return SIGNING_SECRET


@pytest.fixture
def signed_callback() -> Callable[..., tuple[bytes, dict[str, str]]]:
    """Build a correctly signed callback body and headers for a payload."""

    def build(payload: dict[str, Any], timestamp: int | None = None) -> tuple[bytes, dict[str, str]]:
        body = form_body(payload)
        return body, signed_headers(body, timestamp=timestamp)

    return build
