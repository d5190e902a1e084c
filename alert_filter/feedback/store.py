"""DynamoDB-backed feedback store."""

import asyncio
from typing import Any

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from alert_filter.common import Settings
from alert_filter.common.errors import DegradedRead, PersistenceError, UnsupportedLabel
from alert_filter.common.logging import LoggerMixin
from alert_filter.feedback.models import FeedbackRecord


class FeedbackStore(LoggerMixin):
    """Append-only collection of feedback records.

    Records are keyed by ``id``. The secondary index ``index_name`` has
    partition key ``source_key`` and sort key ``created_at`` (epoch
    milliseconds), so an index query returns records in the order of
    their stored creation time rather than their insertion order.
    Index reads are eventually consistent: feedback written a moment ago
    may not be visible to a concurrent triage yet.
    """

    def __init__(self, table: Any, index_name: str = "source_key_index") -> None:
        """Initialize the store.

        Args:
            table: boto3 ``dynamodb.Table`` resource
            index_name: Secondary index keyed by source_key
        """
        self._table = table
        self.index_name = index_name

    @classmethod
    def from_settings(cls, settings: Settings) -> "FeedbackStore":
        settings.require("table_name", "feedback_index_name")
        resource = boto3.resource("dynamodb", region_name=settings.aws_region)
        return cls(resource.Table(settings.table_name), settings.feedback_index_name)

    async def put(self, record: FeedbackRecord) -> None:
        """Write a new record. Existing records are never overwritten.

        Raises:
            PersistenceError: if the write fails
        """
        try:
            await asyncio.to_thread(
                self._table.put_item,
                Item=record.to_item(),
                ConditionExpression="attribute_not_exists(id)",
            )
        except (BotoCoreError, ClientError) as e:
            raise PersistenceError(f"failed to write feedback {record.id}: {e}") from e

        self.logger.debug(
            "feedback_record_written",
            feedback_id=record.id,
            source_key=record.source_key,
        )

    async def query(self, source_key: str, limit: int) -> list[FeedbackRecord]:
        """Return up to ``limit`` most recent records for a source, newest first.

        Raises:
            DegradedRead: if the query fails or returns an unreadable record
        """
        if limit <= 0:
            return []

        try:
            response = await asyncio.to_thread(
                self._table.query,
                IndexName=self.index_name,
                KeyConditionExpression=Key("source_key").eq(source_key),
                ScanIndexForward=False,
                Limit=limit,
            )
        except (BotoCoreError, ClientError) as e:
            raise DegradedRead(f"feedback query failed for {source_key}: {e}") from e

        try:
            records = [FeedbackRecord.from_item(item) for item in response.get("Items", [])]
        except (KeyError, TypeError, ValueError, OverflowError, OSError, UnsupportedLabel) as e:
            raise DegradedRead(f"unreadable feedback record for {source_key}: {e}") from e

        records.sort(key=lambda r: r.created_at, reverse=True)
        return records[:limit]
