"""Unit tests for feedback labels and records."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from alert_filter.common.errors import UnsupportedLabel
from alert_filter.feedback.models import FeedbackLabel, FeedbackRecord


class TestFeedbackLabel:
    """Tests for label parsing."""

    def test_parse_known_labels(self):
        assert FeedbackLabel.parse("useful") is FeedbackLabel.USEFUL
        assert FeedbackLabel.parse("noise") is FeedbackLabel.NOISE

    @pytest.mark.parametrize("value", ["Useful", "spam", "", None])
    def test_parse_rejects_unknown_values(self, value):
        with pytest.raises(UnsupportedLabel):
            FeedbackLabel.parse(value)

    def test_needs_notification(self):
        assert FeedbackLabel.USEFUL.needs_notification is True
        assert FeedbackLabel.NOISE.needs_notification is False


class TestFeedbackRecord:
    """Tests for the feedback record model."""

    def test_defaults(self):
        record = FeedbackRecord(source_key="svc-a", label=FeedbackLabel.NOISE)

        assert record.id
        assert record.created_at.tzinfo is not None
        assert record.excerpt is None

    def test_ids_are_unique(self):
        first = FeedbackRecord(source_key="svc-a", label=FeedbackLabel.NOISE)
        second = FeedbackRecord(source_key="svc-a", label=FeedbackLabel.NOISE)

        assert first.id != second.id

    def test_requires_source_key(self):
        with pytest.raises(ValueError):
            FeedbackRecord(source_key="", label=FeedbackLabel.USEFUL)

    def test_records_are_immutable(self):
        record = FeedbackRecord(source_key="svc-a", label=FeedbackLabel.USEFUL)

        with pytest.raises(ValueError):
            record.label = FeedbackLabel.NOISE

    def test_naive_timestamp_treated_as_utc(self):
        record = FeedbackRecord(
            source_key="svc-a",
            label=FeedbackLabel.USEFUL,
            created_at=datetime(2024, 3, 1, 12, 0, 0),
        )

        assert record.created_at == datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_to_item_stores_epoch_millis(self):
        record = FeedbackRecord(
            id="f-1",
            source_key="svc-a",
            label=FeedbackLabel.NOISE,
            created_at=datetime(2024, 3, 1, 12, 0, 0, 250000, tzinfo=timezone.utc),
            excerpt="WARN retrying",
        )

        item = record.to_item()

        assert item == {
            "id": "f-1",
            "source_key": "svc-a",
            "label": "noise",
            "created_at": 1709294400250,
            "excerpt": "WARN retrying",
        }

    def test_from_item_accepts_dynamodb_decimals(self):
        item = {
            "id": "f-2",
            "source_key": "svc-a",
            "label": "useful",
            "created_at": Decimal("1709294400250"),
            "reason": "customer-facing",
            "user_id": "U1",
        }

        record = FeedbackRecord.from_item(item)

        assert record.label is FeedbackLabel.USEFUL
        assert record.created_at_ms == 1709294400250
        assert record.reason == "customer-facing"
        assert record.user_id == "U1"

    def test_from_item_rejects_unknown_label(self):
        item = {"id": "f-3", "source_key": "svc-a", "label": "maybe", "created_at": 0}

        with pytest.raises(UnsupportedLabel):
            FeedbackRecord.from_item(item)

    @pytest.mark.parametrize("created_at", ["2024-05-01T09:00:00Z", None, 1.5e12, True])
    def test_from_item_rejects_non_millis_timestamp(self, created_at):
        item = {"id": "f-4", "source_key": "svc-a", "label": "noise", "created_at": created_at}

        with pytest.raises(ValueError):
            FeedbackRecord.from_item(item)
