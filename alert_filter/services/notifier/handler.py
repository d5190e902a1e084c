"""Notifier entry point for CloudWatch Logs subscription events."""

import asyncio
from functools import lru_cache
from typing import Any

from alert_filter.common import get_logger, get_settings, setup_logging
from alert_filter.integration.cloudwatch import decode_logs_event
from alert_filter.services.notifier.pipeline import TriagePipeline

logger = get_logger(__name__)

CRASHED = "crashed"


@lru_cache
def get_pipeline() -> TriagePipeline:
    """Build the pipeline once per process."""
    settings = get_settings()
    setup_logging(
        level=settings.log_level,
        format=settings.log_format,
        service_name=f"{settings.service_name}-notifier",
    )
    return TriagePipeline.from_settings(settings)


async def handle_logs_event(pipeline: TriagePipeline, event: dict[str, Any]) -> dict[str, Any]:
    """Triage every log line of a subscription event, one at a time.

    An unexpected error on one line is logged and counted under
    ``failures["crashed"]``; the remaining lines are still triaged.

    Raises:
        InvalidInput: if the event cannot be decoded
    """
    batch = decode_logs_event(event)
    if batch.is_control_message:
        logger.debug("control_message_ignored", log_group=batch.log_group)
        return {"log_group": batch.log_group, "processed": 0, "notified": 0, "failures": {}}

    failures: dict[str, int] = {}
    notified = 0
    alerts = batch.alert_events()
    for alert in alerts:
        try:
            outcome = await pipeline.triage(alert)
        except Exception as e:
            # Lines are independent: a crash on one never skips the rest
            logger.exception(
                "triage_crashed",
                source_key=alert.source_key,
                error=str(e),
            )
            failures[CRASHED] = failures.get(CRASHED, 0) + 1
            continue

        if outcome.notified:
            notified += 1
        if outcome.failure is not None:
            failures[outcome.failure.value] = failures.get(outcome.failure.value, 0) + 1

    return {
        "log_group": batch.log_group,
        "processed": len(alerts),
        "notified": notified,
        "failures": failures,
    }


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda handler."""
    return asyncio.run(handle_logs_event(get_pipeline(), event))
