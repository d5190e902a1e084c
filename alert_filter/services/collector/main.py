"""Feedback Collector Service - signed Slack interactivity endpoint."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from alert_filter import __version__
from alert_filter.common import get_logger, get_settings, setup_logging
from alert_filter.common.errors import FailureKind
from alert_filter.common.models import HealthResponse
from alert_filter.services.collector.pipeline import FeedbackPipeline

logger = get_logger(__name__)

SERVICE_NAME = "feedback-collector"

# Failures the caller must see; anything else that passed verification is acknowledged
_FAILURE_STATUS = {
    FailureKind.UNAUTHORIZED: 401,
    FailureKind.STALE_REQUEST: 401,
    FailureKind.INVALID_INPUT: 400,
    FailureKind.UNSUPPORTED_LABEL: 400,
    FailureKind.UNRESOLVABLE_SOURCE: 400,
    FailureKind.NOTIFICATION_DELIVERY_ERROR: 502,
}


def create_app(pipeline: FeedbackPipeline | None = None) -> FastAPI:
    """Create the collector application.

    Args:
        pipeline: Prebuilt pipeline; built from settings at startup when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = get_settings()
        setup_logging(
            level=settings.log_level,
            format=settings.log_format,
            service_name=SERVICE_NAME,
        )

        if pipeline is None:
            app.state.pipeline = FeedbackPipeline.from_settings(settings)
        else:
            app.state.pipeline = pipeline

        logger.info("starting_service", environment=settings.environment)
        yield
        logger.info("shutting_down_service")

    app = FastAPI(
        title="Feedback Collector Service",
        description="Records operator feedback on alert notifications",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request) -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            service=SERVICE_NAME,
            version=__version__,
            checks={"pipeline": getattr(request.app.state, "pipeline", None) is not None},
        )

    @app.get("/metrics")
    async def metrics() -> Response:
        """Prometheus metrics."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.post("/feedback")
    async def receive_feedback(request: Request) -> Response:
        """Receive a Slack interactivity callback."""
        raw_body = await request.body()
        outcome = await request.app.state.pipeline.collect(raw_body, request.headers)

        if not outcome.acknowledged:
            status_code = _FAILURE_STATUS.get(outcome.failure, 400)
            return Response(status_code=status_code)

        # Slack closes the modal on an empty 200 response
        return Response(status_code=200)

    return app


def main() -> None:
    """Run the service."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "alert_filter.services.collector.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
