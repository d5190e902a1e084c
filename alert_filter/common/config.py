"""Configuration management for the alert filter pipelines."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from alert_filter.common.errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service identification
    service_name: str = Field(default="llm-alert-filter", description="Service name")
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Deployment environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Collector HTTP server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # Feedback store
    aws_region: str | None = Field(default=None, description="AWS region override")
    table_name: str = Field(
        default="llm_alert_filter_feedback",
        description="DynamoDB table holding feedback records",
    )
    feedback_index_name: str = Field(
        default="source_key_index",
        description="Secondary index keyed by source_key, sorted by created_at",
    )
    feedback_history_limit: int = Field(
        default=5, ge=0, le=50, description="Most-recent feedback records per judgment"
    )

    # Inference backend
    bedrock_model_id: str = Field(default="", description="Bedrock model identifier")
    bedrock_top_p: float = Field(default=0.9, ge=0, le=1, description="Sampling top-p")
    bedrock_temperature: float = Field(
        default=0.7, ge=0, le=1, description="Sampling temperature"
    )
    bedrock_timeout_seconds: float = Field(
        default=60.0, gt=0, description="Read timeout for a single inference call"
    )

    # Chat system
    slack_channel_id: str = Field(default="", description="Channel receiving alerts")
    slack_token: SecretStr | None = Field(default=None, description="Slack bot token")
    slack_signing_secret: SecretStr | None = Field(
        default=None, description="Slack request signing secret"
    )
    slack_api_base_url: str = Field(
        default="https://slack.com/api", description="Slack Web API base URL"
    )
    slack_timeout_seconds: float = Field(default=10.0, gt=0)
    signature_tolerance_seconds: int = Field(
        default=300, gt=0, description="Freshness window for signed callbacks"
    )

    # Observability
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "text"] = Field(
        default="json", description="Log output format"
    )
    metrics_enabled: bool = Field(default=True, description="Enable Prometheus metrics")

    def require(self, *names: str) -> None:
        """Fail fast when any of the named settings is unset or empty.

        Raises:
            ConfigurationError: listing every missing setting
        """
        missing = []
        for name in names:
            value = getattr(self, name)
            if isinstance(value, SecretStr):
                value = value.get_secret_value()
            if value is None or value == "":
                missing.append(name.upper())

        if missing:
            raise ConfigurationError(f"missing required settings: {', '.join(missing)}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
