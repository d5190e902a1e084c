"""Base Pydantic models shared by the pipelines."""

from datetime import datetime, timezone

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict, Field


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class BaseModel(PydanticBaseModel):
    """Mutable model; assignments are validated."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)


class FrozenModel(BaseModel):
    """Immutable value object."""

    model_config = ConfigDict(frozen=True)


class HealthResponse(BaseModel):
    """Collector health check."""

    status: str = Field(description="healthy or degraded")
    service: str
    version: str
    checks: dict[str, bool] = Field(
        default_factory=dict, description="Readiness of each dependency"
    )
