"""Observability configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["json", "console"]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default="INFO", description="Log level")
    format: LogFormat = Field(default="json", description="Output format")
    redact_pii: bool = Field(
        default=True,
        description="Mask emails, phone numbers and secret-like keys in logs",
    )


class MetricsConfig(BaseModel):
    """Metrics configuration."""

    enabled: bool = Field(default=True, description="Expose Prometheus metrics")
    path: str = Field(default="/metrics", description="Metrics endpoint path")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging settings",
    )
    metrics: MetricsConfig = Field(
        default_factory=MetricsConfig,
        description="Metrics settings",
    )
