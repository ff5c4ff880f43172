"""Configuration section models."""

from switchyard.config.models.api import APIConfig
from switchyard.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from switchyard.config.models.wiring import (
    GoldenWeights,
    SafetyConfig,
    SummaryLimits,
    TierWeights,
    TraceConfig,
    WiringConfig,
)

__all__ = [
    "APIConfig",
    "GoldenWeights",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "SafetyConfig",
    "SummaryLimits",
    "TierWeights",
    "TraceConfig",
    "WiringConfig",
]
