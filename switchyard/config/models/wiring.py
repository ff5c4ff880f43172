"""Wiring engine configuration models.

Every tunable of the engine lives here rather than in code: the enforcement
policy for config reads, the readiness score weights, trace queue sizing,
and the allow-lists used by the tenant-safety auditor.
"""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

EnforcementModeName = Literal["off", "warn", "throw"]


class GoldenWeights(BaseModel):
    """Weights for the golden readiness score.

    Each weight is awarded in full when its condition holds. The default
    split is 60/20/10/10; weights must sum to 100.
    """

    required_fields: int = Field(
        default=60, ge=0, le=100, description="Awarded when every required field is WIRED"
    )
    no_critical_issues: int = Field(
        default=20, ge=0, le=100, description="Awarded when no critical issue is open"
    )
    no_misconfigured: int = Field(
        default=10, ge=0, le=100, description="Awarded when no field is MISCONFIGURED"
    )
    optional_coverage: int = Field(
        default=10, ge=0, le=100, description="Awarded when optional coverage meets the threshold"
    )
    optional_coverage_threshold: int = Field(
        default=50,
        ge=0,
        le=100,
        description="Optional-field coverage percent needed for the optional weight",
    )

    @model_validator(mode="after")
    def _weights_sum_to_100(self) -> "GoldenWeights":
        total = (
            self.required_fields
            + self.no_critical_issues
            + self.no_misconfigured
            + self.optional_coverage
        )
        if total != 100:
            raise ValueError(f"golden weights must sum to 100, got {total}")
        return self


class TierWeights(BaseModel):
    """Contribution of each tier's percent-complete to the overall tier score."""

    mva: float = Field(default=0.40, ge=0.0, le=1.0, description="Weight of tier 1")
    pro: float = Field(default=0.35, ge=0.0, le=1.0, description="Weight of tier 2")
    max: float = Field(default=0.25, ge=0.0, le=1.0, description="Weight of tier 3")


class SummaryLimits(BaseModel):
    """Caps applied to read-log summaries."""

    turn_top_readers: int = Field(default=5, ge=1, description="Top readers in a turn summary")
    turn_top_paths: int = Field(default=10, ge=1, description="Top paths in a turn summary")
    call_top_readers: int = Field(default=10, ge=1, description="Top readers in a call summary")
    call_top_paths: int = Field(default=15, ge=1, description="Top paths in a call summary")
    unread_but_wired: int = Field(
        default=20, ge=1, description="Unread registry paths listed in a call summary"
    )


class TraceConfig(BaseModel):
    """Trace event emission settings."""

    enabled: bool = Field(default=True, description="Emit trace events to the sink")
    max_queue_size: int = Field(
        default=10_000,
        ge=1,
        description="Pending events held before new events are dropped",
    )


class SafetyConfig(BaseModel):
    """Inputs for the tenant-safety auditor."""

    allowed_placeholder_keys: list[str] = Field(
        default_factory=lambda: [
            "companyName",
            "businessName",
            "phone",
            "hours",
            "serviceArea",
            "address",
            "email",
            "website",
            "aiName",
            "ownerName",
            "emergencyPhone",
            "afterHoursMessage",
            "holidayMessage",
        ],
        description="Placeholder keys a tenant may define or reference",
    )
    known_tenant_names: list[str] = Field(
        default_factory=lambda: ["Penguin Air", "ABC Plumbing", "Smith Dental"],
        description="Business names that must never appear literally in another tenant's text",
    )
    phone_pattern: str = Field(
        default=r"\+1\d{10}",
        description="Regex for literal phone numbers that should be placeholders",
    )


class WiringConfig(BaseModel):
    """Wiring engine configuration."""

    enforcement_mode: EnforcementModeName | None = Field(
        default=None,
        description="Process-wide enforcement mode; derived from the environment when unset",
    )
    production_environments: list[str] = Field(
        default_factory=lambda: ["production", "staging"],
        description="Environments whose default enforcement mode is 'warn'",
    )
    default_category_key: str = Field(
        default="universal",
        description="Category key used when none can be resolved for a tenant",
    )
    next_actions_limit: int = Field(
        default=5, ge=1, description="Remediation entries surfaced as next actions"
    )
    golden_weights: GoldenWeights = Field(
        default_factory=GoldenWeights,
        description="Golden readiness score weights",
    )
    tier_weights: TierWeights = Field(
        default_factory=TierWeights,
        description="Overall tier score weights",
    )
    summary_limits: SummaryLimits = Field(
        default_factory=SummaryLimits,
        description="Read summary caps",
    )
    trace: TraceConfig = Field(
        default_factory=TraceConfig,
        description="Trace emission settings",
    )
    safety: SafetyConfig = Field(
        default_factory=SafetyConfig,
        description="Tenant-safety auditor settings",
    )
