"""Readiness tier models: declarations and evaluation results."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from switchyard.wiring.models.enums import FieldStatus, ImpactCategory, TierLevel
from switchyard.wiring.models.registry import ValidatorSpec


class TierRequirement(BaseModel):
    """One thing a tenant must have configured to reach a tier.

    Truth is decided by ``validator`` if set, else by an exact match against
    ``must_be``, else by the field's status being WIRED.
    """

    model_config = ConfigDict(frozen=True)

    field_id: str = Field(..., description="Registry field the requirement checks")
    purpose: str = Field(..., description="What the field does")
    failure_mode: str = Field(..., description="What happens when it is missing")
    impact: ImpactCategory = Field(..., description="Business impact category")
    priority: int = Field(default=99, ge=1, description="Order within the tier, lower first")
    critical: bool = Field(default=False, description="Blocks the agent outright")
    must_be: bool | None = Field(default=None, description="Required exact boolean state")
    validator: ValidatorSpec | None = Field(default=None, description="Custom predicate")
    recommended_value: Any = Field(
        default=None, description="Value an operator can accept to remediate"
    )
    requires_user_input: bool = Field(
        default=False, description="Needs tenant-specific data; cannot be auto-applied"
    )
    payoff: str | None = Field(default=None, description="Expected benefit once fixed")
    fix_instructions: str = Field(default="", description="Where to fix it")

    @property
    def auto_appliable(self) -> bool:
        return self.recommended_value is not None and not self.requires_user_input


class TierDefinition(BaseModel):
    """An ordered readiness level."""

    model_config = ConfigDict(frozen=True)

    id: TierLevel
    name: str
    description: str
    color: str
    icon: str
    requirements: tuple[TierRequirement, ...] = Field(default_factory=tuple)


class MissingRequirement(BaseModel):
    """An unmet requirement with the field state that failed it."""

    field_id: str
    label: str
    purpose: str
    failure_mode: str
    impact: ImpactCategory
    priority: int
    critical: bool = False
    payoff: str | None = None
    fix_instructions: str = ""
    current_value: Any = None
    current_status: FieldStatus | None = None
    recommended_value: Any = None
    requires_user_input: bool = False
    auto_appliable: bool = False


class TierResult(BaseModel):
    """Evaluation of one tier for one tenant."""

    id: TierLevel
    name: str
    description: str
    color: str
    icon: str
    total: int
    complete: int
    percent: int = Field(..., ge=0, le=100)
    is_complete: bool
    is_unlocked: bool
    missing: list[MissingRequirement] = Field(default_factory=list)
    complete_items: list[str] = Field(default_factory=list)


class RemediationItem(MissingRequirement):
    """A queued fix, tagged with the tier it belongs to."""

    tier: TierLevel


class DisplayTier(BaseModel):
    id: TierLevel
    name: str
    icon: str
    color: str


class TierEvaluation(BaseModel):
    """Tier gate output for one tenant."""

    current_tier: TierLevel = TierLevel.NONE
    display_tier: DisplayTier
    tier_scores: dict[str, int] = Field(default_factory=dict)
    overall_score: int = Field(default=0, ge=0, le=100)
    by_tier: dict[str, TierResult] = Field(default_factory=dict)
    remediation_queue: list[RemediationItem] = Field(default_factory=list)
    next_actions: list[RemediationItem] = Field(default_factory=list)
