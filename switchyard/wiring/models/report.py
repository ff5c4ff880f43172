"""Wiring report models.

Every section of the composite report is a pydantic model so the report can
be returned from the API as-is and rendered to markdown.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from switchyard.wiring.models.consumption import RuntimeReader
from switchyard.wiring.models.enums import (
    CheckSeverity,
    CheckStatus,
    FieldStatus,
    HealthColor,
    Provenance,
    Verdict,
)
from switchyard.wiring.models.tiers import TierDefinition, TierEvaluation


# --- derived data -----------------------------------------------------------


class DerivedData(BaseModel):
    """What a tenant receives from shared templates."""

    has_template_refs: bool = False
    template_count: int = 0
    scenario_count: int = 0
    scenario_ids: list[str] = Field(default_factory=list, description="Scenario ids only")
    effective_config_version: str | None = None
    derivation_error: str | None = Field(
        default=None, description="Why the scenario pool could not be loaded"
    )


# --- health -----------------------------------------------------------------


class FieldHealth(BaseModel):
    """Status of one registry field for one tenant."""

    id: str
    label: str
    status: FieldStatus
    has_value: bool
    has_runtime: bool
    critical: bool = False
    required: bool = False
    storage_path: str | None = None
    current_value: Any = None
    default_value: Any = None
    source: str = Field(
        ..., description="tenantRecord, legacyBridge, globalDefault, not_set or derived"
    )
    is_derived: bool = False
    reason: str | None = None
    derivation_error: str | None = None


class CriticalIssue(BaseModel):
    """Machine-readable explanation of a red field."""

    field_id: str
    label: str
    status: FieldStatus
    reason: str
    expected: str
    actual: str
    fix: str
    storage_path: str | None = None
    ui_path: str | None = None
    critical: bool = False
    required: bool = False


class HealthWarning(BaseModel):
    field_id: str
    label: str
    status: FieldStatus
    message: str
    fix: str | None = None
    template_count: int | None = None
    scenario_count: int | None = None


class DeadRead(BaseModel):
    """A path runtime code reads that the registry does not declare."""

    path: str
    status: FieldStatus = FieldStatus.DEAD_READ
    storage_path: str | None = None
    readers: list[str] = Field(default_factory=list)


class RequiredCoverage(BaseModel):
    total: int = 0
    wired: int = 0
    missing: int = 0
    percent: int = 0
    missing_fields: list[str] = Field(default_factory=list)


class OptionalCoverage(BaseModel):
    total: int = 0
    configured: int = 0
    not_configured: int = 0
    percent: int = 0


class GoldenGap(BaseModel):
    category: str
    message: str
    items: list[str] = Field(default_factory=list)


class GoldenBlueprint(BaseModel):
    """Weighted readiness score and what stands between the tenant and 100."""

    ready: bool = False
    score: int = 0
    required_met: bool = False
    recommended_met: bool = False
    missing_for_golden: list[GoldenGap] = Field(default_factory=list)


class HealthReport(BaseModel):
    overall: HealthColor = HealthColor.GREEN
    by_status: dict[str, int] = Field(default_factory=dict)
    fields: list[FieldHealth] = Field(default_factory=list)
    critical_issues: list[CriticalIssue] = Field(default_factory=list)
    warnings: list[HealthWarning] = Field(default_factory=list)
    dead_reads: list[DeadRead] = Field(default_factory=list)
    required_coverage: RequiredCoverage = Field(default_factory=RequiredCoverage)
    optional_coverage: OptionalCoverage = Field(default_factory=OptionalCoverage)
    golden_blueprint: GoldenBlueprint = Field(default_factory=GoldenBlueprint)

    def field(self, field_id: str) -> FieldHealth | None:
        return next((f for f in self.fields if f.id == field_id), None)


# --- diff -------------------------------------------------------------------


class DiffEntry(BaseModel):
    field_id: str
    issue: str
    ui_path: str | None = None
    storage_path: str | None = None


class WiringDiff(BaseModel):
    """Mismatches between the UI, persisted data and runtime consumption."""

    ui_vs_db: list[DiffEntry] = Field(
        default_factory=list, description="Required fields with no persisted value"
    )
    db_vs_runtime: list[DiffEntry] = Field(
        default_factory=list, description="Persisted values no runtime code reads"
    )
    runtime_vs_ui: list[DiffEntry] = Field(
        default_factory=list, description="Runtime reads missing from the registry"
    )
    total: int = 0


# --- tenant safety ----------------------------------------------------------


class SafetyCheck(BaseModel):
    id: str
    description: str
    severity: CheckSeverity
    status: CheckStatus
    passed: bool
    detail: dict[str, Any] = Field(default_factory=dict)


class SafetyViolation(BaseModel):
    rule: str
    severity: CheckSeverity
    message: str


class ScopeProof(BaseModel):
    """What a tenant's configuration draws from, by reference only."""

    tenant_id: str
    category_key: str
    template_ids_used: list[str] = Field(default_factory=list)
    templates_used: list[dict[str, Any]] = Field(default_factory=list)
    scenario_ids_used: list[str] = Field(default_factory=list)
    no_embedded_scenario_bodies: bool = True
    config_source_chain: list[str] = Field(
        default_factory=lambda: ["globalDefault", "legacyBridge", "tenantRecord"]
    )


class SafetySummary(BaseModel):
    total_checks: int
    passed: int
    failed: int
    critical_violations: int
    warnings: int
    verdict: Verdict


class TenantSafetyProof(BaseModel):
    passed: bool
    verdict: Verdict
    checks: list[SafetyCheck] = Field(default_factory=list)
    violations: list[SafetyViolation] = Field(default_factory=list)
    summary: SafetySummary
    scope_proof: ScopeProof


# --- effective config -------------------------------------------------------


class EffectiveConfigEntry(BaseModel):
    id: str
    label: str
    value: Any = None
    resolved_from: Provenance
    provenance_hash: str
    scope: str = "company"


class KillSwitchState(BaseModel):
    value: Any = None
    effect: str | None = None
    is_blocking: bool = False


class CriticalFieldState(BaseModel):
    value: Any = None
    has_value: bool = False
    required: bool = False


class EffectiveConfig(BaseModel):
    fields: list[EffectiveConfigEntry] = Field(default_factory=list)
    kill_switches: dict[str, KillSwitchState] = Field(default_factory=dict)
    critical_fields: dict[str, CriticalFieldState] = Field(default_factory=dict)


# --- maps -------------------------------------------------------------------


class UiMapTab(BaseModel):
    id: str
    label: str
    critical: bool = False
    deprecated: bool = False


class UiMapSection(BaseModel):
    id: str
    label: str
    tab_id: str
    ui_path: str = ""
    critical: bool = False


class UiMapField(BaseModel):
    id: str
    label: str
    section_id: str
    tab_id: str
    ui_path: str = ""
    required: bool = False
    critical: bool = False


class UiMap(BaseModel):
    tabs: list[UiMapTab] = Field(default_factory=list)
    sections: list[UiMapSection] = Field(default_factory=list)
    fields: list[UiMapField] = Field(default_factory=list)
    total_tabs: int = 0
    total_sections: int = 0
    total_fields: int = 0


class DataMapField(BaseModel):
    id: str
    storage_path: str | None = None
    collection: str | None = None
    value: Any = None
    source: str = Field(..., description="tenantRecord, globalDefault, not_found or derived")
    has_value: bool = False
    is_derived: bool = False


class DataCoverage(BaseModel):
    total: int = 0
    found: int = 0
    missing: int = 0


class DataMap(BaseModel):
    fields: list[DataMapField] = Field(default_factory=list)
    coverage: DataCoverage = Field(default_factory=DataCoverage)
    template_references: list[dict[str, Any]] = Field(
        default_factory=list, description="Enabled template references"
    )


class RuntimeMapEntry(BaseModel):
    path: str
    storage_path: str | None = None
    legacy_storage_path: str | None = None
    scope: str = "company"
    in_registry: bool = True
    readers_count: int = 0
    readers: list[RuntimeReader] = Field(default_factory=list)
    default_value: Any = None


class RuntimeMap(BaseModel):
    entries: list[RuntimeMapEntry] = Field(default_factory=list)
    total: int = 0


# --- summary sections -------------------------------------------------------


class ScoreboardCheck(BaseModel):
    label: str
    value: str
    percent: int
    status: HealthColor


class Scoreboard(BaseModel):
    ui_coverage: ScoreboardCheck
    db_coverage: ScoreboardCheck
    runtime_coverage: ScoreboardCheck
    tenant_safety: ScoreboardCheck
    dead_config: ScoreboardCheck


class CoverageAnalysis(BaseModel):
    total_ui_paths: int
    total_runtime_paths: int
    wired_count: int
    ui_only_count: int
    dead_read_count: int
    runtime_coverage_percent: int
    wired_paths: list[str] = Field(default_factory=list)
    ui_only_paths: list[str] = Field(default_factory=list)
    dead_read_paths: list[str] = Field(default_factory=list)


class Diagrams(BaseModel):
    """Mermaid sources."""

    system_overview: str
    kill_switches: str
    health_summary: str


class ReportMeta(BaseModel):
    schema_version: str
    generated_at: datetime
    generation_time_ms: int = 0
    report_type: str = "WIRING_REPORT_V2"


class ReportScope(BaseModel):
    tenant_id: str
    tenant_name: str | None = None
    category_key: str
    category_key_source: str = Field(
        ..., description="requested, tenant, inferredFromTemplates or default"
    )
    requested_category_key: str | None = None
    tenant_category_key: str | None = None
    inferred_category_key: str | None = None
    environment: str
    effective_config_version: str | None = None


class WiringReport(BaseModel):
    """Composite wiring report for one tenant."""

    meta: ReportMeta
    scope: ReportScope
    scoreboard: Scoreboard
    ui_map: UiMap
    data_map: DataMap
    runtime_map: RuntimeMap
    effective_config: EffectiveConfig
    health: HealthReport
    diff: WiringDiff
    tenant_safety_proof: TenantSafetyProof
    diagrams: Diagrams
    tier_evaluation: TierEvaluation
    tier_definitions: list[TierDefinition] = Field(default_factory=list)
    derived_data: DerivedData
    coverage: CoverageAnalysis
