"""Health and status engine.

Classifies every registry field for one tenant snapshot into exactly one
``FieldStatus`` from four inputs: whether runtime code reads it, whether the
tenant persisted a value, whether it is required, and its validators.
Derived fields are classified from the shared-template derivation instead.

Validation failures never raise; they become MISCONFIGURED fields with a
critical issue explaining what was expected and how to fix it.
"""

import json
from typing import Any

from switchyard.config.models.wiring import GoldenWeights
from switchyard.observability.logging import get_logger
from switchyard.wiring.catalog import WiringCatalog
from switchyard.wiring.content import embeds_shared_content
from switchyard.wiring.models.enums import FieldStatus, HealthColor, Provenance
from switchyard.wiring.models.registry import DerivedSource, FieldNode
from switchyard.wiring.models.report import (
    CriticalIssue,
    DeadRead,
    DerivedData,
    DiffEntry,
    FieldHealth,
    GoldenBlueprint,
    GoldenGap,
    HealthReport,
    HealthWarning,
    OptionalCoverage,
    RequiredCoverage,
    WiringDiff,
)
from switchyard.wiring.paths import value_preview
from switchyard.wiring.resolver import PathResolver
from switchyard.wiring.validators import first_failure

logger = get_logger(__name__)

DERIVED_SOURCE = "GLOBAL_TEMPLATE_DERIVED"
REQUIRED_EMPTY_REASON = "Required field is empty/missing"


def _percent(part: int, total: int) -> int:
    return round(part / total * 100) if total else 100


def _expected_default(field: FieldNode) -> str:
    if field.default_value is None:
        return "A non-empty value"
    return f"Default: {json.dumps(field.default_value, default=str)}"


class HealthEngine:
    """Computes field statuses, aggregate health and the wiring diff."""

    def __init__(self, catalog: WiringCatalog, weights: GoldenWeights | None = None) -> None:
        self._catalog = catalog
        self._resolver = PathResolver(catalog)
        self._weights = weights or GoldenWeights()

    def field_status(
        self, field: FieldNode, record: dict[str, Any], derived: DerivedData
    ) -> FieldHealth:
        """Classify a single field."""
        if field.is_derived:
            return self._derived_status(field, derived)

        resolution = self._resolver.resolve(field.id, record, include_default=False)
        has_value = not resolution.is_absent
        value = resolution.value
        has_runtime = self._catalog.has_runtime_reader(field.id)
        reason: str | None = None

        if has_value and embeds_shared_content(value):
            status = FieldStatus.TENANT_RISK
            reason = "Stored value embeds shared scenario content"
        elif not has_runtime:
            status = FieldStatus.UI_ONLY if has_value else FieldStatus.NOT_CONFIGURED
        elif not has_value:
            if field.required:
                status = FieldStatus.MISCONFIGURED
                reason = REQUIRED_EMPTY_REASON
            else:
                status = FieldStatus.NOT_CONFIGURED
        else:
            failed = first_failure(field.validators, value)
            if failed is not None:
                status = FieldStatus.MISCONFIGURED
                reason = failed.message
            else:
                status = FieldStatus.WIRED

        if resolution.resolved_from == Provenance.TENANT_RECORD:
            source = Provenance.TENANT_RECORD.value
        elif resolution.resolved_from == Provenance.LEGACY_BRIDGE:
            source = Provenance.LEGACY_BRIDGE.value
        elif field.has_default:
            source = Provenance.GLOBAL_DEFAULT.value
        else:
            source = "not_set"

        return FieldHealth(
            id=field.id,
            label=field.label,
            status=status,
            has_value=has_value,
            has_runtime=has_runtime,
            critical=field.critical,
            required=field.required,
            storage_path=field.storage_path,
            current_value=value,
            default_value=field.default_value,
            source=source,
            is_derived=False,
            reason=reason,
        )

    def evaluate(self, record: dict[str, Any], derived: DerivedData) -> HealthReport:
        """Classify every registry field and aggregate the result."""
        by_status = {status.value: 0 for status in FieldStatus}
        fields: list[FieldHealth] = []
        issues: list[CriticalIssue] = []
        warnings: list[HealthWarning] = []

        for field in self._catalog.registry.fields():
            health = self.field_status(field, record, derived)
            by_status[health.status.value] += 1
            fields.append(health)

            if health.status in (FieldStatus.MISCONFIGURED, FieldStatus.TENANT_RISK):
                issues.append(self._critical_issue(field, health))
            if health.is_derived and health.status != FieldStatus.WIRED:
                warnings.append(self._derived_warning(field, health, derived))
            if health.required and health.status == FieldStatus.UI_ONLY:
                warnings.append(
                    HealthWarning(
                        field_id=field.id,
                        label=field.label,
                        status=health.status,
                        message="Required field is saved but no runtime code reads it",
                        fix="Wire a runtime reader or drop the field from the registry",
                    )
                )

        dead_reads = self.dead_reads()
        by_status[FieldStatus.DEAD_READ.value] = len(dead_reads)

        if by_status[FieldStatus.MISCONFIGURED.value] > 0 or issues:
            overall = HealthColor.RED
        elif by_status[FieldStatus.UI_ONLY.value] > 0 or by_status[FieldStatus.PARTIAL.value] > 0:
            overall = HealthColor.YELLOW
        else:
            overall = HealthColor.GREEN

        required = [f for f in fields if f.required]
        optional = [f for f in fields if not f.required]
        required_missing = [f.id for f in required if f.status != FieldStatus.WIRED]
        required_coverage = RequiredCoverage(
            total=len(required),
            wired=len(required) - len(required_missing),
            missing=len(required_missing),
            percent=_percent(len(required) - len(required_missing), len(required)),
            missing_fields=required_missing,
        )
        configured = sum(
            1 for f in optional if f.status in (FieldStatus.WIRED, FieldStatus.PARTIAL)
        )
        optional_coverage = OptionalCoverage(
            total=len(optional),
            configured=configured,
            not_configured=len(optional) - configured,
            percent=_percent(configured, len(optional)),
        )

        report = HealthReport(
            overall=overall,
            by_status=by_status,
            fields=fields,
            critical_issues=issues,
            warnings=warnings,
            dead_reads=dead_reads,
            required_coverage=required_coverage,
            optional_coverage=optional_coverage,
            golden_blueprint=self._golden(
                required_coverage, optional_coverage, issues, by_status
            ),
        )
        logger.debug(
            "health_evaluated",
            overall=overall.value,
            critical_issues=len(issues),
            misconfigured=by_status[FieldStatus.MISCONFIGURED.value],
        )
        return report

    def dead_reads(self) -> list[DeadRead]:
        """Consumption-only paths. Independent of any tenant's data."""
        result = []
        for path in self._catalog.dead_read_paths:
            entry = self._catalog.entries_by_id[path]
            result.append(
                DeadRead(
                    path=path,
                    storage_path=entry.storage_path,
                    readers=[reader.location for reader in entry.readers],
                )
            )
        return result

    def diff(self, health: HealthReport) -> WiringDiff:
        """Three-way comparison of UI, persisted data and runtime reads."""
        ui_vs_db: list[DiffEntry] = []
        db_vs_runtime: list[DiffEntry] = []
        for entry in health.fields:
            field = self._catalog.fields_by_id[entry.id]
            if entry.required and not entry.is_derived and not entry.has_value:
                ui_vs_db.append(
                    DiffEntry(
                        field_id=entry.id,
                        issue="Required in UI but not saved in the tenant record",
                        ui_path=field.ui.path,
                        storage_path=entry.storage_path,
                    )
                )
            if entry.status == FieldStatus.UI_ONLY:
                db_vs_runtime.append(
                    DiffEntry(
                        field_id=entry.id,
                        issue="Saved in the tenant record but no runtime reader",
                        ui_path=field.ui.path,
                        storage_path=entry.storage_path,
                    )
                )
        runtime_vs_ui = [
            DiffEntry(
                field_id=dead.path,
                issue="Runtime reads but not in registry",
                storage_path=dead.storage_path,
            )
            for dead in health.dead_reads
        ]
        return WiringDiff(
            ui_vs_db=ui_vs_db,
            db_vs_runtime=db_vs_runtime,
            runtime_vs_ui=runtime_vs_ui,
            total=len(ui_vs_db) + len(db_vs_runtime) + len(runtime_vs_ui),
        )

    # --- internals ---------------------------------------------------------

    def _derived_status(self, field: FieldNode, derived: DerivedData) -> FieldHealth:
        if derived.derivation_error is not None:
            status = FieldStatus.PARTIAL
        elif derived.has_template_refs and derived.scenario_count > 0:
            status = FieldStatus.WIRED
        elif derived.has_template_refs:
            status = FieldStatus.PARTIAL
        else:
            status = FieldStatus.NOT_CONFIGURED

        return FieldHealth(
            id=field.id,
            label=field.label,
            status=status,
            has_value=derived.scenario_count > 0,
            has_runtime=self._catalog.has_runtime_reader(field.id),
            critical=field.critical,
            required=field.required,
            current_value=(
                f"{derived.scenario_count} scenarios from {derived.template_count} templates"
            ),
            source=DERIVED_SOURCE,
            is_derived=True,
            derivation_error=derived.derivation_error,
        )

    def _derived_warning(
        self, field: FieldNode, health: FieldHealth, derived: DerivedData
    ) -> HealthWarning:
        fixes = field.storage.fix_instructions if isinstance(field.storage, DerivedSource) else {}
        if derived.derivation_error is not None:
            message = f"Shared templates could not be loaded: {derived.derivation_error}"
            fix = fixes.get("templatesMissing", "Restore the linked shared templates")
        elif not derived.has_template_refs:
            message = "No templates linked to tenant"
            fix = fixes.get("noTemplateRefs", "Link templates in Data & Config")
        else:
            message = "Templates linked but contain 0 scenarios"
            fix = fixes.get("scenariosEmpty", "Add scenarios to the linked templates")
        return HealthWarning(
            field_id=field.id,
            label=field.label,
            status=health.status,
            message=message,
            fix=fix,
            template_count=derived.template_count,
            scenario_count=derived.scenario_count,
        )

    def _critical_issue(self, field: FieldNode, health: FieldHealth) -> CriticalIssue:
        actual = value_preview(health.current_value) if health.has_value else "empty"
        if health.status == FieldStatus.TENANT_RISK:
            expected = "Template references only"
            fix = "Remove the embedded scenario bodies and link shared templates by id"
        elif health.reason == REQUIRED_EMPTY_REASON:
            expected = _expected_default(field)
            fix = f"Set a value in {field.ui.path}" if field.ui.path else "Set a value"
        else:
            failed = first_failure(field.validators, health.current_value)
            expected = failed.message if failed is not None else "A valid value"
            fix = f"Correct the value in {field.ui.path}" if field.ui.path else "Correct the value"
        return CriticalIssue(
            field_id=field.id,
            label=field.label,
            status=health.status,
            reason=health.reason or "Invalid value",
            expected=expected,
            actual=actual,
            fix=fix,
            storage_path=field.storage_path,
            ui_path=field.ui.path or None,
            critical=field.critical,
            required=field.required,
        )

    def _golden(
        self,
        required: RequiredCoverage,
        optional: OptionalCoverage,
        issues: list[CriticalIssue],
        by_status: dict[str, int],
    ) -> GoldenBlueprint:
        weights = self._weights
        required_met = required.missing == 0
        no_critical = len(issues) == 0
        no_misconfigured = by_status[FieldStatus.MISCONFIGURED.value] == 0
        recommended_met = optional.percent >= weights.optional_coverage_threshold

        score = 0
        if required_met:
            score += weights.required_fields
        if no_critical:
            score += weights.no_critical_issues
        if no_misconfigured:
            score += weights.no_misconfigured
        if recommended_met:
            score += weights.optional_coverage

        gaps: list[GoldenGap] = []
        if not required_met:
            gaps.append(
                GoldenGap(
                    category="REQUIRED_FIELDS",
                    message=f"{required.missing} required field(s) not wired",
                    items=required.missing_fields,
                )
            )
        if not no_critical:
            gaps.append(
                GoldenGap(
                    category="CRITICAL_ISSUES",
                    message=f"{len(issues)} critical issue(s) to resolve",
                    items=[issue.field_id for issue in issues],
                )
            )
        return GoldenBlueprint(
            ready=required_met and no_critical and no_misconfigured,
            score=score,
            required_met=required_met,
            recommended_met=recommended_met,
            missing_for_golden=gaps,
        )
