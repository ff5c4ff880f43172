"""Report section builders.

Pure functions over the catalog, a tenant record and already-computed
results. None of them perform I/O.
"""

from typing import Any

from switchyard.tenants.models import enabled_template_refs
from switchyard.wiring.catalog import WiringCatalog
from switchyard.wiring.models.enums import HealthColor
from switchyard.wiring.models.report import (
    CoverageAnalysis,
    CriticalFieldState,
    DataCoverage,
    DataMap,
    DataMapField,
    EffectiveConfig,
    EffectiveConfigEntry,
    KillSwitchState,
    RuntimeMap,
    RuntimeMapEntry,
    Scoreboard,
    ScoreboardCheck,
    TenantSafetyProof,
    UiMap,
    UiMapField,
    UiMapSection,
    UiMapTab,
)
from switchyard.wiring.paths import content_hash, get_path, is_empty
from switchyard.wiring.resolver import PathResolver

COVERAGE_PATH_LIMIT = 20


def _percent(part: int, total: int) -> int:
    return round(part / total * 100) if total else 0


def build_ui_map(catalog: WiringCatalog) -> UiMap:
    tabs: list[UiMapTab] = []
    sections: list[UiMapSection] = []
    fields: list[UiMapField] = []
    for tab in catalog.registry.tabs:
        tabs.append(
            UiMapTab(id=tab.id, label=tab.label, critical=tab.critical, deprecated=tab.deprecated)
        )
        for section in tab.sections:
            sections.append(
                UiMapSection(
                    id=section.id,
                    label=section.label,
                    tab_id=tab.id,
                    ui_path=section.ui_path,
                    critical=section.critical,
                )
            )
            for field in section.fields:
                fields.append(
                    UiMapField(
                        id=field.id,
                        label=field.label,
                        section_id=section.id,
                        tab_id=tab.id,
                        ui_path=field.ui.path,
                        required=field.required,
                        critical=field.critical,
                    )
                )
    return UiMap(
        tabs=tabs,
        sections=sections,
        fields=fields,
        total_tabs=len(tabs),
        total_sections=len(sections),
        total_fields=len(fields),
    )


def build_data_map(catalog: WiringCatalog, record: dict[str, Any]) -> DataMap:
    """Persisted value of every registry field.

    Derived fields are listed but do not count toward storage coverage.
    """
    fields: list[DataMapField] = []
    found = missing = total = 0
    for field in catalog.registry.fields():
        storage_path = field.storage_path
        if field.is_derived or storage_path is None:
            fields.append(
                DataMapField(
                    id=field.id,
                    storage_path=None,
                    collection=None,
                    source="derived",
                    is_derived=True,
                )
            )
            continue

        total += 1
        value = get_path(record, storage_path)
        if not is_empty(value):
            source = "tenantRecord"
            found += 1
        elif field.default_value is not None:
            value = field.default_value
            source = "globalDefault"
        else:
            value = None
            source = "not_found"
            missing += 1

        fields.append(
            DataMapField(
                id=field.id,
                storage_path=storage_path,
                collection=field.storage.collection,
                value=value,
                source=source,
                has_value=not is_empty(value),
            )
        )

    return DataMap(
        fields=fields,
        coverage=DataCoverage(total=total, found=found, missing=missing),
        template_references=enabled_template_refs(record),
    )


def build_runtime_map(catalog: WiringCatalog) -> RuntimeMap:
    entries: list[RuntimeMapEntry] = []
    for entry in catalog.consumption.entries:
        bridge = catalog.bridges_by_path.get(entry.id)
        legacy = entry.legacy_storage_path or (bridge.legacy_storage_path if bridge else None)
        entries.append(
            RuntimeMapEntry(
                path=entry.id,
                storage_path=catalog.storage_map.get(entry.id),
                legacy_storage_path=legacy,
                scope=entry.scope,
                in_registry=entry.id in catalog.registered_paths,
                readers_count=len(entry.readers),
                readers=list(entry.readers),
                default_value=entry.default_value,
            )
        )
    return RuntimeMap(entries=entries, total=len(entries))


def build_effective_config(catalog: WiringCatalog, record: dict[str, Any]) -> EffectiveConfig:
    """Effective value of every stored field with provenance.

    Kill switches block only when the effective value is exactly ``True``.
    """
    resolver = PathResolver(catalog)
    entries: list[EffectiveConfigEntry] = []
    kill_switches: dict[str, KillSwitchState] = {}
    critical_fields: dict[str, CriticalFieldState] = {}

    for field in catalog.registry.fields():
        if field.is_derived:
            continue
        resolution = resolver.resolve(field.id, record)
        value = resolution.value
        entries.append(
            EffectiveConfigEntry(
                id=field.id,
                label=field.label,
                value=value,
                resolved_from=resolution.resolved_from,
                provenance_hash=content_hash(
                    {"path": field.id, "from": resolution.resolved_from.value, "value": value},
                    length=12,
                ),
                scope=field.scope,
            )
        )
        if field.kill_switch:
            kill_switches[field.id] = KillSwitchState(
                value=value,
                effect=field.kill_switch_effect,
                is_blocking=value is True,
            )
        if field.critical:
            critical_fields[field.id] = CriticalFieldState(
                value=value,
                has_value=not is_empty(value),
                required=field.required,
            )

    return EffectiveConfig(
        fields=entries,
        kill_switches=kill_switches,
        critical_fields=critical_fields,
    )


def analyze_coverage(catalog: WiringCatalog) -> CoverageAnalysis:
    """Registry fields against consumption entries."""
    ui_paths = [field.id for field in catalog.registry.fields()]
    wired = [path for path in ui_paths if path in catalog.consumed_paths]
    ui_only = list(catalog.ui_only_paths)
    dead = list(catalog.dead_read_paths)
    return CoverageAnalysis(
        total_ui_paths=len(ui_paths),
        total_runtime_paths=len(catalog.consumed_paths),
        wired_count=len(wired),
        ui_only_count=len(ui_only),
        dead_read_count=len(dead),
        runtime_coverage_percent=_percent(len(wired), len(ui_paths)),
        wired_paths=wired,
        ui_only_paths=ui_only[:COVERAGE_PATH_LIMIT],
        dead_read_paths=dead[:COVERAGE_PATH_LIMIT],
    )


def build_scoreboard(
    ui_map: UiMap,
    data_map: DataMap,
    coverage: CoverageAnalysis,
    safety: TenantSafetyProof,
) -> Scoreboard:
    db = data_map.coverage
    runtime_percent = coverage.runtime_coverage_percent
    if runtime_percent > 80:
        runtime_status = HealthColor.GREEN
    elif runtime_percent > 50:
        runtime_status = HealthColor.YELLOW
    else:
        runtime_status = HealthColor.RED

    dead_count = coverage.ui_only_count + coverage.dead_read_count
    return Scoreboard(
        ui_coverage=ScoreboardCheck(
            label="UI Coverage",
            value=f"{ui_map.total_fields} fields",
            percent=100,
            status=HealthColor.GREEN,
        ),
        db_coverage=ScoreboardCheck(
            label="DB Coverage",
            value=f"{db.found}/{db.total}",
            percent=_percent(db.found, db.total) if db.total else 100,
            status=HealthColor.GREEN if db.found == db.total else HealthColor.YELLOW,
        ),
        runtime_coverage=ScoreboardCheck(
            label="Runtime Coverage",
            value=f"{coverage.wired_count}/{coverage.total_ui_paths}",
            percent=runtime_percent,
            status=runtime_status,
        ),
        tenant_safety=ScoreboardCheck(
            label="Tenant Safety",
            value="PASSED" if safety.passed else f"{len(safety.violations)} violations",
            percent=100 if safety.passed else 0,
            status=HealthColor.GREEN if safety.passed else HealthColor.RED,
        ),
        dead_config=ScoreboardCheck(
            label="Dead Config",
            value=f"{dead_count} items",
            percent=100 if dead_count == 0 else 0,
            status=HealthColor.GREEN if dead_count == 0 else HealthColor.YELLOW,
        ),
    )
