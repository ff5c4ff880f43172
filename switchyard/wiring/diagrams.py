"""Mermaid diagrams embedded in the wiring report."""

from switchyard.wiring.models.enums import FieldStatus
from switchyard.wiring.models.report import Diagrams, EffectiveConfig, HealthReport

SYSTEM_OVERVIEW = """graph TD
    subgraph "Admin UI"
        UI[Control Plane UI]
    end

    subgraph "Storage"
        TENANT[(Tenant Record)]
        TEMPLATES[(Shared Templates)]
    end

    subgraph "Runtime"
        READER[Config Reader]
        POOL[Scenario Pool]
        LLM[LLM Fallback]
    end

    UI -->|saves| TENANT
    UI -->|references| TEMPLATES
    READER -->|reads| TENANT
    READER -->|loads via templateReferences| POOL
    POOL -->|fetches| TEMPLATES
    READER -->|falls back to| LLM

    style UI fill:#22d3ee
    style READER fill:#22c55e
    style TENANT fill:#f59e0b
    style TEMPLATES fill:#8b5cf6
"""

PIE_STATUSES = (
    FieldStatus.WIRED,
    FieldStatus.PARTIAL,
    FieldStatus.MISCONFIGURED,
    FieldStatus.UI_ONLY,
    FieldStatus.NOT_CONFIGURED,
)


def kill_switch_diagram(effective: EffectiveConfig) -> str:
    states = [
        f"{path}: {'ON' if state.is_blocking else 'OFF'}"
        for path, state in effective.kill_switches.items()
    ]
    label = "<br/>".join(states) or "none declared"
    blocked = any(state.is_blocking for state in effective.kill_switches.values())
    lines = [
        "graph LR",
        "    INPUT[Caller Input] --> KS{Kill Switches}",
        f'    KS -->|"{label}"| DECISION{{Scenarios allowed?}}',
        "    DECISION -->|yes| SCENARIOS[Scenario Matcher]",
        "    DECISION -->|no| LLM[LLM Only]",
    ]
    if blocked:
        lines.append("    style LLM fill:#ef4444")
    else:
        lines.append("    style SCENARIOS fill:#22c55e")
    return "\n".join(lines) + "\n"


def health_pie(health: HealthReport) -> str:
    lines = ["pie title Field Health Status"]
    for status in PIE_STATUSES:
        lines.append(f'    "{status.value}" : {health.by_status.get(status.value, 0)}')
    return "\n".join(lines) + "\n"


def build_diagrams(effective: EffectiveConfig, health: HealthReport) -> Diagrams:
    return Diagrams(
        system_overview=SYSTEM_OVERVIEW,
        kill_switches=kill_switch_diagram(effective),
        health_summary=health_pie(health),
    )
