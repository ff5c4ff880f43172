"""Plain-text rendering of a wiring report for humans."""

import json

from switchyard.wiring.models.enums import HealthColor
from switchyard.wiring.models.report import WiringReport

_STATUS_MARK = {
    HealthColor.GREEN: "✅",
    HealthColor.YELLOW: "⚠️",
    HealthColor.RED: "🔴",
}


def _value(value: object) -> str:
    return json.dumps(value, default=str) if not isinstance(value, str) else value


def report_to_markdown(report: WiringReport) -> str:
    """Render the parts of a report an operator acts on."""
    scope = report.scope
    lines: list[str] = [
        f"# Wiring Report: {scope.tenant_name or scope.tenant_id}",
        "",
        f"**Generated:** {report.meta.generated_at.isoformat()}",
        f"**Tenant ID:** {scope.tenant_id}",
        f"**Category:** {scope.category_key} ({scope.category_key_source})",
        f"**Environment:** {scope.environment}",
        f"**Health:** {report.health.overall.value}",
        "",
        "## Scoreboard",
        "",
        "| Check | Value | Status |",
        "|-------|-------|--------|",
    ]
    board = report.scoreboard
    for check in (
        board.ui_coverage,
        board.db_coverage,
        board.runtime_coverage,
        board.tenant_safety,
        board.dead_config,
    ):
        mark = _STATUS_MARK[check.status]
        lines.append(
            f"| {check.label} | {check.value} ({check.percent}%) | {mark} {check.status.value} |"
        )
    lines.append("")

    if report.health.critical_issues:
        lines += ["## 🔴 Critical Issues", ""]
        for issue in report.health.critical_issues:
            lines.append(f"- **{issue.label}** (`{issue.field_id}`): {issue.reason}")
            lines.append(f"  - Fix: {issue.fix}")
        lines.append("")

    lines += ["## Kill Switches", ""]
    for path, state in report.effective_config.kill_switches.items():
        mark = "🔴" if state.is_blocking else "✅"
        suffix = " (BLOCKING)" if state.is_blocking else ""
        lines.append(f"- {mark} **{path}**: {_value(state.value)}{suffix}")
        if state.effect:
            lines.append(f"  - Effect: {state.effect}")
    lines.append("")

    proof = report.tenant_safety_proof
    lines += [
        "## Tenant Safety",
        "",
        f"**Verdict:** {'✅' if proof.passed else '🔴'} {proof.verdict.value}",
        "",
    ]
    for check in proof.checks:
        mark = "✅" if check.passed else "🔴"
        lines.append(f"- {mark} {check.description} [{check.severity.value}]")
    lines.append("")

    tiers = report.tier_evaluation
    lines += [
        "## Readiness Tiers",
        "",
        f"**Current tier:** {tiers.display_tier.icon} {tiers.display_tier.name}"
        f" (overall {tiers.overall_score}%)",
        "",
    ]
    for result in tiers.by_tier.values():
        lock = "" if result.is_unlocked else " 🔒"
        lines.append(
            f"- {result.icon} {result.name}: {result.complete}/{result.total} ({result.percent}%){lock}"
        )
    if tiers.next_actions:
        lines += ["", "### Next Actions", ""]
        for index, action in enumerate(tiers.next_actions, start=1):
            flag = " **CRITICAL**" if action.critical else ""
            lines.append(f"{index}. [{action.tier.value}] {action.label}{flag}: {action.fix_instructions}")
    lines.append("")

    lines += [
        "## Diagrams",
        "",
        "### System Overview",
        "```mermaid",
        report.diagrams.system_overview.strip(),
        "```",
        "",
    ]
    return "\n".join(lines)
