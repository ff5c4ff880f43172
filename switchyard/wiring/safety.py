"""Tenant-safety auditor.

Runs a fixed, ordered battery of cross-tenant isolation checks against one
tenant record. Checks are independent and side-effect free. A check that
raises is recorded as ERROR and counted as failed; the audit itself always
completes. Only CRITICAL failures make the verdict UNSAFE.
"""

import re
from collections.abc import Callable
from typing import Any

from switchyard.config.models.wiring import SafetyConfig
from switchyard.observability.logging import get_logger
from switchyard.observability.metrics import TENANT_SAFETY_VERDICTS
from switchyard.tenants.models import enabled_template_refs, tenant_id_of
from switchyard.wiring.content import find_scenario_text_paths, has_scenario_text
from switchyard.wiring.models.enums import CheckSeverity, CheckStatus, Verdict
from switchyard.wiring.models.report import (
    DerivedData,
    SafetyCheck,
    SafetySummary,
    SafetyViolation,
    ScopeProof,
    TenantSafetyProof,
)
from switchyard.wiring.paths import get_path

logger = get_logger(__name__)

PLACEHOLDER_TOKEN = re.compile(r"\{(\w+)\}")

# Free-text fields inspected for placeholders and hardcoded data
TEXT_FIELD_PATHS = (
    "aiAgentSettings.frontDeskBehavior.greetingResponses",
    "aiAgentSettings.frontDeskBehavior.fallbackResponses",
)

SHARED_RESOURCE_KEYS = ("scenarios", "categories", "templates")

CheckResult = tuple[bool, dict[str, Any]]


def _strings(value: Any) -> list[str]:
    """Every string inside a nested value."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, dict):
        return [s for v in value.values() for s in _strings(v)]
    if isinstance(value, list):
        return [s for item in value for s in _strings(item)]
    return []


def trade_key_of(record: dict[str, Any]) -> str | None:
    """The tenant's explicitly stored category (trade) key, if any."""
    for path in ("aiAgentSettings.tradeKey", "tradeKey", "trade"):
        value = get_path(record, path)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


class TenantSafetyAuditor:
    """Produces a tenant-safety proof for one tenant record."""

    def __init__(self, config: SafetyConfig | None = None) -> None:
        self._config = config or SafetyConfig()
        self._phone = re.compile(self._config.phone_pattern)
        self._checks: list[tuple[str, str, CheckSeverity, Callable[..., CheckResult], str]] = [
            (
                "COMPANY_ID_MATCH",
                "Tenant record ID matches the requested ID",
                CheckSeverity.CRITICAL,
                self._check_id_match,
                "Tenant ID mismatch - possible tenant bleed",
            ),
            (
                "NO_EMBEDDED_SCENARIOS",
                "Template references contain IDs only, not embedded scenario bodies",
                CheckSeverity.CRITICAL,
                self._check_no_embedded_scenarios,
                "Tenant record contains embedded scenarios - violates shared template rule",
            ),
            (
                "NO_SCENARIO_TEXT",
                "Tenant record does not contain scenario text (triggers/quickReplies)",
                CheckSeverity.CRITICAL,
                self._check_no_scenario_text,
                "Tenant record appears to contain scenario text - violates shared template rule",
            ),
            (
                "TRADE_KEY_SET",
                "Tenant has an explicit trade key (prevents cross-trade scenario bleed)",
                CheckSeverity.WARNING,
                self._check_trade_key,
                "No explicit trade key - tenant may receive scenarios from other trades",
            ),
            (
                "PLACEHOLDERS_ALLOWLIST",
                "Tenant placeholders use only allowed keys",
                CheckSeverity.WARNING,
                self._check_placeholders,
                "Unknown placeholder keys",
            ),
            (
                "NO_HARDCODED_COMPANY_DATA",
                "Tenant responses use placeholders, not hardcoded values",
                CheckSeverity.WARNING,
                self._check_no_hardcoded_data,
                "Some responses contain hardcoded business data instead of placeholders",
            ),
            (
                "COMPANY_STORES_REFS_ONLY",
                "Tenant record only stores references to shared resources, not the resources",
                CheckSeverity.CRITICAL,
                self._check_refs_only,
                "Tenant record contains direct scenarios/categories/templates - use references only",
            ),
        ]

    @property
    def check_ids(self) -> list[str]:
        return [check[0] for check in self._checks]

    def audit(
        self,
        record: dict[str, Any],
        tenant_id: str,
        *,
        category_key: str,
        derived: DerivedData | None = None,
    ) -> TenantSafetyProof:
        """Run every check in order and aggregate the verdict."""
        derived = derived or DerivedData()
        checks: list[SafetyCheck] = []
        violations: list[SafetyViolation] = []

        for check_id, description, severity, fn, message in self._checks:
            try:
                passed, detail = fn(record, tenant_id)
                status = CheckStatus.PASSED if passed else CheckStatus.FAILED
            except Exception as e:  # noqa: BLE001
                logger.error(
                    "tenant_safety_check_failed",
                    check=check_id,
                    tenant_id=tenant_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                passed, status = False, CheckStatus.ERROR
                detail = {"error": str(e)}
                message = f"Check could not be evaluated: {e}"

            checks.append(
                SafetyCheck(
                    id=check_id,
                    description=description,
                    severity=severity,
                    status=status,
                    passed=passed,
                    detail=detail,
                )
            )
            if not passed:
                if check_id == "PLACEHOLDERS_ALLOWLIST" and detail.get("invalid_keys"):
                    message = f"{message}: {', '.join(detail['invalid_keys'])}"
                violations.append(SafetyViolation(rule=check_id, severity=severity, message=message))

        critical = [v for v in violations if v.severity == CheckSeverity.CRITICAL]
        verdict = Verdict.UNSAFE if critical else Verdict.SAFE
        passed_count = sum(1 for c in checks if c.passed)
        summary = SafetySummary(
            total_checks=len(checks),
            passed=passed_count,
            failed=len(checks) - passed_count,
            critical_violations=len(critical),
            warnings=len(violations) - len(critical),
            verdict=verdict,
        )

        refs = enabled_template_refs(record)
        by_id = {c.id: c for c in checks}
        scope = ScopeProof(
            tenant_id=tenant_id,
            category_key=category_key,
            template_ids_used=[str(r["templateId"]) for r in refs if r.get("templateId")],
            templates_used=[
                {
                    "id": str(r.get("templateId") or "unknown"),
                    "name": r.get("templateName") or "Unnamed Template",
                    "priority": r.get("priority") or 1,
                    "enabled": True,
                }
                for r in refs
            ],
            scenario_ids_used=list(derived.scenario_ids),
            no_embedded_scenario_bodies=(
                by_id["NO_EMBEDDED_SCENARIOS"].passed and by_id["NO_SCENARIO_TEXT"].passed
            ),
        )

        TENANT_SAFETY_VERDICTS.labels(verdict=verdict.value).inc()
        logger.info(
            "tenant_safety_evaluated",
            tenant_id=tenant_id,
            verdict=verdict.value,
            critical_violations=len(critical),
            warnings=summary.warnings,
        )
        return TenantSafetyProof(
            passed=verdict == Verdict.SAFE,
            verdict=verdict,
            checks=checks,
            violations=violations,
            summary=summary,
            scope_proof=scope,
        )

    # --- checks ------------------------------------------------------------

    def _check_id_match(self, record: dict[str, Any], tenant_id: str) -> CheckResult:
        actual = tenant_id_of(record)
        return actual == tenant_id, {"expected": tenant_id, "actual": actual}

    def _check_no_embedded_scenarios(self, record: dict[str, Any], _tenant_id: str) -> CheckResult:
        refs = get_path(record, "aiAgentSettings.templateReferences")
        refs = refs if isinstance(refs, list) else []
        offending = [
            str(ref.get("templateId", index))
            for index, ref in enumerate(refs)
            if isinstance(ref, dict)
            and isinstance(ref.get("scenarios"), list)
            and len(ref["scenarios"]) > 0
        ]
        return not offending, {"template_ref_count": len(refs), "offending_refs": offending}

    def _check_no_scenario_text(self, record: dict[str, Any], _tenant_id: str) -> CheckResult:
        if not has_scenario_text(record):
            return True, {}
        return False, {"paths": find_scenario_text_paths(record)[:20]}

    def _check_trade_key(self, record: dict[str, Any], _tenant_id: str) -> CheckResult:
        trade_key = trade_key_of(record)
        return trade_key is not None, {"trade_key": trade_key or "NOT_SET"}

    def _check_placeholders(self, record: dict[str, Any], _tenant_id: str) -> CheckResult:
        allowed = set(self._config.allowed_placeholder_keys)
        placeholders = get_path(record, "aiAgentSettings.placeholders")
        keys = list(placeholders) if isinstance(placeholders, dict) else []
        for path in TEXT_FIELD_PATHS:
            for text in _strings(get_path(record, path)):
                keys.extend(PLACEHOLDER_TOKEN.findall(text))
        invalid = sorted({key for key in keys if key not in allowed})
        return not invalid, {"allowed_keys": sorted(allowed), "invalid_keys": invalid}

    def _check_no_hardcoded_data(self, record: dict[str, Any], _tenant_id: str) -> CheckResult:
        own_name = str(record.get("companyName") or record.get("name") or "").lower()
        names = [n for n in self._config.known_tenant_names if n.lower() != own_name]
        name_pattern = (
            re.compile(r"\b(" + "|".join(re.escape(n) for n in names) + r")\b", re.IGNORECASE)
            if names
            else None
        )

        findings: list[str] = []
        for path in TEXT_FIELD_PATHS:
            for text in _strings(get_path(record, path)):
                bare = PLACEHOLDER_TOKEN.sub("", text)
                if name_pattern is not None and name_pattern.search(bare):
                    findings.append(f"{path}: business name")
                if self._phone.search(bare):
                    findings.append(f"{path}: phone number")
        return not findings, {"findings": findings}

    def _check_refs_only(self, record: dict[str, Any], _tenant_id: str) -> CheckResult:
        present = [key for key in SHARED_RESOURCE_KEYS if record.get(key)]
        return not present, {"direct_resources": present}
