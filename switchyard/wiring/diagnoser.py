"""Evidence diagnoser: explains an observed run with a deterministic rule table."""

from typing import Any

from simpleeval import EvalWithCompoundTypes, InvalidExpression

from switchyard.observability.logging import get_logger
from switchyard.wiring.declarations.diagnostic_rules import DIAGNOSTIC_RULES
from switchyard.wiring.declarations.flow_tree import get_node
from switchyard.wiring.models.diagnosis import (
    DiagnosedIssue,
    Diagnosis,
    DiagnosticRule,
    EvidenceSnapshot,
    PatchEntry,
)

logger = get_logger(__name__)


class EvidenceDiagnoser:
    """Match an evidence snapshot against the failure table.

    Conditions are evaluated with simpleeval, so rules are plain data and
    cannot execute arbitrary code. A rule whose condition fails to evaluate
    does not match.
    """

    SAFE_FUNCTIONS = {
        "len": len,
        "abs": abs,
        "min": min,
        "max": max,
        "int": int,
        "float": float,
        "bool": bool,
    }

    def __init__(self, rules: tuple[DiagnosticRule, ...] = DIAGNOSTIC_RULES) -> None:
        self._rules = rules

    @property
    def rules(self) -> tuple[DiagnosticRule, ...]:
        return self._rules

    def matches(self, rule: DiagnosticRule, variables: dict[str, Any]) -> bool:
        try:
            evaluator = EvalWithCompoundTypes(
                names=variables,
                functions=self.SAFE_FUNCTIONS,
            )
            return bool(evaluator.eval(rule.condition))

        except InvalidExpression as e:
            logger.warning(
                "diagnostic_rule_syntax_error",
                rule_id=rule.id,
                condition=rule.condition,
                error=str(e),
            )
            return False

        except KeyError as e:
            logger.warning(
                "diagnostic_rule_undefined_variable",
                rule_id=rule.id,
                missing_variable=str(e),
            )
            return False

        except Exception as e:  # noqa: BLE001
            logger.error(
                "diagnostic_rule_evaluation_error",
                rule_id=rule.id,
                error=str(e),
            )
            return False

    def diagnose(self, snapshot: EvidenceSnapshot, tenant_id: str) -> Diagnosis:
        """Collect every matching rule, most severe first.

        Args:
            snapshot: Normalized evidence from one observed run
            tenant_id: Tenant the run belongs to

        Returns:
            Diagnosis with matched issues and a de-duplicated patch list
        """
        variables = snapshot.model_dump(mode="json")
        issues: list[DiagnosedIssue] = []
        for rule in self._rules:
            if not self.matches(rule, variables):
                continue
            node = get_node(rule.root_cause_node)
            issues.append(
                DiagnosedIssue(
                    rule_id=rule.id,
                    severity=rule.severity,
                    root_cause_node=rule.root_cause_node,
                    root_cause_label=node.label if node is not None else None,
                    title=rule.title,
                    rule=rule.rule,
                    fix=rule.fix,
                    patch=list(rule.patch),
                )
            )

        # Stable sort keeps table order within a severity
        issues.sort(key=lambda issue: issue.severity.rank)

        patch: list[PatchEntry] = []
        seen: set[str] = set()
        for issue in issues:
            for entry in issue.patch:
                if entry.field_id not in seen:
                    seen.add(entry.field_id)
                    patch.append(entry)

        logger.info(
            "evidence_diagnosed",
            tenant_id=tenant_id,
            call_id=snapshot.call_id,
            issues=len(issues),
            rule_ids=[issue.rule_id for issue in issues],
        )
        return Diagnosis(
            tenant_id=tenant_id,
            healthy=not issues,
            evidence=snapshot,
            issues=issues,
            patch_description=patch,
        )
