"""Tier gate: readiness tiers evaluated over a health report.

Tiers are ordered and gated: a tier is unlocked only when the previous one
is complete, and the remediation queue only draws from unlocked tiers.
"""

from typing import Any

from switchyard.config.models.wiring import TierWeights
from switchyard.observability.logging import get_logger
from switchyard.wiring.catalog import WiringCatalog
from switchyard.wiring.declarations.tiers import NOT_READY_DISPLAY
from switchyard.wiring.models.enums import FieldStatus, TierLevel
from switchyard.wiring.models.report import FieldHealth, HealthReport
from switchyard.wiring.models.tiers import (
    DisplayTier,
    MissingRequirement,
    RemediationItem,
    TierDefinition,
    TierEvaluation,
    TierRequirement,
    TierResult,
)
from switchyard.wiring.validators import check

logger = get_logger(__name__)


def requirement_met(requirement: TierRequirement, field: FieldHealth | None) -> bool:
    """Validator if declared, else exact boolean state, else WIRED status."""
    value = field.current_value if field is not None else None
    if requirement.validator is not None:
        return check(requirement.validator, value)
    if requirement.must_be is not None:
        return value is requirement.must_be
    return field is not None and field.status == FieldStatus.WIRED


class TierGate:
    """Evaluates tier completion and builds the remediation queue."""

    def __init__(
        self,
        catalog: WiringCatalog,
        weights: TierWeights | None = None,
        next_actions_limit: int = 5,
    ) -> None:
        self._catalog = catalog
        self._weights = weights or TierWeights()
        self._next_actions_limit = next_actions_limit

    @property
    def tiers(self) -> tuple[TierDefinition, ...]:
        return self._catalog.tiers

    def evaluate(self, health: HealthReport) -> TierEvaluation:
        by_tier: dict[str, TierResult] = {}
        previous_complete = True
        current = TierLevel.NONE
        still_climbing = True

        for tier in self.tiers:
            result = self._evaluate_tier(tier, health, unlocked=previous_complete)
            by_tier[tier.id.value] = result
            if still_climbing and result.is_complete and result.is_unlocked:
                current = tier.id
            else:
                still_climbing = False
            previous_complete = result.is_complete and result.is_unlocked

        scores = {level: result.percent for level, result in by_tier.items()}
        weights = {
            TierLevel.MVA.value: self._weights.mva,
            TierLevel.PRO.value: self._weights.pro,
            TierLevel.MAX.value: self._weights.max,
        }
        overall = round(sum(weights.get(level, 0.0) * pct for level, pct in scores.items()))

        queue = self._remediation_queue(by_tier)
        evaluation = TierEvaluation(
            current_tier=current,
            display_tier=self._display(current),
            tier_scores=scores,
            overall_score=min(max(overall, 0), 100),
            by_tier=by_tier,
            remediation_queue=queue,
            next_actions=queue[: self._next_actions_limit],
        )
        logger.debug(
            "tiers_evaluated",
            current_tier=current.value,
            overall_score=evaluation.overall_score,
            queued=len(queue),
        )
        return evaluation

    def _evaluate_tier(
        self, tier: TierDefinition, health: HealthReport, *, unlocked: bool
    ) -> TierResult:
        missing: list[MissingRequirement] = []
        complete: list[str] = []
        for requirement in tier.requirements:
            field = health.field(requirement.field_id)
            if requirement_met(requirement, field):
                complete.append(requirement.field_id)
            else:
                missing.append(self._missing(requirement, field))

        total = len(tier.requirements)
        percent = round(len(complete) / total * 100) if total else 100
        return TierResult(
            id=tier.id,
            name=tier.name,
            description=tier.description,
            color=tier.color,
            icon=tier.icon,
            total=total,
            complete=len(complete),
            percent=percent,
            is_complete=not missing,
            is_unlocked=unlocked,
            missing=missing,
            complete_items=complete,
        )

    def _missing(
        self, requirement: TierRequirement, field: FieldHealth | None
    ) -> MissingRequirement:
        node = self._catalog.field(requirement.field_id)
        return MissingRequirement(
            field_id=requirement.field_id,
            label=node.label if node is not None else requirement.field_id,
            purpose=requirement.purpose,
            failure_mode=requirement.failure_mode,
            impact=requirement.impact,
            priority=requirement.priority,
            critical=requirement.critical,
            payoff=requirement.payoff,
            fix_instructions=requirement.fix_instructions,
            current_value=field.current_value if field is not None else None,
            current_status=field.status if field is not None else None,
            recommended_value=requirement.recommended_value,
            requires_user_input=requirement.requires_user_input,
            auto_appliable=requirement.auto_appliable,
        )

    def _remediation_queue(self, by_tier: dict[str, TierResult]) -> list[RemediationItem]:
        order = {tier.id: index for index, tier in enumerate(self.tiers)}
        items: list[RemediationItem] = []
        for result in by_tier.values():
            if not result.is_unlocked or result.is_complete:
                continue
            items.extend(
                RemediationItem(tier=result.id, **missing.model_dump()) for missing in result.missing
            )

        def sort_key(item: RemediationItem) -> tuple[Any, ...]:
            return (order[item.tier], item.impact.rank, item.priority, not item.critical)

        return sorted(items, key=sort_key)

    def _display(self, current: TierLevel) -> DisplayTier:
        for tier in self.tiers:
            if tier.id == current:
                return DisplayTier(id=tier.id, name=tier.name, icon=tier.icon, color=tier.color)
        return DisplayTier(**NOT_READY_DISPLAY)
