"""Wiring engine models.

Declarations (registry, consumption map, legacy bridges, tiers) are frozen
pydantic models built once at import. Report, diagnosis and tier evaluation
models are recomputed per request.
"""

from switchyard.wiring.models.bridges import (
    BridgeSet,
    IdentityExtractor,
    LegacyBridge,
    SlotAttributeExtractor,
)
from switchyard.wiring.models.consumption import (
    ConsumptionEntry,
    ConsumptionMap,
    RuntimeReader,
)
from switchyard.wiring.models.diagnosis import (
    DiagnosedIssue,
    Diagnosis,
    DiagnosticRule,
    EvidenceSnapshot,
    PatchEntry,
)
from switchyard.wiring.models.enums import (
    CheckSeverity,
    CheckStatus,
    EnforcementMode,
    FieldStatus,
    HealthColor,
    ImpactCategory,
    IssueSeverity,
    Provenance,
    ResponseSource,
    StorageKind,
    TierLevel,
    ValidatorKind,
    Verdict,
)
from switchyard.wiring.models.registry import (
    DerivedSource,
    FieldNode,
    Registry,
    SectionNode,
    StoredLocation,
    TabNode,
    TenantRule,
    UIDescriptor,
    ValidatorSpec,
)
from switchyard.wiring.models.report import HealthReport, WiringReport
from switchyard.wiring.models.tiers import (
    TierDefinition,
    TierEvaluation,
    TierRequirement,
    TierResult,
)

__all__ = [
    # Declarations
    "BridgeSet",
    "ConsumptionEntry",
    "ConsumptionMap",
    "DerivedSource",
    "FieldNode",
    "IdentityExtractor",
    "LegacyBridge",
    "Registry",
    "RuntimeReader",
    "SectionNode",
    "SlotAttributeExtractor",
    "StoredLocation",
    "TabNode",
    "TenantRule",
    "TierDefinition",
    "TierRequirement",
    "UIDescriptor",
    "ValidatorSpec",
    # Enums
    "CheckSeverity",
    "CheckStatus",
    "EnforcementMode",
    "FieldStatus",
    "HealthColor",
    "ImpactCategory",
    "IssueSeverity",
    "Provenance",
    "ResponseSource",
    "StorageKind",
    "TierLevel",
    "ValidatorKind",
    "Verdict",
    # Results
    "DiagnosedIssue",
    "Diagnosis",
    "DiagnosticRule",
    "EvidenceSnapshot",
    "HealthReport",
    "PatchEntry",
    "TierEvaluation",
    "TierResult",
    "WiringReport",
]
