"""Enumerations shared across the wiring engine."""

from enum import Enum


class FieldStatus(str, Enum):
    """Per-tenant wiring status of one field. Exactly one holds per evaluation."""

    WIRED = "WIRED"
    PARTIAL = "PARTIAL"
    MISCONFIGURED = "MISCONFIGURED"
    NOT_CONFIGURED = "NOT_CONFIGURED"
    UI_ONLY = "UI_ONLY"
    DEAD_READ = "DEAD_READ"
    TENANT_RISK = "TENANT_RISK"


class Provenance(str, Enum):
    """Where an effective value came from."""

    TENANT_RECORD = "tenantRecord"
    LEGACY_BRIDGE = "legacyBridge"
    GLOBAL_DEFAULT = "globalDefault"
    ABSENT = "absent"


class EnforcementMode(str, Enum):
    """How the config reader treats reads of unregistered paths."""

    OFF = "off"
    WARN = "warn"
    THROW = "throw"


class StorageKind(str, Enum):
    """Discriminant for a field's storage descriptor."""

    STORED = "stored"
    DERIVED = "derived"


class ValidatorKind(str, Enum):
    """Closed set of value predicates usable in declarations."""

    IS_NON_EMPTY = "is_non_empty"
    IS_NON_EMPTY_ARRAY = "is_non_empty_array"
    HAS_MIN_ITEMS = "has_min_items"
    IS_NON_EMPTY_OBJECT = "is_non_empty_object"
    HAS_REQUIRED_KEYS = "has_required_keys"
    IS_NON_EMPTY_STRING = "is_non_empty_string"
    IS_TRUE = "is_true"
    IS_FALSE = "is_false"
    IS_NOT_NONE = "is_not_none"
    KEY_IS_TRUE = "key_is_true"
    ALL_SLOTS_VALID = "all_slots_valid"
    ALL_SLOTS_HAVE_QUESTION = "all_slots_have_question"
    HAS_ENABLED_REF = "has_enabled_ref"
    RESUME_BOOKING_HAS_TEMPLATE = "resume_booking_has_template"
    CONFIRMATION_REQUESTS_HAS_TRIGGERS = "confirmation_requests_has_triggers"


class HealthColor(str, Enum):
    """Traffic-light rating used by health and the scoreboard."""

    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"


class CheckSeverity(str, Enum):
    """Severity of a tenant-safety check."""

    CRITICAL = "CRITICAL"
    WARNING = "WARNING"


class CheckStatus(str, Enum):
    """Outcome of running one tenant-safety check."""

    PASSED = "PASSED"
    FAILED = "FAILED"
    ERROR = "ERROR"


class Verdict(str, Enum):
    """Aggregate tenant-safety verdict."""

    SAFE = "SAFE"
    UNSAFE = "UNSAFE"


class ImpactCategory(str, Enum):
    """Business impact of an unmet tier requirement, highest priority first."""

    RELIABILITY = "reliability"
    SAFETY = "safety"
    CONVERSION = "conversion"
    SPEED = "speed"

    @property
    def rank(self) -> int:
        return _IMPACT_ORDER.index(self)


_IMPACT_ORDER = [
    ImpactCategory.RELIABILITY,
    ImpactCategory.SAFETY,
    ImpactCategory.CONVERSION,
    ImpactCategory.SPEED,
]


class TierLevel(str, Enum):
    """Readiness tiers, in gating order. NONE means no tier is complete."""

    NONE = "NONE"
    MVA = "MVA"
    PRO = "PRO"
    MAX = "MAX"


class IssueSeverity(str, Enum):
    """Severity of a diagnosed runtime issue."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        """Sort key; lower sorts first."""
        return _ISSUE_ORDER.index(self)


_ISSUE_ORDER = [
    IssueSeverity.CRITICAL,
    IssueSeverity.HIGH,
    IssueSeverity.MEDIUM,
    IssueSeverity.LOW,
]


class ResponseSource(str, Enum):
    """Component that produced the agent's response in an observed run."""

    SCENARIO = "SCENARIO"
    LLM = "LLM"
    FAST_PATH = "FAST_PATH"
    BOOKING = "BOOKING"
    TRANSFER = "TRANSFER"
    SILENCE = "SILENCE"


class RemediationMode(str, Enum):
    """Where the value applied by a remediation comes from."""

    RECOMMENDED = "recommended"
    CUSTOM = "custom"
