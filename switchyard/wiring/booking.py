"""Booking configuration resolved through the config reader.

Booking code never reads tenant records directly. ``BookingConfigResolver``
gathers every booking setting for one call through a ``ConfigReader``, so
each read is enforced and traced, then caches the result until
``clear_cache`` is called.
"""

from typing import Any

from pydantic import BaseModel, Field

from switchyard.observability.logging import get_logger
from switchyard.trace.models import TraceEventType
from switchyard.wiring.models.enums import Provenance
from switchyard.wiring.reader import ConfigReader

logger = get_logger(__name__)

READER_ID = "BookingConfigResolver"

DEFAULT_CONSENT_QUESTION = "Would you like me to schedule a technician to come out?"

DEFAULT_INTENT_PATTERNS: tuple[str, ...] = (
    # explicit scheduling
    "schedule", "book", "appointment", "set up",
    # urgency
    "as soon as possible", "asap", "early as possible", "soonest", "earliest",
    "first available", "next available", "right away", "immediately", "today", "tomorrow",
    # service requests
    "send someone", "get someone", "have someone come", "need someone", "need a tech",
    "need help",
    # problem statements
    "not working", "not cooling", "not heating", "broken", "stopped working", "won't work",
    "isn't working", "no heat", "no air", "no cooling", "no power",
    # agreement after an offer
    "yes", "yeah", "sure", "okay", "please do", "sounds good", "that works", "let's do it",
)

ADDRESS_VERIFICATION = "booking.addressVerification"
_ADDRESS_KEYS = (
    "enabled",
    "provider",
    "requireCity",
    "requireState",
    "requireZip",
    "requireUnitQuestion",
    "unitQuestionMode",
    "missingCityStatePrompt",
    "unitTypePrompt",
)


class BookingPrompts(BaseModel):
    confirm_template: str | None = None
    complete_template: str | None = None
    consent_question: str = DEFAULT_CONSENT_QUESTION


class BookingTemplates(BaseModel):
    confirmation: str | None = None
    completion: str | None = None
    confirmation_source: str = "hardcoded_default"
    completion_source: str = "hardcoded_default"


class IntentPatterns(BaseModel):
    configured: list[str] = Field(default_factory=list)
    defaults: list[str] = Field(default_factory=lambda: list(DEFAULT_INTENT_PATTERNS))
    all: list[str] = Field(default_factory=list)
    use_defaults: bool = True
    source: str = "hardcoded_defaults"


class ConsentConfig(BaseModel):
    required: bool = True
    phrases: list[str] = Field(default_factory=list)
    question: str = DEFAULT_CONSENT_QUESTION
    min_discovery_fields: int = 0
    auto_inject_in_scenarios: bool = False


class AddressVerificationConfig(BaseModel):
    enabled: bool = False
    provider: str = "google"
    require_city: bool = True
    require_state: bool = True
    require_zip: bool = False
    require_unit_question: bool = False
    unit_question_mode: str | None = None
    missing_city_state_prompt: str | None = None
    unit_type_prompt: str | None = None
    source: str = ADDRESS_VERIFICATION


class NameParsingConfig(BaseModel):
    accept_last_name_only: bool = True
    last_name_only_prompt: str | None = None


class NameSpellingVariantsConfig(BaseModel):
    enabled: bool = False
    mode: str = "always_ask"
    script: str | None = None
    max_asks_per_call: int = 1
    variant_groups: list[Any] = Field(default_factory=list)
    precomputed_variant_map: dict[str, Any] = Field(default_factory=dict)


class BookingConfig(BaseModel):
    """Everything the booking flow needs for one call."""

    enabled: bool = True
    requires_explicit_consent: bool = True
    slots: list[dict[str, Any]] = Field(default_factory=list)
    prompts: BookingPrompts = Field(default_factory=BookingPrompts)
    templates: BookingTemplates = Field(default_factory=BookingTemplates)
    intent_patterns: IntentPatterns = Field(default_factory=IntentPatterns)
    consent: ConsentConfig = Field(default_factory=ConsentConfig)
    address_verification: AddressVerificationConfig = Field(
        default_factory=AddressVerificationConfig
    )
    name_parsing: NameParsingConfig = Field(default_factory=NameParsingConfig)
    name_spelling_variants: NameSpellingVariantsConfig = Field(
        default_factory=NameSpellingVariantsConfig
    )
    outcome: dict[str, Any] = Field(default_factory=dict)
    abort_phrases: list[str] = Field(default_factory=list)
    fast_path: dict[str, Any] = Field(default_factory=dict)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


class BookingConfigResolver:
    """Per-call resolver for booking configuration."""

    def __init__(self, reader: ConfigReader) -> None:
        self._reader = reader
        self._cache: BookingConfig | None = None
        self._previous_reader_id = reader.reader_id

    @classmethod
    def for_call(cls, reader: ConfigReader) -> "BookingConfigResolver":
        return cls(reader)

    def get_booking_config(self) -> BookingConfig:
        """Resolve (once) and return the call's booking configuration."""
        if self._cache is not None:
            return self._cache

        config = BookingConfig(
            enabled=self._read("frontDesk.bookingEnabled", True) is not False,
            requires_explicit_consent=self._read(
                "frontDesk.discoveryConsent.bookingRequiresExplicitConsent", True
            )
            is not False,
            slots=self.get_slots(),
            prompts=self.get_prompts(),
            templates=self.get_templates(),
            intent_patterns=self.get_intent_patterns(),
            consent=self.get_consent_config(),
            address_verification=self.get_address_verification(),
            name_parsing=self.get_name_parsing(),
            name_spelling_variants=self.get_name_spelling_variants(),
            outcome=_as_dict(self._read("frontDesk.bookingOutcome", {})),
            abort_phrases=_as_list(self._read("frontDesk.bookingAbortPhrases", [])),
            fast_path=_as_dict(self._read("frontDesk.fastPathBooking", {})),
        )
        self._cache = config
        self._emit_resolved(config)
        return config

    def clear_cache(self) -> None:
        self._cache = None

    # --- sections ----------------------------------------------------------

    def get_slots(self) -> list[dict[str, Any]]:
        """Slot registry entries merged with their booking-flow step."""
        slots = _as_list(_as_dict(self._read("frontDesk.slotRegistry", {})).get("slots"))
        steps = _as_list(_as_dict(self._read("frontDesk.bookingFlow", {})).get("steps"))
        if not slots or not steps:
            return []

        merged: list[dict[str, Any]] = []
        for slot in slots:
            if not isinstance(slot, dict):
                continue
            slot_id = slot.get("id") or slot.get("slotId")
            step = next(
                (s for s in steps if isinstance(s, dict) and s.get("slotId") == slot_id), None
            )
            merged.append({**slot, **step, "id": slot_id} if step else slot)
        return merged

    def get_prompts(self) -> BookingPrompts:
        outcome = _as_dict(self._read("frontDesk.bookingOutcome", {}))
        behavior = _as_dict(self._read("frontDesk.bookingBehavior", {}))
        question = self._read("frontDesk.discoveryConsent.consentQuestion", DEFAULT_CONSENT_QUESTION)
        return BookingPrompts(
            confirm_template=behavior.get("confirmationPrompt") or outcome.get("confirmationPrompt"),
            complete_template=behavior.get("completionPrompt") or outcome.get("completionPrompt"),
            consent_question=question or DEFAULT_CONSENT_QUESTION,
        )

    def get_templates(self) -> BookingTemplates:
        behavior = _as_dict(self._read("frontDesk.bookingBehavior", {}))
        outcome = _as_dict(self._read("frontDesk.bookingOutcome", {}))
        scripts = _as_dict(outcome.get("scripts"))

        confirmation, confirmation_source = _first_set(
            (behavior.get("confirmationPrompt"), "bookingBehavior"),
            (outcome.get("confirmationPrompt"), "bookingOutcome"),
            (scripts.get("final_confirmation"), "bookingOutcome.scripts"),
        )
        completion, completion_source = _first_set(
            (behavior.get("completionPrompt"), "bookingBehavior"),
            (outcome.get("completionPrompt"), "bookingOutcome"),
            (scripts.get("booking_complete"), "bookingOutcome.scripts"),
        )
        return BookingTemplates(
            confirmation=confirmation,
            completion=completion,
            confirmation_source=confirmation_source,
            completion_source=completion_source,
        )

    def get_intent_patterns(self) -> IntentPatterns:
        wants_booking = _as_list(self._read("frontDesk.detectionTriggers.wantsBooking", []))
        direct = _as_list(self._read("frontDesk.detectionTriggers.directIntentPatterns", []))
        detection = _as_dict(self._read("frontDesk.bookingIntentDetection", {}))

        configured = [
            p for p in [*wants_booking, *direct, *_as_list(detection.get("patterns"))] if p
        ]
        if not configured:
            source = "hardcoded_defaults"
        elif wants_booking:
            source = "frontDesk.detectionTriggers.wantsBooking"
        elif direct:
            source = "frontDesk.detectionTriggers.directIntentPatterns"
        else:
            source = "frontDesk.bookingIntentDetection"

        defaults = list(DEFAULT_INTENT_PATTERNS)
        return IntentPatterns(
            configured=configured,
            defaults=defaults,
            all=configured or defaults,
            use_defaults=not configured,
            source=source,
        )

    def get_consent_config(self) -> ConsentConfig:
        consent = _as_dict(self._read("frontDesk.discoveryConsent", {}))
        return ConsentConfig(
            required=consent.get("bookingRequiresExplicitConsent") is not False,
            phrases=_as_list(self._read("frontDesk.discoveryConsent.consentPhrases", [])),
            question=consent.get("consentQuestion") or DEFAULT_CONSENT_QUESTION,
            min_discovery_fields=consent.get("minDiscoveryFieldsBeforeConsent") or 0,
            auto_inject_in_scenarios=bool(consent.get("autoInjectConsentInScenarios")),
        )

    def get_address_verification(self) -> AddressVerificationConfig:
        """Address policy, filling keys the canonical block lacks from legacy bridges."""
        self._reader_begin()
        try:
            resolution = self._reader.read(ADDRESS_VERIFICATION)
            bridged = resolution.resolved_from == Provenance.LEGACY_BRIDGE
            if resolution.resolved_from in (Provenance.TENANT_RECORD, Provenance.LEGACY_BRIDGE):
                stored = dict(_as_dict(resolution.value))
                fallback: dict[str, Any] = {}
            else:
                stored = {}
                fallback = _as_dict(resolution.value)

            for key in _ADDRESS_KEYS:
                path = f"{ADDRESS_VERIFICATION}.{key}"
                if key in stored or path not in self._reader.catalog.bridges_by_path:
                    continue
                sub = self._reader.read(path)
                if sub.resolved_from == Provenance.LEGACY_BRIDGE:
                    stored[key] = sub.value
                    bridged = True
        finally:
            self._reader_end()

        config = {**fallback, **stored}
        return AddressVerificationConfig(
            enabled=bool(config.get("enabled")),
            provider=config.get("provider") or "google",
            require_city=config.get("requireCity") is not False,
            require_state=config.get("requireState") is not False,
            require_zip=bool(config.get("requireZip")),
            require_unit_question=bool(config.get("requireUnitQuestion")),
            unit_question_mode=config.get("unitQuestionMode"),
            missing_city_state_prompt=config.get("missingCityStatePrompt"),
            unit_type_prompt=config.get("unitTypePrompt"),
            source="legacyBridge" if bridged else ADDRESS_VERIFICATION,
        )

    def get_name_parsing(self) -> NameParsingConfig:
        parsing = _as_dict(self._read("booking.nameParsing", {}))
        return NameParsingConfig(
            accept_last_name_only=parsing.get("acceptLastNameOnly") is not False,
            last_name_only_prompt=parsing.get("lastNameOnlyPrompt"),
        )

    def get_name_spelling_variants(self) -> NameSpellingVariantsConfig:
        variants = _as_dict(self._read("frontDesk.nameSpellingVariants", {}))
        return NameSpellingVariantsConfig(
            enabled=bool(variants.get("enabled")),
            mode=variants.get("mode") or "always_ask",
            script=variants.get("script"),
            max_asks_per_call=variants.get("maxAsksPerCall") or 1,
            variant_groups=_as_list(variants.get("variantGroups")),
            precomputed_variant_map=_as_dict(variants.get("precomputedVariantMap")),
        )

    # --- internals ---------------------------------------------------------

    def _read(self, path: str, default: Any = None) -> Any:
        self._reader_begin()
        try:
            return self._reader.get(path, default)
        finally:
            self._reader_end()

    def _reader_begin(self) -> None:
        self._previous_reader_id = self._reader.reader_id
        self._reader.set_reader_id(READER_ID)

    def _reader_end(self) -> None:
        self._reader.set_reader_id(self._previous_reader_id)

    def _emit_resolved(self, config: BookingConfig) -> None:
        data = {
            "enabled": config.enabled,
            "requires_explicit_consent": config.requires_explicit_consent,
            "slots_count": len(config.slots),
            "has_custom_prompts": bool(
                config.prompts.confirm_template or config.prompts.complete_template
            ),
            "intent_pattern_source": config.intent_patterns.source,
            "intent_pattern_count": len(config.intent_patterns.all),
            "address_verification_enabled": config.address_verification.enabled,
            "address_verification_source": config.address_verification.source,
            "name_spelling_variants_enabled": config.name_spelling_variants.enabled,
        }
        self._reader_begin()
        try:
            self._reader.emit(TraceEventType.BOOKING_CONFIG_RESOLVED, data)
        finally:
            self._reader_end()
        logger.debug(
            "booking_config_resolved",
            call_id=self._reader.call_id,
            tenant_id=self._reader.tenant_id,
            **data,
        )


def _first_set(*candidates: tuple[Any, str]) -> tuple[Any, str]:
    for value, source in candidates:
        if value:
            return value, source
    return None, "hardcoded_default"
