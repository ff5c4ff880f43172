"""Runtime consumption map.

Declares, per canonical path, which runtime components read it. Entries are
documentation for the health engine, never executed. Paths declared here but
not in the registry are dead reads; they carry their own storage path so the
resolver can still serve them.
"""

from typing import Any

from switchyard.wiring.models.consumption import (
    ConsumptionEntry,
    ConsumptionMap,
    RuntimeReader,
)

FRONT_DESK = "aiAgentSettings.frontDeskBehavior"
LEGACY_BOOKING = "aiAgentSettings.frontDesk.booking"


def _reader(
    location: str, description: str, critical: bool = False, condition: str | None = None
) -> RuntimeReader:
    return RuntimeReader(
        location=location, description=description, critical=critical, condition=condition
    )


def _entry(
    id: str,
    *readers: RuntimeReader,
    storage_path: str | None = None,
    legacy_storage_path: str | None = None,
    scope: str = "company",
    default: Any = None,
) -> ConsumptionEntry:
    return ConsumptionEntry(
        id=id,
        readers=readers,
        storage_path=storage_path,
        legacy_storage_path=legacy_storage_path,
        scope=scope,
        default_value=default,
    )


_ENGINE_TURN = "ConversationEngine.processTurn"
_LLM = "HybridReceptionistLLM"
_BOOKING_RUNNER = "BookingFlowRunner.runStep"
_BOOKING_RESOLVER = "BookingConfigResolver.resolve"
_LLM0 = "LLM0ControlsLoader.load"


# --- fields also declared in the registry ------------------------------------

_REGISTERED = (
    _entry(
        "frontDesk.aiName",
        _reader("SystemPromptComposer.composeSystemPrompt", "Injects AI name into system prompt"),
        _reader(f"{_LLM}.generateResponse", "Uses AI name in self-references"),
        default="AI Assistant",
    ),
    _entry(
        "frontDesk.conversationStyle",
        _reader(f"{_LLM}.getStyleModifiers", "Adjusts tone based on style"),
        default="balanced",
    ),
    _entry(
        "frontDesk.styleAcknowledgments",
        _reader(f"{_LLM}.generateResponse", "Acknowledgment when the LLM provided none"),
        _reader("ResponseRenderer.getStyleAcknowledgment", "Deterministic acknowledgments"),
    ),
    _entry(
        "frontDesk.personality.warmth",
        _reader(f"{_LLM}.buildSystemPrompt", "How warm the assistant sounds (0.0 to 1.0)"),
        default=0.6,
    ),
    _entry(
        "frontDesk.personality.speakingPace",
        _reader(f"{_LLM}.buildSystemPrompt", "How quickly the assistant moves through questions"),
        default="normal",
    ),
    _entry(
        "frontDesk.greetingResponses",
        _reader(_ENGINE_TURN, "Greeting intercept, zero-token fast path"),
        default=[],
    ),
    _entry(
        "frontDesk.discoveryConsent.forceLLMDiscovery",
        _reader(_ENGINE_TURN, "Kill switch: LLM-led discovery, scenarios as tools only", True),
        default=False,
    ),
    _entry(
        "frontDesk.discoveryConsent.disableScenarioAutoResponses",
        _reader(_ENGINE_TURN, "Kill switch: scenarios cannot auto-respond", True),
        default=False,
    ),
    _entry(
        "frontDesk.discoveryConsent.bookingRequiresExplicitConsent",
        _reader(_ENGINE_TURN, "Requires an explicit yes before entering booking mode"),
        _reader(_BOOKING_RESOLVER, "Consent gate flag"),
        default=True,
    ),
    _entry(
        "frontDesk.discoveryConsent.consentPhrases",
        _reader("ConversationEngine.detectConsent", "Phrases that count as consent"),
        legacy_storage_path=f"{FRONT_DESK}.discoveryConsent.consentYesWords",
        default=["yes", "yeah", "yep", "please", "sure", "okay", "ok"],
    ),
    _entry(
        "frontDesk.discoveryConsent.autoReplyAllowedScenarioTypes",
        _reader(_ENGINE_TURN, "Scenario types that may auto-respond"),
        default=["FAQ", "TROUBLESHOOT", "EMERGENCY"],
    ),
    _entry(
        "frontDesk.businessHours",
        _reader("AfterHoursEvaluator.evaluateAfterHours", "Decides whether a call is after hours"),
        _reader("AfterHoursCallTurnHandler.handleTurn", "After-hours call handling"),
    ),
    _entry(
        "frontDesk.bookingEnabled",
        _reader(_ENGINE_TURN, "Master switch for booking"),
        _reader(_BOOKING_RESOLVER, "Booking feature flag"),
        default=True,
    ),
    _entry(
        "frontDesk.bookingSlots",
        _reader(_ENGINE_TURN, "Normalizes and validates booking slots"),
        _reader("BookingEngine.normalizeSlots", "Validates slot structure"),
        _reader("SlotStateMachine.getNextSlot", "Chooses the next slot to ask"),
        default=[],
    ),
    _entry(
        "frontDesk.offRailsRecovery.bridgeBack.resumeBooking",
        _reader(_ENGINE_TURN, "Resume protocol after off-rails answers during booking"),
        default={"enabled": True},
    ),
    _entry(
        "frontDesk.confirmationRequests",
        _reader(_ENGINE_TURN, "Answers 'did you get my number right?' from captured slots"),
        _reader("confirmationRequest.detect", "Detects which slot is being confirmed"),
        default={"enabled": True},
    ),
    _entry(
        "frontDesk.fastPathBooking.enabled",
        _reader(_ENGINE_TURN, "Immediate booking offer for urgent keywords"),
        default=True,
    ),
    _entry(
        "frontDesk.fastPathBooking.triggerKeywords",
        _reader(_ENGINE_TURN, "Keywords that trigger the fast-path offer"),
    ),
    _entry(
        "frontDesk.fastPathBooking.offerScript",
        _reader(_ENGINE_TURN, "Response when fast path triggers"),
    ),
    _entry(
        "frontDesk.vocabulary",
        _reader(_ENGINE_TURN, "Translates caller slang to standard terms"),
        default={},
    ),
    _entry(
        "frontDesk.escalation.enabled",
        _reader(_ENGINE_TURN, "Master switch for human transfer triggers"),
        default=True,
    ),
    _entry(
        "frontDesk.escalation.triggerPhrases",
        _reader(_ENGINE_TURN, "Phrases that trigger a human transfer"),
    ),
    _entry(
        "frontDesk.escalation.transferMessage",
        _reader(_ENGINE_TURN, "Message played during transfer"),
    ),
    _entry(
        "frontDesk.emotions",
        _reader(f"{_LLM}.getEmotionModifiers", "Steers tone from emotion toggles"),
        _reader("frontDeskPrompt.build", "Emotion behavior rules in the prompt"),
        default={},
    ),
    _entry(
        "frontDesk.frustration",
        _reader(f"{_LLM}.detectFrustrationFromTriggers", "De-escalates on frustration phrases"),
        _reader("frontDeskPrompt.build", "Frustration guidance in the prompt"),
        default=[],
    ),
    _entry(
        "frontDesk.forbiddenPhrases",
        _reader(f"{_LLM}.composeSystemPrompt", "Phrases the AI must never say"),
        default=[],
    ),
    _entry(
        "frontDesk.loopPrevention",
        _reader("LoopDetector.detectLoop", "Detects and breaks conversation loops"),
        _reader(_ENGINE_TURN, "Nudge prompts when the caller pauses"),
        default={},
    ),
    _entry(
        "frontDesk.fallbackResponses",
        _reader(f"{_LLM}.getFallbackResponse", "Responses when nothing matched"),
        default={},
    ),
    _entry(
        "dataConfig.templateReferences",
        _reader(
            "ScenarioPoolService.getScenarioPoolForCompany",
            "Loads the scenario pool from referenced templates",
            True,
        ),
        _reader(_ENGINE_TURN, "Loads template vocabulary and synonyms"),
        default=[],
    ),
    _entry(
        "dataConfig.scenarios",
        _reader("HybridScenarioSelector.selectBestScenario", "Matches caller input to scenarios"),
        _reader("LLMDiscoveryEngine.retrieveScenarios", "Scenarios exposed as LLM tools"),
        scope="global",
        default=[],
    ),
    _entry(
        "dataConfig.placeholders",
        _reader("ResponseRenderer.renderResponse", "Replaces {companyName}, {phone}, ..."),
        default={},
    ),
    _entry(
        "transfers.transferTargets",
        _reader("TransferRouter.resolveTransferTarget", "Resolves the transfer destination"),
        default=[],
    ),
    _entry(
        "integrations.googleCalendar.connected",
        _reader(
            "GoogleCalendarService.getOAuth2ClientForCompany",
            "Checks the calendar is connected before any calendar operation",
        ),
        default=False,
    ),
    _entry(
        "integrations.googleCalendar.colorMapping",
        _reader("GoogleCalendarService.createBookingEvent", "Service type to color id"),
        _reader("ServiceTypeResolver.resolveServiceType", "Canonical service type for colors"),
        default=[],
    ),
    _entry(
        "integrations.smsNotifications.enabled",
        _reader("SMSNotificationService.sendBookingConfirmation", "SMS master switch"),
        default=False,
    ),
)


# --- consumption-only paths ---------------------------------------------------

_FRONT_DESK_ONLY = (
    _entry(
        "frontDesk.connectionQualityGate",
        _reader("FrontDeskRuntime.handleTurn", "Intercepts low-confidence STT on early turns"),
        storage_path=f"{FRONT_DESK}.connectionQualityGate",
        default={"enabled": True, "confidenceThreshold": 0.72, "maxRetries": 3},
    ),
    _entry(
        "frontDesk.sttProtectedWords",
        _reader("STTPreprocessor.stripFillers", "Words never stripped as fillers"),
        _reader("IntelligentRouter.route", "Protected words for STT preprocessing"),
        storage_path=f"{FRONT_DESK}.sttProtectedWords",
        default=[],
    ),
    _entry(
        "frontDesk.detectionTriggers.wantsBooking",
        _reader("ConsentDetector.checkConsent", "Keywords that trigger booking mode", True),
        _reader(_BOOKING_RESOLVER, "Booking intent patterns"),
        storage_path=f"{FRONT_DESK}.detectionTriggers.wantsBooking",
        default=[],
    ),
    _entry(
        "frontDesk.detectionTriggers.directIntentPatterns",
        _reader(_BOOKING_RESOLVER, "Phrases that skip consent and go straight to booking"),
        storage_path=f"{FRONT_DESK}.detectionTriggers.directIntentPatterns",
        default=[],
    ),
    _entry(
        "booking.directIntentPatterns",
        _reader(
            "ConversationEngine.detectDirectBookingIntent",
            "Phrases that skip consent and go straight to booking",
            True,
        ),
        storage_path=f"{FRONT_DESK}.bookingFlow.directIntentPatterns",
        default=[],
    ),
    _entry(
        "frontDesk.bookingIntentDetection",
        _reader(_BOOKING_RESOLVER, "Additional booking intent patterns"),
        storage_path=f"{FRONT_DESK}.bookingIntentDetection",
        default={},
    ),
    _entry(
        "frontDesk.commonFirstNames",
        _reader(_ENGINE_TURN, "Recognizes common first names"),
        _reader("SlotExtractor.extractName", "Validates extracted names"),
        storage_path=f"{FRONT_DESK}.commonFirstNames",
        default=[],
    ),
    _entry(
        "frontDesk.commonLastNames",
        _reader("BookingFlowRunner.extractName", "Last name recognition"),
        storage_path=f"{FRONT_DESK}.commonLastNames",
        default=[],
    ),
    _entry(
        "frontDesk.nameStopWords",
        _reader("IdentitySlotFirewall.validateName", "Tenant stop words for name validation"),
        _reader("BookingFlowRunner.isStopWord", "Tenant stop words for name extraction"),
        storage_path=f"{FRONT_DESK}.nameStopWords",
        default=[],
    ),
    _entry(
        "frontDesk.nameSpellingVariants",
        _reader("ConversationEngine.findSpellingVariant", "Spelling variant configuration"),
        _reader(_BOOKING_RESOLVER, "Spelling variant configuration"),
        storage_path=f"{FRONT_DESK}.nameSpellingVariants",
        default={"enabled": False, "mode": "1_char_only", "maxAsksPerCall": 1},
    ),
    _entry(
        "frontDesk.nameSpellingVariants.enabled",
        _reader("ConversationEngine.findSpellingVariant", "Master switch for Mark/Marc checks"),
        storage_path=f"{FRONT_DESK}.nameSpellingVariants.enabled",
        default=False,
    ),
    _entry(
        "frontDesk.nameSpellingVariants.mode",
        _reader("ConversationEngine.findSpellingVariant", "Which variants trigger a question"),
        storage_path=f"{FRONT_DESK}.nameSpellingVariants.mode",
        default="1_char_only",
    ),
    _entry(
        "frontDesk.nameSpellingVariants.script",
        _reader(_ENGINE_TURN, "Spelling confirmation prompt"),
        storage_path=f"{FRONT_DESK}.nameSpellingVariants.script",
    ),
    _entry(
        "frontDesk.nameSpellingVariants.maxAsksPerCall",
        _reader("ConversationEngine.findSpellingVariant", "Spelling questions allowed per call"),
        storage_path=f"{FRONT_DESK}.nameSpellingVariants.maxAsksPerCall",
        default=1,
    ),
    _entry(
        "frontDesk.nameSpellingVariants.source",
        _reader("ConversationEngine.findSpellingVariant", "curated_list or auto_scan"),
        storage_path=f"{FRONT_DESK}.nameSpellingVariants.source",
        default="curated_list",
    ),
    _entry(
        "frontDesk.bookingSlots.name.confirmSpelling",
        _reader(_ENGINE_TURN, "Slot-level toggle for spelling confirmation"),
        storage_path=f"{FRONT_DESK}.bookingSlots.name.confirmSpelling",
        default=False,
    ),
    _entry(
        "frontDesk.discoveryConsent",
        _reader(_BOOKING_RESOLVER, "Consent gate configuration"),
        storage_path=f"{FRONT_DESK}.discoveryConsent",
        default={},
    ),
    _entry(
        "frontDesk.discoveryConsent.consentQuestion",
        _reader(_BOOKING_RESOLVER, "Question asked before booking"),
        storage_path=f"{FRONT_DESK}.discoveryConsent.consentQuestion",
    ),
    _entry(
        "frontDesk.slotRegistry",
        _reader(_BOOKING_RESOLVER, "Slot definitions"),
        storage_path=f"{FRONT_DESK}.slotRegistry",
        default={},
    ),
    _entry(
        "frontDesk.bookingFlow",
        _reader(_BOOKING_RESOLVER, "Booking step prompts"),
        storage_path=f"{FRONT_DESK}.bookingFlow",
        default={},
    ),
    _entry(
        "frontDesk.bookingBehavior",
        _reader(_BOOKING_RESOLVER, "Confirmation and completion prompts"),
        storage_path=f"{FRONT_DESK}.bookingBehavior",
        default={},
    ),
    _entry(
        "frontDesk.bookingOutcome",
        _reader(_BOOKING_RESOLVER, "Outcome scripts"),
        storage_path=f"{FRONT_DESK}.bookingOutcome",
        default={},
    ),
    _entry(
        "frontDesk.bookingAbortPhrases",
        _reader(_BOOKING_RESOLVER, "Phrases that abort booking"),
        storage_path=f"{FRONT_DESK}.bookingAbortPhrases",
        default=[],
    ),
    _entry(
        "frontDesk.fastPathBooking",
        _reader(_BOOKING_RESOLVER, "Fast-path configuration"),
        storage_path=f"{FRONT_DESK}.fastPathBooking",
        default={},
    ),
)

_BOOKING_ONLY = (
    _entry(
        "booking.nameParsing",
        _reader(_ENGINE_TURN, "Last-name-first support"),
        _reader(_BOOKING_RESOLVER, "Name parsing configuration"),
        storage_path=f"{FRONT_DESK}.booking.nameParsing",
        default={"acceptLastNameOnly": False},
    ),
    _entry(
        "booking.nameParsing.acceptLastNameOnly",
        _reader("SlotExtractor.extractName", "Treat a single uncommon name as a last name"),
        storage_path=f"{FRONT_DESK}.booking.nameParsing.acceptLastNameOnly",
        default=True,
    ),
    _entry(
        "booking.nameParsing.lastNameOnlyPrompt",
        _reader(_ENGINE_TURN, "Prompt when only a last name was captured"),
        storage_path=f"{FRONT_DESK}.booking.nameParsing.lastNameOnlyPrompt",
        default="Thanks, and what's your first name?",
    ),
    _entry(
        "booking.addressVerification",
        _reader(_BOOKING_RUNNER, "Address verification policy"),
        _reader(_BOOKING_RESOLVER, "Address verification policy"),
        storage_path=f"{FRONT_DESK}.booking.addressVerification",
        legacy_storage_path=f"{LEGACY_BOOKING}.addressVerification",
        default={"enabled": True, "provider": "google_geocode"},
    ),
) + tuple(
    _entry(
        f"booking.addressVerification.{key}",
        _reader(_BOOKING_RUNNER, description),
        storage_path=f"{FRONT_DESK}.booking.addressVerification.{key}",
        legacy_storage_path=f"{LEGACY_BOOKING}.addressVerification.{key}",
        default=default,
    )
    for key, description, default in (
        ("enabled", "Master switch for address verification", True),
        ("provider", "Geocoding provider", "google_geocode"),
        ("requireCity", "Require a city before confirming the address", True),
        ("requireState", "Require a state before confirming the address", False),
        ("requireZip", "Require a ZIP code before confirming the address", False),
        ("requireUnitQuestion", "Always ask house or unit", True),
        ("unitQuestionMode", "house_or_unit, always_ask or smart", "house_or_unit"),
        ("missingCityStatePrompt", "Prompt when city or state is missing", None),
        ("unitTypePrompt", "Prompt asking house or unit", None),
    )
)

_INTEGRATIONS_ONLY = (
    _entry(
        "integrations.googleGeo.enabled",
        _reader("AddressValidationService.validateAddress", "Master switch for geocoding"),
        storage_path="integrations.googleGeo.enabled",
        default=True,
    ),
    _entry(
        "integrations.googleGeo.verificationMode",
        _reader("AddressValidationService.validateAddress", "STRICT or SOFT"),
        storage_path="integrations.googleGeo.verificationMode",
        default="SOFT",
    ),
    _entry(
        "integrations.googleGeo.minConfidence",
        _reader("AddressValidationService.validateAddress", "HIGH, MEDIUM or LOW"),
        storage_path="integrations.googleGeo.minConfidence",
        default="MEDIUM",
    ),
    _entry(
        "integrations.googleCalendar.settings",
        _reader("GoogleCalendarService.createBookingEvent", "Buffer, duration and templates"),
        _reader("GoogleCalendarService.checkAvailability", "Availability windows"),
        storage_path="googleCalendar.settings",
        default={},
    ),
    _entry(
        "integrations.googleCalendar.eventColors",
        _reader("GoogleCalendarService.createBookingEvent", "Service type color coding"),
        storage_path="googleCalendar.eventColors",
        default={"enabled": True, "colorMapping": []},
    ),
    _entry(
        "integrations.smsNotifications.templates",
        _reader("SMSNotificationService.sendBookingConfirmation", "Confirmation template"),
        _reader("SMSNotificationService.sendReminder", "Reminder templates"),
        storage_path="smsNotifications.templates",
        default={},
    ),
)

_LLM0_CONTROLS = tuple(
    _entry(
        f"llm0Controls.{key}",
        _reader(_LLM0, description),
        storage_path=f"aiAgentSettings.llm0Controls.{key}",
        default=default,
    )
    for key, description, default in (
        ("silenceHandling.enabled", "Silence detection and prompts", True),
        ("silenceHandling.thresholdSeconds", "Seconds of silence before prompting", 5),
        ("silenceHandling.maxPrompts", "Silence prompts before escalation", 3),
        ("loopDetection.enabled", "Loop detection", True),
        ("loopDetection.maxRepeatedResponses", "Repeated responses before acting", 3),
        ("loopDetection.onLoopAction", "escalate, warn or ignore", "escalate"),
        ("spamFilter.enabled", "Telemarketer filter", True),
        ("spamFilter.telemarketerPhrases", "Phrases that flag spam", []),
        ("spamFilter.onSpamDetected", "polite_dismiss, hang_up or escalate", "polite_dismiss"),
        ("customerPatience.enabled", "Customer patience mode", True),
        ("customerPatience.neverAutoHangup", "Never hang up on customers", True),
        ("bailoutRules.enabled", "Bailout and escalation rules", True),
        ("bailoutRules.maxTurnsBeforeEscalation", "Turns before escalating", 10),
        ("bailoutRules.confusionThreshold", "Confusion score for bailout", 0.3),
        ("confidenceThresholds.highConfidence", "High confidence threshold", 0.85),
        ("confidenceThresholds.mediumConfidence", "Medium confidence threshold", 0.65),
        ("confidenceThresholds.lowConfidence", "Low confidence threshold", 0.45),
        ("confidenceThresholds.fallbackToLLM", "Below this, fall back to the LLM", 0.4),
    )
)

_INFRA = (
    _entry(
        "infra.scenarioPoolCache",
        _reader("ScenarioPoolService.getCachedPool", "Caches the scenario pool per tenant", True),
        scope="global",
    ),
    _entry(
        "infra.strictConfigRegistry",
        _reader("ConfigReader.check_registry", "Strict registry policy"),
        storage_path="aiAgentSettings.infra.strictConfigRegistry",
        default={},
    ),
    _entry(
        "infra.strictConfigRegistry.blockDeadReads",
        _reader("ConfigReader.check_registry", "Dead reads count as violations"),
        storage_path="aiAgentSettings.infra.strictConfigRegistry.blockDeadReads",
        default=False,
    ),
    _entry(
        "infra.strictConfigRegistry.allowlist",
        _reader("ConfigReader.check_registry", "Paths allowed without a registry entry"),
        storage_path="aiAgentSettings.infra.strictConfigRegistry.allowlist",
        default=[],
    ),
    _entry(
        "infra.aw.enforcementMode",
        _reader("ConfigReader.for_call", "Tenant-level enforcement mode"),
        storage_path="aiAgentSettings.infra.aw.enforcementMode",
    ),
)

CONSUMPTION_MAP = ConsumptionMap(
    entries=_REGISTERED + _FRONT_DESK_ONLY + _BOOKING_ONLY + _INTEGRATIONS_ONLY + _LLM0_CONTROLS + _INFRA
)
