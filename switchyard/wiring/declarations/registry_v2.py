"""Canonical path registry, version 2.

Every configurable capability of the agent is declared here: where it is
edited, where it is stored, how it is validated, and what it defaults to.
Runtime code must not read a path that is not declared here or in the
consumption map.
"""

from typing import Any

from switchyard.wiring.models.enums import ValidatorKind as V
from switchyard.wiring.models.registry import (
    DerivedSource,
    FieldNode,
    Registry,
    SectionNode,
    StoredLocation,
    TabNode,
    TenantRule,
    UIDescriptor,
)
from switchyard.wiring.validators import validator

REGISTRY_VERSION = "AW_REGISTRY_V2.0"

FRONT_DESK = "aiAgentSettings.frontDeskBehavior"


def _field(
    id: str,
    label: str,
    path: str,
    ui_path: str,
    *,
    input_id: str | None = None,
    collection: str = "companies",
    **kwargs: Any,
) -> FieldNode:
    return FieldNode(
        id=id,
        label=label,
        ui=UIDescriptor(input_id=input_id, path=ui_path),
        storage=StoredLocation(collection=collection, path=path),
        **kwargs,
    )


_personality = SectionNode(
    id="frontDesk.personality",
    label="Personality Settings",
    description="AI name, tone, professionalism",
    ui_path="Front Desk → Personality",
    fields=(
        _field(
            "frontDesk.aiName",
            "AI Name",
            "aiAgentSettings.aiName",
            "Front Desk → Personality → AI Name",
            input_id="aiName",
            required=True,
            validators=(validator(V.IS_NON_EMPTY_STRING, "AI name is required"),),
            default_value="AI Assistant",
        ),
        _field(
            "frontDesk.conversationStyle",
            "Conversation Style",
            f"{FRONT_DESK}.conversationStyle",
            "Front Desk → Personality → Conversation Style",
            input_id="conversationStyle",
            default_value="balanced",
            allowed_values=("confident", "balanced", "polite"),
        ),
        _field(
            "frontDesk.styleAcknowledgments",
            "Style Acknowledgments",
            f"{FRONT_DESK}.styleAcknowledgments",
            "Front Desk → Personality → Style Acknowledgments",
            input_id="styleAcknowledgments",
            default_value={
                "confident": "Let's get this taken care of.",
                "balanced": "I can help with that!",
                "polite": "I'd be happy to help.",
            },
        ),
        _field(
            "frontDesk.personality.warmth",
            "Warmth",
            f"{FRONT_DESK}.personality.warmth",
            "Front Desk → Personality → Warmth",
            input_id="warmth",
            default_value=0.6,
        ),
        _field(
            "frontDesk.personality.speakingPace",
            "Speaking Pace",
            f"{FRONT_DESK}.personality.speakingPace",
            "Front Desk → Personality → Speaking Pace",
            input_id="speakingPace",
            default_value="normal",
            allowed_values=("slow", "normal", "fast"),
        ),
    ),
)

_greetings = SectionNode(
    id="frontDesk.greetings",
    label="Greeting Responses",
    description="Instant responses to greetings",
    ui_path="Front Desk → Greetings",
    fields=(
        _field(
            "frontDesk.greetingResponses",
            "Greeting Responses",
            f"{FRONT_DESK}.greetingResponses",
            "Front Desk → Greetings → Responses",
            input_id="greetingResponses",
            default_value=[],
        ),
    ),
)

_discovery_consent = SectionNode(
    id="frontDesk.discoveryConsent",
    label="Discovery & Consent",
    description="Kill switches and consent gate",
    ui_path="Front Desk → Discovery & Consent",
    critical=True,
    fields=(
        _field(
            "frontDesk.discoveryConsent.forceLLMDiscovery",
            "Force LLM Discovery",
            f"{FRONT_DESK}.discoveryConsent.forceLLMDiscovery",
            "Front Desk → Discovery & Consent → Force LLM Discovery",
            input_id="forceLLMDiscovery",
            required=True,
            critical=True,
            kill_switch=True,
            kill_switch_effect="When true, scenarios become tools only - LLM speaks first",
            default_value=False,
        ),
        _field(
            "frontDesk.discoveryConsent.disableScenarioAutoResponses",
            "Disable Scenario Auto-Responses",
            f"{FRONT_DESK}.discoveryConsent.disableScenarioAutoResponses",
            "Front Desk → Discovery & Consent → Disable Auto-Responses",
            input_id="disableScenarioAutoResponses",
            required=True,
            critical=True,
            kill_switch=True,
            kill_switch_effect="When true, scenarios matched but cannot auto-respond",
            default_value=False,
        ),
        _field(
            "frontDesk.discoveryConsent.bookingRequiresExplicitConsent",
            "Booking Requires Consent",
            f"{FRONT_DESK}.discoveryConsent.bookingRequiresExplicitConsent",
            "Front Desk → Discovery & Consent → Booking Consent",
            input_id="bookingRequiresExplicitConsent",
            required=True,
            default_value=True,
        ),
        _field(
            "frontDesk.discoveryConsent.consentPhrases",
            "Consent Phrases",
            f"{FRONT_DESK}.discoveryConsent.consentPhrases",
            "Front Desk → Discovery & Consent → Consent Phrases",
            input_id="consentPhrases",
            default_value=["yes", "sure", "okay", "please", "go ahead", "schedule", "book"],
        ),
        _field(
            "frontDesk.discoveryConsent.autoReplyAllowedScenarioTypes",
            "Auto-Reply Allowed Types",
            f"{FRONT_DESK}.discoveryConsent.autoReplyAllowedScenarioTypes",
            "Front Desk → Discovery & Consent → Allowed Types",
            input_id="autoReplyAllowedScenarioTypes",
            default_value=["FAQ", "TROUBLESHOOT", "EMERGENCY"],
        ),
    ),
)

_hours = SectionNode(
    id="frontDesk.hoursAvailability",
    label="Hours & Availability",
    description="Canonical business hours used for after-hours routing",
    ui_path="Front Desk → Hours & Availability",
    fields=(
        _field(
            "frontDesk.businessHours",
            "Business Hours",
            "aiAgentSettings.businessHours",
            "Front Desk → Hours & Availability → Business Hours",
            input_id="businessHours",
            notes="Used by after-hours routing and the after_hours flow trigger",
        ),
    ),
)

_booking_prompts = SectionNode(
    id="frontDesk.bookingPrompts",
    label="Booking Prompts",
    description="Slot definitions for booking flow",
    ui_path="Front Desk → Booking Prompts",
    critical=True,
    fields=(
        _field(
            "frontDesk.bookingEnabled",
            "Booking Enabled",
            f"{FRONT_DESK}.bookingEnabled",
            "Front Desk → Booking Prompts → Enabled",
            input_id="bookingEnabled",
            required=True,
            default_value=True,
        ),
        _field(
            "frontDesk.bookingSlots",
            "Booking Slots",
            f"{FRONT_DESK}.bookingSlots",
            "Front Desk → Booking Prompts → Slots",
            input_id="bookingSlots",
            required=True,
            validators=(
                validator(V.IS_NON_EMPTY_ARRAY, "At least one booking slot required"),
                validator(V.ALL_SLOTS_VALID, "All slots must have id, type, and question"),
            ),
            default_value=[],
            notes="Every slot prompt (question, cityPrompt, zipPrompt, ...) lives on the slot",
        ),
    ),
)

_booking_continuity = SectionNode(
    id="frontDesk.bookingContinuity",
    label="Booking Continuity",
    description="How booking survives interruptions and confirmation questions",
    ui_path="Front Desk → Personality → Booking Continuity",
    fields=(
        _field(
            "frontDesk.offRailsRecovery.bridgeBack.resumeBooking",
            "Resume Booking Protocol",
            f"{FRONT_DESK}.offRailsRecovery.bridgeBack.resumeBooking",
            "Front Desk → Personality → Resume Booking Protocol",
            input_id="resumeBooking",
            validators=(
                validator(V.IS_NON_EMPTY_OBJECT, "resumeBooking must be an object"),
                validator(
                    V.RESUME_BOOKING_HAS_TEMPLATE,
                    "resumeBooking.template is required when enabled",
                ),
            ),
            default_value={"enabled": True},
        ),
        _field(
            "frontDesk.confirmationRequests",
            "Confirmation Requests",
            f"{FRONT_DESK}.confirmationRequests",
            "Front Desk → Personality → Confirmation Requests",
            input_id="confirmationRequests",
            validators=(
                validator(V.IS_NON_EMPTY_OBJECT, "confirmationRequests must be an object"),
                validator(
                    V.CONFIRMATION_REQUESTS_HAS_TRIGGERS,
                    "confirmationRequests.triggers must have at least 2 entries when enabled",
                ),
            ),
            default_value={"enabled": True},
        ),
    ),
)

_fast_path = SectionNode(
    id="frontDesk.fastPath",
    label="Fast-Path Booking",
    description="Immediate booking offer for urgent keywords",
    ui_path="Front Desk → Fast-Path",
    fields=(
        _field(
            "frontDesk.fastPathBooking.enabled",
            "Fast-Path Enabled",
            f"{FRONT_DESK}.fastPathBooking.enabled",
            "Front Desk → Fast-Path → Enabled",
            input_id="fastPathEnabled",
            default_value=True,
        ),
        _field(
            "frontDesk.fastPathBooking.triggerKeywords",
            "Trigger Keywords",
            f"{FRONT_DESK}.fastPathBooking.triggerKeywords",
            "Front Desk → Fast-Path → Keywords",
            input_id="fastPathKeywords",
            default_value=["schedule", "appointment", "book", "come out", "send someone"],
        ),
        _field(
            "frontDesk.fastPathBooking.offerScript",
            "Offer Script",
            f"{FRONT_DESK}.fastPathBooking.offerScript",
            "Front Desk → Fast-Path → Script",
            input_id="fastPathScript",
            default_value="Okay. would you like me to schedule that for you now?",
        ),
    ),
)

_vocabulary = SectionNode(
    id="frontDesk.vocabulary",
    label="Vocabulary",
    description="Word replacements and translations",
    ui_path="Front Desk → Vocabulary",
    fields=(
        _field(
            "frontDesk.vocabulary",
            "Vocabulary Map",
            f"{FRONT_DESK}.vocabulary",
            "Front Desk → Vocabulary → Mappings",
            input_id="vocabulary",
            default_value={},
        ),
    ),
)

_escalation = SectionNode(
    id="frontDesk.escalation",
    label="Escalation",
    description="Human transfer triggers",
    ui_path="Front Desk → Escalation",
    fields=(
        _field(
            "frontDesk.escalation.enabled",
            "Escalation Enabled",
            f"{FRONT_DESK}.escalation.enabled",
            "Front Desk → Escalation → Enabled",
            input_id="escalationEnabled",
            default_value=True,
        ),
        _field(
            "frontDesk.escalation.triggerPhrases",
            "Trigger Phrases",
            f"{FRONT_DESK}.escalation.triggerPhrases",
            "Front Desk → Escalation → Phrases",
            input_id="escalationPhrases",
            default_value=["speak to a human", "talk to someone", "real person", "transfer me"],
        ),
        _field(
            "frontDesk.escalation.transferMessage",
            "Transfer Message",
            f"{FRONT_DESK}.escalation.transferMessage",
            "Front Desk → Escalation → Message",
            input_id="escalationMessage",
            default_value="One moment while I transfer you to our team.",
        ),
    ),
)

_emotions = SectionNode(
    id="frontDesk.emotions",
    label="Emotions",
    description="Emotion detection settings",
    ui_path="Front Desk → Emotions",
    fields=(
        _field(
            "frontDesk.emotions",
            "Emotion Config",
            f"{FRONT_DESK}.emotionResponses",
            "Front Desk → Emotions → Config",
            input_id="emotions",
            validators=(validator(V.IS_NON_EMPTY_OBJECT, "emotionResponses must be an object"),),
            default_value={},
        ),
    ),
)

_frustration = SectionNode(
    id="frontDesk.frustration",
    label="Frustration",
    description="Frustration detection and handling",
    ui_path="Front Desk → Frustration",
    fields=(
        _field(
            "frontDesk.frustration",
            "Frustration Config",
            f"{FRONT_DESK}.frustrationTriggers",
            "Front Desk → Frustration → Config",
            input_id="frustration",
            validators=(
                validator(
                    V.IS_NON_EMPTY_ARRAY, "frustrationTriggers must be a non-empty array"
                ),
                validator(
                    V.HAS_MIN_ITEMS, "frustrationTriggers should include at least 2 phrases", 2
                ),
            ),
            default_value=[],
        ),
    ),
)

_forbidden = SectionNode(
    id="frontDesk.forbidden",
    label="Forbidden Phrases",
    description="Phrases AI must never say",
    ui_path="Front Desk → Forbidden",
    fields=(
        _field(
            "frontDesk.forbiddenPhrases",
            "Forbidden Phrases",
            f"{FRONT_DESK}.forbiddenPhrases",
            "Front Desk → Forbidden → Phrases",
            input_id="forbiddenPhrases",
            default_value=[],
        ),
    ),
)

_loops = SectionNode(
    id="frontDesk.loops",
    label="Loop Prevention",
    description="Loop detection and recovery",
    ui_path="Front Desk → Loops",
    fields=(
        _field(
            "frontDesk.loopPrevention",
            "Loop Prevention Config",
            f"{FRONT_DESK}.loopPrevention",
            "Front Desk → Loops → Config",
            input_id="loopPrevention",
            default_value={},
            notes="Nudge prompts (nudgeNamePrompt, nudgePhonePrompt, ...) live on this object",
        ),
    ),
)

_fallbacks = SectionNode(
    id="frontDesk.fallbacks",
    label="Fallback Responses",
    description="Default responses when no match",
    ui_path="Front Desk → Fallbacks",
    fields=(
        _field(
            "frontDesk.fallbackResponses",
            "Fallback Responses",
            f"{FRONT_DESK}.fallbackResponses",
            "Front Desk → Fallbacks → Responses",
            input_id="fallbackResponses",
            default_value={},
        ),
    ),
)

_front_desk = TabNode(
    id="tab.frontDesk",
    label="Front Desk",
    description="Controls how AI talks to callers",
    critical=True,
    sections=(
        _personality,
        _greetings,
        _discovery_consent,
        _hours,
        _booking_prompts,
        _booking_continuity,
        _fast_path,
        _vocabulary,
        _escalation,
        _emotions,
        _frustration,
        _forbidden,
        _loops,
        _fallbacks,
    ),
)

_data_config = TabNode(
    id="tab.dataConfig",
    label="Data & Config",
    description="Templates, scenarios, placeholders",
    critical=True,
    sections=(
        SectionNode(
            id="dataConfig.templateReferences",
            label="Template References",
            description="Links company to global templates",
            ui_path="Data & Config → Templates",
            critical=True,
            fields=(
                _field(
                    "dataConfig.templateReferences",
                    "Template References",
                    "aiAgentSettings.templateReferences",
                    "Data & Config → Templates → References",
                    input_id="templateReferences",
                    required=True,
                    critical=True,
                    validators=(
                        validator(V.IS_NON_EMPTY_ARRAY, "At least one template must be linked"),
                    ),
                    default_value=[],
                    notes="If empty, the scenario pool is empty at runtime",
                ),
            ),
        ),
        SectionNode(
            id="dataConfig.scenarios",
            label="Scenarios",
            description="Trade knowledge scenarios from templates",
            ui_path="Data & Config → Scenarios",
            fields=(
                FieldNode(
                    id="dataConfig.scenarios",
                    label="Scenario Pool",
                    ui=UIDescriptor(input_id="scenarios", path="Data & Config → Scenarios → Pool"),
                    storage=DerivedSource(
                        method="Load templates from aiAgentSettings.templateReferences",
                        depends_on=("dataConfig.templateReferences",),
                        fix_instructions={
                            "noTemplateRefs": "Select templates in Data & Config → Template References",
                            "templatesMissing": "Global templates not found (restore templates)",
                            "scenariosEmpty": "Template contains 0 scenarios (add scenarios to template)",
                        },
                    ),
                    scope="global",
                    notes="Scenarios come from global templates only; tenant records hold no scenario text",
                ),
            ),
        ),
        SectionNode(
            id="dataConfig.cheatSheets",
            label="Cheat Sheets",
            description="FAQ knowledge base",
            ui_path="Data & Config → Templates",
            fields=(
                _field(
                    "dataConfig.cheatSheets",
                    "Cheat Sheet Config",
                    "linked.cheatSheets",
                    "Data & Config → Templates (Cheat Sheet Editor separate)",
                    input_id="templateReferences",
                    collection="cheatsheetversions",
                ),
            ),
        ),
        SectionNode(
            id="dataConfig.placeholders",
            label="Placeholders",
            description="Dynamic tokens like {companyName}",
            ui_path="Data & Config → Placeholders",
            fields=(
                _field(
                    "dataConfig.placeholders",
                    "Placeholder Values",
                    "aiAgentSettings.placeholders",
                    "Data & Config → Placeholders → Values",
                    input_id="placeholders",
                    default_value={},
                ),
            ),
        ),
    ),
)

_dynamic_flow = TabNode(
    id="tab.dynamicFlow",
    label="Dynamic Flow",
    description="Trigger-based conversation flows",
    sections=(
        SectionNode(
            id="dynamicFlow.companyFlows",
            label="Company Flows",
            description="Active flows for this company",
            ui_path="Dynamic Flow → Company Flows",
            fields=(
                _field(
                    "dynamicFlow.companyFlows",
                    "Company Flows",
                    "linked.companyFlows",
                    "Dynamic Flow → Company Flows → List",
                    input_id="companyFlows",
                    collection="dynamicflows",
                    default_value=[],
                ),
            ),
        ),
    ),
)

_transfers = TabNode(
    id="tab.transfers",
    label="Transfer Calls",
    description="Transfer targets and rules",
    sections=(
        SectionNode(
            id="transfers.directory",
            label="Transfer Directory",
            description="Available transfer targets",
            ui_path="Transfer Calls → Directory",
            fields=(
                _field(
                    "transfers.transferTargets",
                    "Transfer Targets",
                    "aiAgentSettings.transferTargets",
                    "Transfer Calls → Directory → Targets",
                    input_id="transferTargets",
                    default_value=[],
                ),
            ),
        ),
    ),
)

_integrations = TabNode(
    id="tab.integrations",
    label="Integrations",
    description="Third-party integrations (Google Calendar, SMS)",
    deprecated=True,
    sections=(
        SectionNode(
            id="integrations.googleCalendar",
            label="Google Calendar Integration",
            ui_path="Configuration → Google Calendar",
            fields=(
                _field(
                    "integrations.googleCalendar.enabled",
                    "Google Calendar Enabled",
                    "googleCalendar.enabled",
                    "Configuration → Google Calendar → Enabled",
                    default_value=False,
                ),
                _field(
                    "integrations.googleCalendar.connected",
                    "Calendar Connected",
                    "googleCalendar.connected",
                    "Configuration → Google Calendar → Connected",
                    default_value=False,
                ),
                _field(
                    "integrations.googleCalendar.calendarId",
                    "Calendar ID",
                    "googleCalendar.calendarId",
                    "Configuration → Google Calendar → Calendar",
                    default_value="primary",
                ),
                _field(
                    "integrations.googleCalendar.bufferMinutes",
                    "Buffer Before First Slot",
                    "googleCalendar.settings.bufferMinutes",
                    "Configuration → Google Calendar → Buffer",
                    default_value=60,
                ),
                _field(
                    "integrations.googleCalendar.defaultDuration",
                    "Default Appointment Duration",
                    "googleCalendar.settings.defaultDurationMinutes",
                    "Configuration → Google Calendar → Duration",
                    default_value=60,
                ),
                _field(
                    "integrations.googleCalendar.maxDaysAhead",
                    "Max Booking Days Ahead",
                    "googleCalendar.settings.maxBookingDaysAhead",
                    "Configuration → Google Calendar → Days Ahead",
                    default_value=30,
                ),
                _field(
                    "integrations.googleCalendar.fallbackMode",
                    "Fallback Mode",
                    "googleCalendar.settings.fallbackMode",
                    "Configuration → Google Calendar → Fallback Mode",
                    default_value="capture_preference",
                    allowed_values=("capture_preference", "transfer", "callback"),
                ),
                _field(
                    "integrations.googleCalendar.eventTitleTemplate",
                    "Event Title Template",
                    "googleCalendar.settings.eventTitleTemplate",
                    "Configuration → Google Calendar → Event Title",
                    default_value="{serviceType} - {customerName}",
                ),
            ),
        ),
        SectionNode(
            id="integrations.serviceTypeTags",
            label="Service Type Tags",
            ui_path="Configuration → Google Calendar → Colors",
            fields=(
                _field(
                    "integrations.googleCalendar.colorCodingEnabled",
                    "Enable Color Coding",
                    "googleCalendar.eventColors.enabled",
                    "Configuration → Google Calendar → Colors → Enabled",
                    default_value=True,
                ),
                _field(
                    "integrations.googleCalendar.colorMapping",
                    "Service Type Color Mapping",
                    "googleCalendar.eventColors.colorMapping",
                    "Configuration → Google Calendar → Colors → Mapping",
                    default_value=[],
                ),
                _field(
                    "integrations.googleCalendar.defaultColor",
                    "Default Color (Unknown Type)",
                    "googleCalendar.eventColors.defaultColorId",
                    "Configuration → Google Calendar → Colors → Default",
                    default_value="7",
                ),
            ),
        ),
        SectionNode(
            id="integrations.smsNotifications",
            label="SMS Notifications",
            ui_path="Configuration → SMS",
            fields=(
                _field(
                    "integrations.smsNotifications.enabled",
                    "SMS Notifications Enabled",
                    "smsNotifications.enabled",
                    "Configuration → SMS → Enabled",
                    default_value=False,
                ),
                _field(
                    "integrations.smsNotifications.bookingConfirmation",
                    "Booking Confirmation Template",
                    "smsNotifications.templates.bookingConfirmation",
                    "Configuration → SMS → Booking Confirmation",
                    default_value=(
                        "Hi {customerName}! Your appointment with {companyName} "
                        "is confirmed for {appointmentTime}."
                    ),
                ),
                _field(
                    "integrations.smsNotifications.reminder24h",
                    "24-Hour Reminder Template",
                    "smsNotifications.templates.reminder24h",
                    "Configuration → SMS → 24h Reminder",
                    default_value=(
                        "Reminder: Your appointment with {companyName} is tomorrow "
                        "at {appointmentTime}."
                    ),
                ),
                _field(
                    "integrations.smsNotifications.reminder1h",
                    "1-Hour Reminder Template",
                    "smsNotifications.templates.reminder1h",
                    "Configuration → SMS → 1h Reminder",
                    default_value=(
                        "Heads up! Your technician from {companyName} will arrive in about 1 hour."
                    ),
                ),
                _field(
                    "integrations.smsNotifications.quietHoursStart",
                    "Quiet Hours Start",
                    "smsNotifications.quietHours.start",
                    "Configuration → SMS → Quiet Hours",
                    default_value="21:00",
                ),
                _field(
                    "integrations.smsNotifications.quietHoursEnd",
                    "Quiet Hours End",
                    "smsNotifications.quietHours.end",
                    "Configuration → SMS → Quiet Hours",
                    default_value="08:00",
                ),
            ),
        ),
    ),
)


def _empty_tab(id: str, label: str, description: str, scope: str = "company") -> TabNode:
    return TabNode(id=id, label=label, description=description, scope=scope)


REGISTRY = Registry(
    version=REGISTRY_VERSION,
    tabs=(
        _front_desk,
        _data_config,
        _dynamic_flow,
        _transfers,
        _empty_tab("tab.callProtection", "Call Protection", "Pre-answer filters"),
        _empty_tab("tab.flowTree", "Flow Tree", "AI decision visualization"),
        _integrations,
        _empty_tab("tab.callCenter", "Call Center", "Call handling settings"),
        _empty_tab("tab.companyContacts", "Company Contacts", "Contact directory"),
        _empty_tab("tab.links", "Links", "External links configuration"),
        _empty_tab("tab.versionHistory", "Version History", "Config version history"),
        _empty_tab("tab.wiring", "Wiring", "Platform wiring source of truth", scope="system"),
        _empty_tab("tab.legacy", "Legacy", "Legacy features (deprecated)"),
    ),
    tenant_rules=(
        TenantRule(
            id="TENANT_RULE_COMPANY_SCOPE",
            description="All company config reads and writes include the tenant id",
        ),
        TenantRule(
            id="TENANT_RULE_GLOBAL_TEMPLATES",
            description="Scenarios and templates are global; tenants only reference template ids",
        ),
        TenantRule(
            id="TENANT_RULE_NO_SCENARIO_IN_COMPANY",
            description="Tenant records never contain scenario text, only template references",
        ),
        TenantRule(
            id="TENANT_RULE_CACHE_SCOPED",
            description="Every cache key includes the tenant id",
        ),
    ),
)
