"""Readiness tier declarations.

MVA: the agent can run without breaking. PRO: ready for real business.
MAX: top performance, lowest failure, highest conversion. Each tier is only
unlocked once the previous one is complete.
"""

from switchyard.wiring.models.enums import ImpactCategory, TierLevel
from switchyard.wiring.models.enums import ValidatorKind as V
from switchyard.wiring.models.tiers import TierDefinition, TierRequirement
from switchyard.wiring.validators import validator

RELIABILITY = ImpactCategory.RELIABILITY
SAFETY = ImpactCategory.SAFETY
CONVERSION = ImpactCategory.CONVERSION
SPEED = ImpactCategory.SPEED

TIER_MVA = TierDefinition(
    id=TierLevel.MVA,
    name="Minimum Viable Agent",
    description="Agent can run without breaking",
    color="#f59e0b",
    icon="🟡",
    requirements=(
        TierRequirement(
            field_id="frontDesk.aiName",
            purpose="Agent identifies itself by name",
            failure_mode='Generic "AI Assistant" name used',
            impact=RELIABILITY,
            priority=1,
            requires_user_input=True,
            fix_instructions="Go to Front Desk → Personality → Set AI Name",
        ),
        TierRequirement(
            field_id="frontDesk.discoveryConsent.forceLLMDiscovery",
            purpose="Kill switch; must be OFF for scenarios to auto-respond",
            failure_mode="Scenarios matched but LLM speaks instead (expensive, unpredictable)",
            impact=RELIABILITY,
            priority=1,
            critical=True,
            must_be=False,
            recommended_value=False,
            fix_instructions='Go to Front Desk → Discovery & Consent → Set "Force LLM Discovery" to OFF',
        ),
        TierRequirement(
            field_id="frontDesk.discoveryConsent.disableScenarioAutoResponses",
            purpose="Kill switch; must be OFF for scenarios to respond",
            failure_mode="Scenarios matched but silently blocked",
            impact=RELIABILITY,
            priority=1,
            critical=True,
            must_be=False,
            recommended_value=False,
            fix_instructions='Go to Front Desk → Discovery & Consent → Set "Disable Auto-Responses" to OFF',
        ),
        TierRequirement(
            field_id="dataConfig.templateReferences",
            purpose="Links the tenant to scenario templates",
            failure_mode="Zero scenarios available; LLM-only fallback for everything",
            impact=RELIABILITY,
            priority=1,
            critical=True,
            validator=validator(V.HAS_ENABLED_REF, "At least one enabled template reference"),
            requires_user_input=True,
            fix_instructions="Go to Data & Config → Template References → Link an active template",
        ),
        TierRequirement(
            field_id="frontDesk.bookingEnabled",
            purpose="Master switch for booking functionality",
            failure_mode="Cannot collect appointments",
            impact=CONVERSION,
            priority=2,
            recommended_value=True,
            fix_instructions="Go to Front Desk → Booking Prompts → Enable booking",
        ),
        TierRequirement(
            field_id="frontDesk.bookingSlots",
            purpose="Defines what info to collect for appointments",
            failure_mode="Booking enabled but no slots to ask",
            impact=CONVERSION,
            priority=2,
            validator=validator(V.ALL_SLOTS_HAVE_QUESTION, "Every slot needs a question"),
            requires_user_input=True,
            fix_instructions="Go to Front Desk → Booking Prompts → Add slots with questions",
        ),
        TierRequirement(
            field_id="frontDesk.discoveryConsent.bookingRequiresExplicitConsent",
            purpose="Consent gate before collecting personal info",
            failure_mode="Agent jumps into booking without caller consent",
            impact=SAFETY,
            priority=2,
            recommended_value=True,
            fix_instructions="Go to Front Desk → Discovery & Consent → Enable booking consent",
        ),
    ),
)

TIER_PRO = TierDefinition(
    id=TierLevel.PRO,
    name="Production Grade",
    description="Ready for real business",
    color="#22c55e",
    icon="🟢",
    requirements=(
        TierRequirement(
            field_id="frontDesk.escalation.enabled",
            purpose="Allows transfer to a human when requested",
            failure_mode="Caller trapped with AI when they ask for a manager",
            impact=RELIABILITY,
            priority=1,
            recommended_value=True,
            fix_instructions="Go to Front Desk → Escalation → Enable escalation",
        ),
        TierRequirement(
            field_id="frontDesk.escalation.triggerPhrases",
            purpose="Words that trigger a human transfer",
            failure_mode='"Manager" or "real person" ignored',
            impact=RELIABILITY,
            priority=1,
            validator=validator(V.HAS_MIN_ITEMS, "At least 3 trigger phrases", 3),
            recommended_value=[
                "speak to a human",
                "talk to someone",
                "real person",
                "manager",
                "supervisor",
            ],
            fix_instructions="Go to Front Desk → Escalation → Add trigger phrases (manager, supervisor, human, etc.)",
        ),
        TierRequirement(
            field_id="transfers.transferTargets",
            purpose="Phone numbers to transfer to",
            failure_mode="Escalation triggered but nowhere to send the caller",
            impact=RELIABILITY,
            priority=1,
            validator=validator(V.IS_NON_EMPTY_ARRAY, "At least one transfer target"),
            requires_user_input=True,
            fix_instructions="Go to Transfer Calls → Add at least one transfer target",
        ),
        TierRequirement(
            field_id="frontDesk.loopPrevention",
            purpose="Detects when the agent keeps asking the same question",
            failure_mode="Agent loops on a misunderstood slot forever",
            impact=RELIABILITY,
            priority=2,
            validator=validator(V.KEY_IS_TRUE, "Loop prevention must be enabled", "enabled"),
            recommended_value={"enabled": True},
            fix_instructions="Go to Front Desk → Loops → Enable loop prevention",
        ),
        TierRequirement(
            field_id="frontDesk.forbiddenPhrases",
            purpose="Words the agent must never say",
            failure_mode="Agent says \"I don't know\" or \"that's not my job\"",
            impact=SAFETY,
            priority=2,
            validator=validator(V.HAS_MIN_ITEMS, "At least 3 forbidden phrases", 3),
            recommended_value=["I don't know", "that's not my job", "I can't help you"],
            fix_instructions="Go to Front Desk → Forbidden → Add forbidden phrases",
        ),
        TierRequirement(
            field_id="frontDesk.discoveryConsent.consentPhrases",
            purpose='Words that mean "yes, proceed with booking"',
            failure_mode="Caller says \"sure\" but the agent doesn't recognize consent",
            impact=CONVERSION,
            priority=3,
            validator=validator(V.HAS_MIN_ITEMS, "At least 5 consent phrases", 5),
            recommended_value=["yes", "sure", "okay", "please", "go ahead", "sounds good"],
            fix_instructions="Go to Front Desk → Discovery & Consent → Add consent phrases",
        ),
        TierRequirement(
            field_id="frontDesk.escalation.transferMessage",
            purpose="What the agent says during transfer",
            failure_mode="Silent transfer or generic message",
            impact=RELIABILITY,
            priority=3,
            requires_user_input=True,
            fix_instructions="Go to Front Desk → Escalation → Set transfer message",
        ),
    ),
)

TIER_MAX = TierDefinition(
    id=TierLevel.MAX,
    name="Full Potential",
    description="Top performance, lowest failure, highest conversion",
    color="#8b5cf6",
    icon="🟣",
    requirements=(
        TierRequirement(
            field_id="frontDesk.greetingResponses",
            purpose='Zero-token instant response to "hello"',
            failure_mode="LLM call for a simple greeting (slow, costly)",
            impact=SPEED,
            priority=1,
            payoff='Reduces "hello?" dead air by 80%',
            validator=validator(V.IS_NON_EMPTY_ARRAY, "At least one greeting response"),
            requires_user_input=True,
            fix_instructions="Go to Front Desk → Greetings → Add greeting responses",
        ),
        TierRequirement(
            field_id="frontDesk.fastPathBooking.enabled",
            purpose="Instant booking offer for urgent intent",
            failure_mode='Caller says "send someone" but the agent keeps asking questions',
            impact=CONVERSION,
            priority=1,
            payoff="Increases booking rate 20-30%",
            recommended_value=True,
            fix_instructions="Go to Front Desk → Fast-Path → Enable fast-path",
        ),
        TierRequirement(
            field_id="frontDesk.fastPathBooking.triggerKeywords",
            purpose="Keywords that trigger the instant booking offer",
            failure_mode='"Send someone out" doesn\'t trigger fast-path',
            impact=CONVERSION,
            priority=1,
            validator=validator(V.HAS_MIN_ITEMS, "At least 10 trigger keywords", 10),
            recommended_value=[
                "schedule",
                "appointment",
                "book",
                "come out",
                "send someone",
                "asap",
                "as soon as possible",
                "today",
                "emergency",
                "technician",
            ],
            fix_instructions="Go to Front Desk → Fast-Path → Add trigger keywords (schedule, book, come out, etc.)",
        ),
        TierRequirement(
            field_id="frontDesk.fallbackResponses",
            purpose="Custom responses when nothing matches",
            failure_mode="Odd LLM fallback phrasing",
            impact=RELIABILITY,
            priority=2,
            payoff="Eliminates weird LLM fallback phrases",
            validator=validator(V.IS_NON_EMPTY, "Fallback responses configured"),
            requires_user_input=True,
            fix_instructions="Go to Front Desk → Fallbacks → Add fallback responses",
        ),
        TierRequirement(
            field_id="frontDesk.vocabulary",
            purpose="Translates caller slang to standard terms",
            failure_mode='"My AC is busted" not recognized as a repair request',
            impact=RELIABILITY,
            priority=2,
            payoff="Better scenario matching for colloquial speech",
            validator=validator(V.IS_NON_EMPTY, "Vocabulary mappings configured"),
            requires_user_input=True,
            fix_instructions="Go to Front Desk → Vocabulary → Add term mappings",
        ),
        TierRequirement(
            field_id="frontDesk.emotions",
            purpose="Detects caller emotional state",
            failure_mode="Angry caller gets a robotic response",
            impact=RELIABILITY,
            priority=3,
            payoff="Better handling of frustrated callers",
            validator=validator(V.IS_NON_EMPTY, "Emotion responses configured"),
            requires_user_input=True,
            fix_instructions="Go to Front Desk → Emotions → Configure emotion detection",
        ),
        TierRequirement(
            field_id="frontDesk.frustration",
            purpose="De-escalation when the caller is frustrated",
            failure_mode="Frustrated caller not recognized, keeps getting the script",
            impact=RELIABILITY,
            priority=3,
            payoff="Reduces call abandonment from frustration",
            validator=validator(V.IS_NON_EMPTY, "Frustration triggers configured"),
            requires_user_input=True,
            fix_instructions="Go to Front Desk → Frustration → Configure frustration handling",
        ),
        TierRequirement(
            field_id="dataConfig.cheatSheets",
            purpose="Quick FAQ knowledge for common questions",
            failure_mode="Simple FAQ goes to a full LLM call",
            impact=SPEED,
            priority=3,
            payoff="Faster FAQ responses, lower LLM costs",
            validator=validator(V.IS_NOT_NONE, "Cheat sheet linked"),
            requires_user_input=True,
            fix_instructions="Go to Data & Config → Cheat Sheets → Add FAQ content",
        ),
        TierRequirement(
            field_id="dataConfig.placeholders",
            purpose="Dynamic values in responses ({companyName}, {phone})",
            failure_mode="Hardcoded company name in responses",
            impact=RELIABILITY,
            priority=4,
            validator=validator(V.IS_NON_EMPTY, "Placeholders configured"),
            requires_user_input=True,
            fix_instructions="Go to Data & Config → Placeholders → Add tenant placeholders",
        ),
        TierRequirement(
            field_id="dynamicFlow.companyFlows",
            purpose="Custom trigger-action automation",
            failure_mode="No business-specific flow customization",
            impact=CONVERSION,
            priority=4,
            payoff="Custom flows for specific business needs",
            validator=validator(V.IS_NON_EMPTY_ARRAY, "At least one tenant flow"),
            requires_user_input=True,
            fix_instructions="Go to Dynamic Flow → Create tenant-specific flows",
        ),
    ),
)

ALL_TIERS: tuple[TierDefinition, ...] = (TIER_MVA, TIER_PRO, TIER_MAX)

NOT_READY_DISPLAY = {
    "id": TierLevel.NONE,
    "name": "Not Ready",
    "icon": "⚪",
    "color": "#6b7280",
}
