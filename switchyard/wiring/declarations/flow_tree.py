"""Call-flow tree used to cite root causes.

Diagnosed issues name the node where a run went wrong. The tree is static
and only describes the turn pipeline; it is never executed here.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

FLOW_TREE_VERSION = "FLOW_TREE_V1.0.1"
ENTRY_NODE_ID = "node.callStart"
EXIT_NODE_ID = "node.turnEnd"


class NodeType(str, Enum):
    ENTRY = "entry"
    GUARD = "guard"
    DETECTOR = "detector"
    DECISION = "decision"
    ACTION = "action"
    ROUTER = "router"
    EXIT = "exit"


class FlowNode(BaseModel):
    """A step of the turn pipeline."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    type: NodeType
    description: str = ""
    config_paths: tuple[str, ...] = Field(
        default_factory=tuple, description="Canonical paths the step consumes"
    )


class FlowEdge(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str
    when: str = "always"


NODES: tuple[FlowNode, ...] = (
    FlowNode(id="node.callStart", label="Call Start", type=NodeType.ENTRY,
             description="Inbound call received"),
    FlowNode(id="node.emptyUtteranceGuard", label="Empty Utterance Guard", type=NodeType.GUARD,
             description="Routes empty or punctuation-only input to the silence handler"),
    FlowNode(id="node.silenceHandler", label="Silence Handler", type=NodeType.ACTION,
             description="Deterministic silence response"),
    FlowNode(id="node.slotExtraction", label="Slot Extraction", type=NodeType.ACTION,
             description="Extract name, phone, address and time from the utterance",
             config_paths=("frontDesk.bookingSlots",)),
    FlowNode(id="node.bookingModeCheck", label="Booking Mode Check", type=NodeType.DECISION,
             description="Is booking mode locked?"),
    FlowNode(id="node.bookingRunner", label="Booking Flow Runner", type=NodeType.ROUTER,
             description="Deterministic slot collection",
             config_paths=("frontDesk.bookingSlots",)),
    FlowNode(id="node.metaIntentDetector", label="Meta Intent Detector", type=NodeType.DETECTOR,
             description="Human-request and cancel handling",
             config_paths=("frontDesk.escalation.triggerPhrases",)),
    FlowNode(id="node.directBookingIntentDetector", label="Direct Booking Intent Detector",
             type=NodeType.DETECTOR, description="Explicit booking requests",
             config_paths=("frontDesk.bookingEnabled",)),
    FlowNode(id="node.consentGate", label="Consent Gate", type=NodeType.GUARD,
             description="Waits for caller consent before booking",
             config_paths=(
                 "frontDesk.discoveryConsent.bookingRequiresExplicitConsent",
                 "frontDesk.discoveryConsent.consentPhrases",
             )),
    FlowNode(id="node.bookingTrigger", label="Booking Mode Trigger", type=NodeType.ACTION,
             description="Locks booking mode"),
    FlowNode(id="node.fastPathIntentDetector", label="Fast Path Intent Detector",
             type=NodeType.DETECTOR, description="Urgent-intent keyword match",
             config_paths=(
                 "frontDesk.fastPathBooking.enabled",
                 "frontDesk.fastPathBooking.triggerKeywords",
             )),
    FlowNode(id="node.fastPathOffer", label="Fast Path Offer", type=NodeType.ACTION,
             description="Offers to book immediately"),
    FlowNode(id="node.discoveryClarification", label="Discovery Clarification",
             type=NodeType.DECISION, description="Asks a clarifying question when the issue is vague",
             config_paths=("frontDesk.discoveryConsent.forceLLMDiscovery",)),
    FlowNode(id="node.scenarioMatcher", label="Scenario Matcher", type=NodeType.DETECTOR,
             description="Matches the utterance against the tenant's scenario pool",
             config_paths=(
                 "dataConfig.templateReferences",
                 "dataConfig.scenarios",
                 "frontDesk.discoveryConsent.disableScenarioAutoResponses",
             )),
    FlowNode(id="node.scenarioResponse", label="Scenario Response", type=NodeType.ACTION,
             description="Replies with the matched scenario"),
    FlowNode(id="node.llmFallback", label="LLM Fallback", type=NodeType.ACTION,
             description="Model-generated reply when nothing deterministic matched"),
    FlowNode(id="node.bookingComplete", label="Booking Complete", type=NodeType.ACTION,
             description="All slots collected"),
    FlowNode(id="node.turnEnd", label="Turn End", type=NodeType.EXIT,
             description="Response sent to the caller"),
)

EDGES: tuple[FlowEdge, ...] = (
    FlowEdge(id="edge.1", source="node.callStart", target="node.emptyUtteranceGuard"),
    FlowEdge(id="edge.2a", source="node.emptyUtteranceGuard", target="node.silenceHandler",
             when="isEmpty"),
    FlowEdge(id="edge.2b", source="node.emptyUtteranceGuard", target="node.slotExtraction",
             when="hasContent"),
    FlowEdge(id="edge.3", source="node.slotExtraction", target="node.bookingModeCheck"),
    FlowEdge(id="edge.4a", source="node.bookingModeCheck", target="node.bookingRunner",
             when="bookingModeLocked"),
    FlowEdge(id="edge.4b", source="node.bookingModeCheck", target="node.metaIntentDetector",
             when="not bookingModeLocked"),
    FlowEdge(id="edge.5a", source="node.metaIntentDetector", target="node.turnEnd",
             when="humanRequest or cancel"),
    FlowEdge(id="edge.5b", source="node.metaIntentDetector",
             target="node.directBookingIntentDetector", when="noMetaIntent"),
    FlowEdge(id="edge.6a", source="node.directBookingIntentDetector",
             target="node.bookingTrigger", when="hasDirectIntent and not requireExplicitConsent"),
    FlowEdge(id="edge.6b", source="node.directBookingIntentDetector",
             target="node.fastPathOffer", when="hasDirectIntent and requireExplicitConsent"),
    FlowEdge(id="edge.6c", source="node.directBookingIntentDetector",
             target="node.fastPathIntentDetector", when="noDirectIntent"),
    FlowEdge(id="edge.7a", source="node.fastPathIntentDetector", target="node.fastPathOffer",
             when="fastPathTriggered"),
    FlowEdge(id="edge.7b", source="node.fastPathIntentDetector", target="node.consentGate",
             when="bookingConsentPending"),
    FlowEdge(id="edge.7c", source="node.fastPathIntentDetector",
             target="node.discoveryClarification", when="not bookingConsentPending"),
    FlowEdge(id="edge.8a", source="node.consentGate", target="node.bookingTrigger",
             when="hasConsent"),
    FlowEdge(id="edge.8b", source="node.consentGate", target="node.discoveryClarification",
             when="noConsent"),
    FlowEdge(id="edge.9", source="node.bookingTrigger", target="node.bookingRunner"),
    FlowEdge(id="edge.10a", source="node.discoveryClarification", target="node.scenarioMatcher",
             when="issueClear"),
    FlowEdge(id="edge.10b", source="node.discoveryClarification", target="node.turnEnd",
             when="askClarifyingQuestion"),
    FlowEdge(id="edge.11a", source="node.scenarioMatcher", target="node.scenarioResponse",
             when="scenarioMatched"),
    FlowEdge(id="edge.11b", source="node.scenarioMatcher", target="node.llmFallback",
             when="noScenarioMatch"),
    FlowEdge(id="edge.12a", source="node.bookingRunner", target="node.bookingComplete",
             when="allSlotsCollected"),
    FlowEdge(id="edge.12b", source="node.bookingRunner", target="node.turnEnd",
             when="slotQuestionAsked"),
    FlowEdge(id="edge.13", source="node.silenceHandler", target="node.turnEnd"),
    FlowEdge(id="edge.14", source="node.scenarioResponse", target="node.turnEnd"),
    FlowEdge(id="edge.15", source="node.llmFallback", target="node.turnEnd"),
    FlowEdge(id="edge.16", source="node.fastPathOffer", target="node.turnEnd"),
    FlowEdge(id="edge.17", source="node.bookingComplete", target="node.turnEnd"),
)

_NODES_BY_ID = {node.id: node for node in NODES}


def get_node(node_id: str) -> FlowNode | None:
    return _NODES_BY_ID.get(node_id)


def find_unreachable_nodes() -> list[str]:
    """Node ids that cannot be reached from the entry node."""
    visited: set[str] = set()
    queue = [ENTRY_NODE_ID]
    while queue:
        current = queue.pop(0)
        if current in visited:
            continue
        visited.add(current)
        queue.extend(e.target for e in EDGES if e.source == current and e.target not in visited)
    return [node.id for node in NODES if node.id not in visited]


def find_invalid_edges() -> list[str]:
    """Edge ids whose endpoints are not declared nodes."""
    return [
        edge.id
        for edge in EDGES
        if edge.source not in _NODES_BY_ID or edge.target not in _NODES_BY_ID
    ]
