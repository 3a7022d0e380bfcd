# ABOUTME: Pydantic models and enums for the Cognitive Edge Protocol phase cycle.
# ABOUTME: Defines the seven ordered phases, AI roles, turn requests, responder replies and turn results.

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

# Opaque caller-owned history record (role + text + phase by convention)
SessionHistoryEntry = dict[str, Any]


class Phase(str, Enum):
    """Protocol phases in conversational order; values are the wire names"""
    STABILIZE_AND_STRUCTURE = "Stabilize & Structure"
    LISTEN_FOR_CORE_FRAME = "Listen for Core Frame"
    VALIDATE_EMOTION_REFRAME = "Validate Emotion / Reframe"
    PROVIDE_GROUNDED_SUPPORT = "Provide Grounded Support"
    REFLECTIVE_PATTERN_DISCOVERY = "Reflective Pattern Discovery"
    EMPOWER_AND_LEGACY_STATEMENT = "Empower & Legacy Statement"
    COMPLETE = "Complete"

    @property
    def ordinal(self) -> int:
        return PHASE_ORDER.index(self)

    @property
    def identifier(self) -> str:
        """CamelCase identifier accepted as an input alias"""
        return "".join(part.capitalize() for part in self.name.split("_"))

    @property
    def is_terminal(self) -> bool:
        return self is Phase.COMPLETE


PHASE_ORDER: tuple[Phase, ...] = tuple(Phase)

CRITICAL_PHASES: frozenset[Phase] = frozenset({
    Phase.VALIDATE_EMOTION_REFRAME,
    Phase.EMPOWER_AND_LEGACY_STATEMENT,
})


class AIRole(str, Enum):
    """Facilitator stance the responder adopts for a phase"""
    STRATEGIST = "strategist"
    SUPPORTER = "supporter"
    FACILITATOR = "facilitator"
    DEEP_LISTENER = "deep_listener"
    EMPOWERMENT_COACH = "empowerment_coach"


DEFAULT_PHASE_ROLES: dict[Phase, AIRole] = {
    Phase.STABILIZE_AND_STRUCTURE: AIRole.STRATEGIST,
    Phase.LISTEN_FOR_CORE_FRAME: AIRole.DEEP_LISTENER,
    Phase.VALIDATE_EMOTION_REFRAME: AIRole.SUPPORTER,
    Phase.PROVIDE_GROUNDED_SUPPORT: AIRole.SUPPORTER,
    Phase.REFLECTIVE_PATTERN_DISCOVERY: AIRole.FACILITATOR,
    Phase.EMPOWER_AND_LEGACY_STATEMENT: AIRole.EMPOWERMENT_COACH,
}


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire"""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "use_enum_values": False,
    }


class PhaseInfo(CamelModel):
    """Read-only metadata for a single phase"""

    ordinal: int = Field(ge=0, le=len(PHASE_ORDER) - 1)
    name: str
    identifier: str
    is_terminal: bool
    is_critical: bool
    default_role: AIRole | None = None


class RoleTransition(CamelModel):
    """Responder-reported change of facilitator stance"""

    new_role: AIRole
    reason: str


class KeyStatement(CamelModel):
    """Significant statement captured during a turn"""

    type: Literal["reframed_belief", "legacy_statement", "mental_model", "cognitive_edge"]
    statement: str
    significance: str


class ProtocolTurnPayload(CamelModel):
    """Raw request body before phase and input validation"""

    user_input: Any = None
    phase: Any = None
    attempt_count: Any = None
    session_history: list[SessionHistoryEntry] | None = None
    discovered_mental_model: str | None = None
    cognitive_edge_identified: bool | None = None
    current_ai_role: AIRole | None = Field(default=None, alias="currentAIRole")


class ProtocolTurnRequest(CamelModel):
    """Validated turn request handed to the turn service"""

    user_input: str = Field(min_length=1)
    phase: Phase
    attempt_count: int = Field(default=1, ge=1)
    session_history: list[SessionHistoryEntry] = Field(default_factory=list)

    # Context carried between turns by the caller
    discovered_mental_model: str | None = None
    cognitive_edge_identified: bool | None = None
    current_ai_role: AIRole | None = Field(default=None, alias="currentAIRole")


class TurnContext(BaseModel):
    """Everything a responder needs to produce one reply"""

    phase: Phase
    user_input: str
    session_history: list[SessionHistoryEntry] = Field(default_factory=list)
    attempt_count: int = Field(default=1, ge=1)
    force_example: bool = Field(
        default=False,
        description="Offer a concrete example instead of repeating the question"
    )
    role: AIRole | None = None
    discovered_mental_model: str | None = None
    cognitive_edge_identified: bool | None = None


class ResponderReply(BaseModel):
    """Unvalidated reply from a turn responder"""

    text: str
    proposed_next_phase: Any = None
    updated_history: list[SessionHistoryEntry] | None = None

    discovered_mental_model: str | None = None
    cognitive_edge_insight: str | None = None
    ai_role_transition: RoleTransition | None = None
    key_statement: KeyStatement | None = None
    tangible_asset: str | None = None


class ProtocolTurnResult(CamelModel):
    """Result of one successful protocol turn"""

    response: str
    next_phase: Phase
    session_history: list[SessionHistoryEntry] = Field(default_factory=list)
    next_attempt_count: int = Field(default=1, ge=1)
    is_complete: bool = False

    discovered_mental_model: str | None = None
    cognitive_edge_insight: str | None = None
    ai_role_transition: RoleTransition | None = None
    key_statement: KeyStatement | None = None
    tangible_asset: str | None = None
