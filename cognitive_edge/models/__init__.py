"""Data models for the Cognitive Edge Protocol service"""

from .outcome import (
    GENERIC_FAILURE_MESSAGE,
    TurnError,
    TurnOutcome,
)
from .protocol import (
    CRITICAL_PHASES,
    DEFAULT_PHASE_ROLES,
    PHASE_ORDER,
    AIRole,
    KeyStatement,
    Phase,
    PhaseInfo,
    ProtocolTurnPayload,
    ProtocolTurnRequest,
    ProtocolTurnResult,
    ResponderReply,
    RoleTransition,
    SessionHistoryEntry,
    TurnContext,
)

__all__ = [
    # Phase models
    "Phase",
    "PHASE_ORDER",
    "CRITICAL_PHASES",
    "AIRole",
    "DEFAULT_PHASE_ROLES",
    "PhaseInfo",
    # Turn models
    "SessionHistoryEntry",
    "ProtocolTurnPayload",
    "ProtocolTurnRequest",
    "ProtocolTurnResult",
    "TurnContext",
    "ResponderReply",
    "RoleTransition",
    "KeyStatement",
    # Outcome models
    "TurnOutcome",
    "TurnError",
    "GENERIC_FAILURE_MESSAGE",
]
