# ABOUTME: Orchestration layer exports for phase control and protocol turn execution.
# ABOUTME: Provides PhaseController, ProtocolTurnService and the per-session turn lock.

from cognitive_edge.orchestration.exceptions import (
    InvalidPhaseName,
    InvalidProposedPhase,
    InvalidUserInput,
    MissingPhase,
    ProtocolValidationError,
)
from cognitive_edge.orchestration.phase_controller import PhaseController
from cognitive_edge.orchestration.session_lock import SessionTurnLock
from cognitive_edge.orchestration.turn_service import ProtocolTurnService

__all__ = [
    "PhaseController",
    "ProtocolTurnService",
    "SessionTurnLock",
    "ProtocolValidationError",
    "MissingPhase",
    "InvalidPhaseName",
    "InvalidUserInput",
    "InvalidProposedPhase",
]
