"""Cognitive Edge Protocol: six-phase reflective conversation service"""

from cognitive_edge.models.protocol import Phase
from cognitive_edge.orchestration.phase_controller import PhaseController
from cognitive_edge.orchestration.turn_service import ProtocolTurnService

__all__ = ["Phase", "PhaseController", "ProtocolTurnService"]

__version__ = "0.1.0"
