# ABOUTME: Utility module exports for structured logging.
# ABOUTME: Provides logging.py (loguru sinks plus turn and phase-transition helpers).

from cognitive_edge.utils.logging import (
    log_phase_transition,
    log_turn_event,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "log_turn_event",
    "log_phase_transition",
]
