# ABOUTME: Exception definitions for phase validation in the orchestration layer.
# ABOUTME: Defines input-validation errors (surfaced as 400) and the locally recovered invalid proposed phase.


class ProtocolValidationError(Exception):
    """Base class for turn input errors; never retried"""

    code = "invalid_input"
    field = ""


class MissingPhase(ProtocolValidationError):
    """Raised when the phase field is absent or empty"""

    code = "missing_phase"
    field = "phase"


class InvalidPhaseName(ProtocolValidationError):
    """Raised when a phase string does not name an enumerated phase"""

    code = "invalid_phase"
    field = "phase"


class InvalidUserInput(ProtocolValidationError):
    """Raised when userInput is missing, blank or not a string"""

    code = "invalid_user_input"
    field = "userInput"


class InvalidProposedPhase(Exception):
    """Raised when a responder proposes an unrecognized next phase"""

    def __init__(self, proposed: object):
        super().__init__(f"Responder proposed invalid next phase: {proposed!r}")
        self.proposed = proposed
