# ABOUTME: PhaseController for the six-phase Cognitive Edge Protocol plus terminal Complete state.
# ABOUTME: Normalizes phase input, applies the critical-phase example policy and guards responder transitions.

from typing import Any

from loguru import logger

from cognitive_edge.models.protocol import (
    CRITICAL_PHASES,
    DEFAULT_PHASE_ROLES,
    PHASE_ORDER,
    AIRole,
    Phase,
    PhaseInfo,
    ProtocolTurnPayload,
    ProtocolTurnRequest,
)
from cognitive_edge.orchestration.exceptions import (
    InvalidPhaseName,
    InvalidProposedPhase,
    InvalidUserInput,
    MissingPhase,
)

# Attempt number from which critical phases switch to offering an example
FORCE_EXAMPLE_ATTEMPT = 2

_PHASES_BY_NAME: dict[str, Phase] = {
    **{phase.value: phase for phase in PHASE_ORDER},
    **{phase.identifier: phase for phase in PHASE_ORDER},
}


class PhaseController:
    """
    Stateless transition logic for the protocol phase chain.

    The chain is linear: six working phases followed by the terminal
    Complete state. Transitions are proposed by an external responder and
    validated here; nothing is persisted between calls.
    """

    last_index = len(PHASE_ORDER) - 1

    def normalize_phase(self, value: Any) -> Phase:
        """
        Convert a phase designation into a Phase.

        Integers are clamped into [0, last_index]; out-of-range numbers are
        accepted rather than rejected. Strings must exactly match a wire
        name ("Validate Emotion / Reframe") or identifier
        ("ValidateEmotionReframe").

        Args:
            value: Phase member, ordinal or name

        Returns:
            The matching Phase

        Raises:
            MissingPhase: If value is None or an empty string
            InvalidPhaseName: If value is an unknown name or unsupported type
        """
        if value is None:
            raise MissingPhase("Missing required field: phase")

        if isinstance(value, Phase):
            return value

        # bool is an int subclass but never a meaningful ordinal
        if isinstance(value, bool):
            raise InvalidPhaseName(f"Invalid phase: {value!r}")

        if isinstance(value, int):
            clamped = max(0, min(value, self.last_index))
            if clamped != value:
                logger.debug(f"Clamped out-of-range phase {value} to {clamped}")
            return PHASE_ORDER[clamped]

        if isinstance(value, str):
            if not value.strip():
                raise MissingPhase("Missing required field: phase")
            phase = _PHASES_BY_NAME.get(value)
            if phase is None:
                raise InvalidPhaseName(
                    f"Invalid phase: '{value}'. "
                    f"Must be one of: {', '.join(p.value for p in PHASE_ORDER)}"
                )
            return phase

        raise InvalidPhaseName(f"Invalid phase type: {type(value).__name__}")

    def is_critical_phase(self, phase: Phase) -> bool:
        return phase in CRITICAL_PHASES

    def should_force_example(self, phase: Phase, attempt_count: int) -> bool:
        """True when the responder must offer a concrete example"""
        return self.is_critical_phase(phase) and attempt_count >= FORCE_EXAMPLE_ATTEMPT

    def resolve_next_phase(self, current: Phase, proposed: Any) -> Phase:
        """
        Validate the next phase proposed by a responder.

        Complete absorbs every transition. An unrecognized proposal is logged
        and replaced by the current phase so the turn still succeeds.

        Args:
            current: Phase the turn was processed in
            proposed: Raw phase value returned by the responder

        Returns:
            The phase the conversation continues in
        """
        if current.is_terminal:
            return Phase.COMPLETE

        try:
            return self._parse_proposed(proposed)
        except InvalidProposedPhase as e:
            logger.bind(phase=current.value, proposed=repr(proposed)).warning(
                f"{e}. Defaulting to current phase: '{current.value}'"
            )
            return current

    def _parse_proposed(self, proposed: Any) -> Phase:
        # Proposals are strict: no clamping and no empty values
        if isinstance(proposed, int) and not isinstance(proposed, bool):
            if not 0 <= proposed <= self.last_index:
                raise InvalidProposedPhase(proposed)
            return PHASE_ORDER[proposed]
        try:
            return self.normalize_phase(proposed)
        except (MissingPhase, InvalidPhaseName) as e:
            raise InvalidProposedPhase(proposed) from e

    def normalize_attempt_count(self, value: Any) -> int:
        """Attempt counts default to 1 when absent, non-integer or below 1"""
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            return 1
        return value

    def advance_attempt(self, current: Phase, next_phase: Phase, previous_attempt_count: Any) -> int:
        """
        Compute the attempt count for the following turn.

        Returns previous + 1 when the conversation stays in the same phase,
        and 1 when the phase changed.
        """
        if next_phase != current:
            return 1
        return self.normalize_attempt_count(previous_attempt_count) + 1

    def default_role(self, phase: Phase) -> AIRole | None:
        return DEFAULT_PHASE_ROLES.get(phase)

    def phase_info(self, phase: Phase) -> PhaseInfo:
        return PhaseInfo(
            ordinal=phase.ordinal,
            name=phase.value,
            identifier=phase.identifier,
            is_terminal=phase.is_terminal,
            is_critical=self.is_critical_phase(phase),
            default_role=self.default_role(phase),
        )

    def describe_phases(self) -> list[PhaseInfo]:
        return [self.phase_info(phase) for phase in PHASE_ORDER]

    def build_request(self, payload: ProtocolTurnPayload) -> ProtocolTurnRequest:
        """
        Validate a raw payload into a typed ProtocolTurnRequest.

        Raises:
            InvalidUserInput: If userInput is missing, blank or not a string
            MissingPhase: If phase is absent
            InvalidPhaseName: If phase is not a recognized name
        """
        user_input = payload.user_input
        if not isinstance(user_input, str) or not user_input.strip():
            raise InvalidUserInput("Missing required field: userInput")

        phase = self.normalize_phase(payload.phase)

        return ProtocolTurnRequest(
            user_input=user_input,
            phase=phase,
            attempt_count=self.normalize_attempt_count(payload.attempt_count),
            session_history=list(payload.session_history or []),
            discovered_mental_model=payload.discovered_mental_model,
            cognitive_edge_identified=payload.cognitive_edge_identified,
            current_ai_role=payload.current_ai_role,
        )
