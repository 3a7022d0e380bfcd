# ABOUTME: Unit tests for protocol models and the TurnOutcome result type.
# ABOUTME: Validates phase ordering, identifiers, camelCase aliases and outcome construction.

import pytest
from pydantic import ValidationError

from cognitive_edge.models.outcome import TurnOutcome
from cognitive_edge.models.protocol import (
    CRITICAL_PHASES,
    DEFAULT_PHASE_ROLES,
    PHASE_ORDER,
    AIRole,
    KeyStatement,
    Phase,
    ProtocolTurnPayload,
    ProtocolTurnResult,
)


class TestPhase:
    """Test suite for the Phase enum"""

    def test_order_and_count(self):
        assert len(PHASE_ORDER) == 7
        assert PHASE_ORDER[0] is Phase.STABILIZE_AND_STRUCTURE
        assert PHASE_ORDER[-1] is Phase.COMPLETE
        assert [phase.ordinal for phase in PHASE_ORDER] == list(range(7))

    def test_identifiers(self):
        assert Phase.STABILIZE_AND_STRUCTURE.identifier == "StabilizeAndStructure"
        assert Phase.EMPOWER_AND_LEGACY_STATEMENT.identifier == "EmpowerAndLegacyStatement"
        assert Phase.COMPLETE.identifier == "Complete"

    def test_wire_value_round_trip(self):
        for phase in PHASE_ORDER:
            assert Phase(phase.value) is phase

    def test_only_complete_is_terminal(self):
        assert [phase for phase in PHASE_ORDER if phase.is_terminal] == [Phase.COMPLETE]

    def test_critical_phases(self):
        assert CRITICAL_PHASES == {Phase.VALIDATE_EMOTION_REFRAME, Phase.EMPOWER_AND_LEGACY_STATEMENT}

    def test_every_working_phase_has_role(self):
        assert set(DEFAULT_PHASE_ROLES) == set(PHASE_ORDER) - {Phase.COMPLETE}


class TestWireModels:
    """Test suite for camelCase request and result models"""

    def test_payload_accepts_camel_case(self):
        payload = ProtocolTurnPayload.model_validate({
            "userInput": "hi",
            "phase": 2,
            "attemptCount": 3,
            "sessionHistory": [],
            "currentAIRole": "supporter",
        })

        assert payload.user_input == "hi"
        assert payload.attempt_count == 3
        assert payload.current_ai_role is AIRole.SUPPORTER

    def test_payload_rejects_unknown_role(self):
        with pytest.raises(ValidationError):
            ProtocolTurnPayload.model_validate({"userInput": "hi", "currentAIRole": "oracle"})

    def test_result_serializes_camel_case(self):
        result = ProtocolTurnResult(
            response="ok",
            next_phase=Phase.COMPLETE,
            is_complete=True,
            key_statement=KeyStatement(
                type="legacy_statement",
                statement="I build things that outlast me",
                significance="closing statement",
            ),
        )

        dumped = result.model_dump(mode="json", by_alias=True, exclude_none=True)

        assert dumped["nextPhase"] == "Complete"
        assert dumped["isComplete"] is True
        assert dumped["keyStatement"]["type"] == "legacy_statement"
        assert "discoveredMentalModel" not in dumped


class TestTurnOutcome:
    """Test suite for TurnOutcome"""

    def test_success(self):
        result = ProtocolTurnResult(response="ok", next_phase=Phase.LISTEN_FOR_CORE_FRAME)

        outcome = TurnOutcome.success(result)

        assert outcome.ok is True
        assert outcome.error is None

    def test_failure(self):
        outcome = TurnOutcome.failure("invalid_phase", "Invalid phase: 'x'", 400)

        assert outcome.ok is False
        assert outcome.result is None
        assert outcome.error.status_code == 400
        assert outcome.error.retryable is False

    def test_server_failures_are_retryable(self):
        outcome = TurnOutcome.failure("responder_timeout", "Failed to process protocol request", 500)

        assert outcome.error.retryable is True

    def test_unknown_code_rejected(self):
        with pytest.raises(ValidationError):
            TurnOutcome.failure("teapot", "nope", 418)
