# ABOUTME: ProtocolTurnService executing one Cognitive Edge Protocol turn from request to validated result.
# ABOUTME: Builds responder context, applies PhaseController guards, and converts failures into TurnOutcome values.

import asyncio
import time
from datetime import datetime, timezone

from loguru import logger

from cognitive_edge.agents.exceptions import LLMCallFailed, ResponderError, ResponderTimeout
from cognitive_edge.agents.responder import TurnResponder
from cognitive_edge.models.outcome import GENERIC_FAILURE_MESSAGE, TurnOutcome
from cognitive_edge.models.protocol import (
    Phase,
    ProtocolTurnPayload,
    ProtocolTurnRequest,
    ProtocolTurnResult,
    ResponderReply,
    SessionHistoryEntry,
    TurnContext,
)
from cognitive_edge.orchestration.exceptions import ProtocolValidationError
from cognitive_edge.orchestration.phase_controller import PhaseController
from cognitive_edge.orchestration.session_lock import SessionTurnLock
from cognitive_edge.storage.session_store import SessionState, SessionStore
from cognitive_edge.utils.logging import log_phase_transition, log_turn_event

HEALTH_CHECK_INPUT = "I'm feeling a bit overwhelmed with work lately."


class ProtocolTurnService:
    """
    High-level interface for executing protocol turns.

    Stateless turns (process_turn) take all state from the caller.
    Session-backed turns (process_session_turn) load and persist state
    through a SessionStore and are serialized per session id.
    """

    def __init__(
        self,
        responder: TurnResponder,
        controller: PhaseController | None = None,
        store: SessionStore | None = None,
    ):
        """
        Initialize turn service.

        Args:
            responder: Capability producing replies (usually a RetryingResponder)
            controller: Phase transition logic (default: new PhaseController)
            store: Session state persistence for session-backed turns
        """
        self.responder = responder
        self.controller = controller or PhaseController()
        self.store = store
        self.session_lock = SessionTurnLock()

    async def process_turn(
        self,
        request: ProtocolTurnRequest | ProtocolTurnPayload,
        session_id: str | None = None,
    ) -> TurnOutcome:
        """
        Execute one protocol turn.

        Args:
            request: Validated request, or raw payload to validate first
            session_id: Optional session identifier for log context

        Returns:
            TurnOutcome with the result, or a 400/500 error description
        """
        if isinstance(request, ProtocolTurnPayload):
            try:
                request = self.controller.build_request(request)
            except ProtocolValidationError as e:
                logger.info(f"Rejected protocol turn: {e}")
                return TurnOutcome.failure(e.code, str(e), 400)

        log_turn_event(
            "Processing protocol turn",
            phase=request.phase.value,
            attempt_count=request.attempt_count,
            session_id=session_id,
            user_input_length=len(request.user_input),
            history_length=len(request.session_history),
        )

        context = self.build_context(request)
        started = time.monotonic()

        try:
            reply = await self.responder.respond(context)
        except (ResponderError, LLMCallFailed) as e:
            logger.bind(phase=request.phase.value, session_id=session_id).error(
                f"Protocol turn failed after retries: {type(e).__name__}: {e}"
            )
            code = "responder_timeout" if isinstance(e, ResponderTimeout) else "responder_failure"
            return TurnOutcome.failure(code, GENERIC_FAILURE_MESSAGE, 500)

        result = self.build_result(request, reply)

        log_phase_transition(
            from_phase=request.phase.value,
            to_phase=result.next_phase.value,
            attempt_count=result.next_attempt_count,
            session_id=session_id,
            duration_ms=(time.monotonic() - started) * 1000,
        )

        return TurnOutcome.success(result)

    def build_context(self, request: ProtocolTurnRequest) -> TurnContext:
        """Derive the responder context, including the force-example policy"""
        phase = request.phase
        return TurnContext(
            phase=phase,
            user_input=request.user_input,
            session_history=list(request.session_history),
            attempt_count=request.attempt_count,
            force_example=self.controller.should_force_example(phase, request.attempt_count),
            role=request.current_ai_role or self.controller.default_role(phase),
            discovered_mental_model=request.discovered_mental_model,
            cognitive_edge_identified=request.cognitive_edge_identified,
        )

    def build_result(self, request: ProtocolTurnRequest, reply: ResponderReply) -> ProtocolTurnResult:
        next_phase = self.controller.resolve_next_phase(request.phase, reply.proposed_next_phase)

        return ProtocolTurnResult(
            response=reply.text,
            next_phase=next_phase,
            session_history=self._next_history(request, reply, next_phase),
            next_attempt_count=self.controller.advance_attempt(
                request.phase, next_phase, request.attempt_count
            ),
            is_complete=next_phase.is_terminal,
            discovered_mental_model=reply.discovered_mental_model or request.discovered_mental_model,
            cognitive_edge_insight=reply.cognitive_edge_insight,
            ai_role_transition=reply.ai_role_transition,
            key_statement=reply.key_statement,
            tangible_asset=reply.tangible_asset,
        )

    def _next_history(
        self,
        request: ProtocolTurnRequest,
        reply: ResponderReply,
        next_phase: Phase,
    ) -> list[SessionHistoryEntry]:
        if reply.updated_history is not None:
            return list(reply.updated_history)

        return [
            *request.session_history,
            {"role": "user", "text": request.user_input, "phase": request.phase.value},
            {"role": "assistant", "text": reply.text, "phase": next_phase.value},
        ]

    async def process_session_turn(self, session_id: str, user_input: str) -> TurnOutcome:
        """
        Execute a turn against stored session state.

        State is saved only when the turn succeeds, so failed turns leave the
        stored phase, attempt count and history untouched.

        Raises:
            RuntimeError: When the service was built without a SessionStore
            SessionStoreError: When session state cannot be loaded or saved
        """
        if self.store is None:
            raise RuntimeError(
                "ProtocolTurnService requires a SessionStore for session-backed turns. "
                "Provide one in the constructor."
            )

        async with self.session_lock.hold(session_id):
            state = await asyncio.to_thread(self.store.load, session_id)
            if state is None:
                state = SessionState(session_id=session_id)
                logger.info(f"Starting new protocol session {session_id}")

            payload = ProtocolTurnPayload(
                user_input=user_input,
                phase=state.phase,
                attempt_count=state.attempt_count,
                session_history=state.session_history,
                discovered_mental_model=state.discovered_mental_model,
            )
            outcome = await self.process_turn(payload, session_id=session_id)

            if outcome.ok and outcome.result is not None:
                result = outcome.result
                new_state = SessionState(
                    session_id=session_id,
                    phase=result.next_phase,
                    attempt_count=result.next_attempt_count,
                    session_history=result.session_history,
                    discovered_mental_model=result.discovered_mental_model,
                )
                await asyncio.to_thread(self.store.save, new_state)

            return outcome

    async def load_session(self, session_id: str) -> SessionState | None:
        if self.store is None:
            return None
        return await asyncio.to_thread(self.store.load, session_id)

    async def reset_session(self, session_id: str) -> bool:
        if self.store is None:
            return False
        async with self.session_lock.hold(session_id):
            return await asyncio.to_thread(self.store.delete, session_id)

    async def health_check(self) -> dict:
        """
        Run a canned first-phase turn through the responder.

        Returns:
            Dict with status ("healthy"/"unhealthy"), timestamp, response time
            and a summary of the test turn
        """
        started = time.monotonic()
        request = ProtocolTurnRequest(
            user_input=HEALTH_CHECK_INPUT,
            phase=Phase.STABILIZE_AND_STRUCTURE,
            attempt_count=1,
        )
        outcome = await self.process_turn(request)
        response_time_ms = round((time.monotonic() - started) * 1000, 1)
        timestamp = datetime.now(timezone.utc).isoformat()

        if not outcome.ok or outcome.result is None:
            return {
                "status": "unhealthy",
                "timestamp": timestamp,
                "response_time_ms": response_time_ms,
                "error": {"code": outcome.error.code if outcome.error else "unknown"},
            }

        result = outcome.result
        return {
            "status": "healthy",
            "timestamp": timestamp,
            "response_time_ms": response_time_ms,
            "test_result": {
                "has_response": bool(result.response),
                "response_length": len(result.response),
                "next_phase": result.next_phase.value,
                "session_history_length": len(result.session_history),
            },
        }
