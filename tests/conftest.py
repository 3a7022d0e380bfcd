# ABOUTME: Shared pytest fixtures for all test modules (unit and integration).
# ABOUTME: Provides a scripted stub responder, mock OpenAI and Redis clients, and turn service factories.

import json
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from cognitive_edge.models.protocol import (
    PHASE_ORDER,
    Phase,
    ProtocolTurnPayload,
    ResponderReply,
    TurnContext,
)
from cognitive_edge.orchestration.phase_controller import PhaseController
from cognitive_edge.orchestration.turn_service import ProtocolTurnService
from cognitive_edge.storage.session_store import InMemorySessionStore


# --- Stub Responders ---

class ScriptedResponder:
    """
    Deterministic TurnResponder for tests.

    Records every TurnContext it receives. Replies come from `script` in
    order (ResponderReply, dict of ResponderReply fields, or an exception
    instance to raise); once exhausted it advances one phase per turn.
    """

    def __init__(self, script: list[Any] | None = None):
        self.script = list(script or [])
        self.contexts: list[TurnContext] = []

    @property
    def calls(self) -> int:
        return len(self.contexts)

    @property
    def last_context(self) -> TurnContext:
        return self.contexts[-1]

    async def respond(self, context: TurnContext) -> ResponderReply:
        self.contexts.append(context)

        if self.script:
            step = self.script.pop(0)
            if isinstance(step, BaseException):
                raise step
            if isinstance(step, ResponderReply):
                return step
            return ResponderReply(**step)

        next_index = min(context.phase.ordinal + 1, len(PHASE_ORDER) - 1)
        return ResponderReply(
            text=f"Reply in {context.phase.value}",
            proposed_next_phase=PHASE_ORDER[next_index].value,
        )


@pytest.fixture
def scripted_responder() -> Callable[..., ScriptedResponder]:
    """Factory fixture for scripted responders"""
    def _make(*script: Any) -> ScriptedResponder:
        return ScriptedResponder(list(script))
    return _make


@pytest.fixture
def stub_responder() -> ScriptedResponder:
    """Responder that always advances one phase"""
    return ScriptedResponder()


# --- Core Fixtures ---

@pytest.fixture
def controller() -> PhaseController:
    return PhaseController()


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def make_service(session_store):
    """Factory fixture building a turn service around a given responder"""
    def _make(responder, store=session_store) -> ProtocolTurnService:
        return ProtocolTurnService(responder=responder, controller=PhaseController(), store=store)
    return _make


@pytest.fixture
def make_payload():
    """Factory fixture for raw turn payloads"""
    def _make(**kwargs) -> ProtocolTurnPayload:
        defaults: dict[str, Any] = {
            "user_input": "I feel stuck",
            "phase": Phase.STABILIZE_AND_STRUCTURE.value,
        }
        defaults.update(kwargs)
        return ProtocolTurnPayload(**defaults)
    return _make


# --- Mock Client Fixtures ---

@pytest.fixture
def mock_openai_client():
    """Mock AsyncOpenAI client returning a JSON protocol reply"""
    client = MagicMock()

    def respond_with(content: str | None):
        client.chat.completions.create = AsyncMock(
            return_value=MagicMock(
                choices=[MagicMock(message=MagicMock(content=content))],
                model="gpt-4o",
            )
        )

    respond_with(json.dumps({
        "response": "It sounds like a lot is landing on you at once. Let's list what is in front of you.",
        "nextPhase": Phase.LISTEN_FOR_CORE_FRAME.value,
    }))
    client.respond_with = respond_with
    return client


@pytest.fixture
def mock_redis_client():
    """Mock Redis client backed by a dict for get/setex/delete"""
    redis = MagicMock()
    data: dict[str, bytes] = {}

    def _setex(key, ttl, value):
        data[key] = value.encode("utf-8") if isinstance(value, str) else value
        return True

    redis.get = MagicMock(side_effect=lambda key: data.get(key))
    redis.setex = MagicMock(side_effect=_setex)
    redis.delete = MagicMock(side_effect=lambda key: 1 if data.pop(key, None) is not None else 0)
    redis.data = data

    return redis
