# ABOUTME: Unit tests for OpenAIResponder and LLMClient with a mocked AsyncOpenAI client.
# ABOUTME: Tests prompt construction, JSON reply parsing, empty-output failures and SDK error translation.

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import APITimeoutError

from cognitive_edge.agents.exceptions import LLMCallFailed, ResponderFailure, ResponderTimeout
from cognitive_edge.agents.llm_client import LLMClient
from cognitive_edge.agents.openai_responder import OpenAIResponder
from cognitive_edge.models.protocol import AIRole, Phase, TurnContext


@pytest.fixture
def reframe_context() -> TurnContext:
    return TurnContext(
        phase=Phase.VALIDATE_EMOTION_REFRAME,
        user_input="I feel stuck",
        attempt_count=2,
        force_example=True,
        role=AIRole.SUPPORTER,
    )


class TestOpenAIResponder:
    """Test suite for OpenAIResponder"""

    @pytest.mark.asyncio
    async def test_parses_reply(self, mock_openai_client, reframe_context):
        responder = OpenAIResponder(mock_openai_client, model="gpt-4o-mini", temperature=0.3)

        reply = await responder.respond(reframe_context)

        assert reply.text.startswith("It sounds like")
        assert reply.proposed_next_phase == "Listen for Core Frame"
        assert reply.updated_history is None

    @pytest.mark.asyncio
    async def test_request_uses_json_mode_and_settings(self, mock_openai_client, reframe_context):
        responder = OpenAIResponder(mock_openai_client, model="gpt-4o-mini", temperature=0.3)

        await responder.respond(reframe_context)

        kwargs = mock_openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.3
        assert kwargs["response_format"] == {"type": "json_object"}
        system, user = kwargs["messages"]
        assert system["role"] == "system"
        assert "Empower & Legacy Statement" in system["content"]
        assert "CURRENT PHASE: Validate Emotion / Reframe" in user["content"]
        assert "REQUIRED:" in user["content"]
        assert "I feel stuck" in user["content"]

    @pytest.mark.asyncio
    async def test_invalid_next_phase_passed_through_unvalidated(self, mock_openai_client, reframe_context):
        mock_openai_client.respond_with(json.dumps({"response": "ok", "nextPhase": "Phase 9"}))
        responder = OpenAIResponder(mock_openai_client)

        reply = await responder.respond(reframe_context)

        assert reply.proposed_next_phase == "Phase 9"

    @pytest.mark.asyncio
    async def test_optional_fields_parsed(self, mock_openai_client, reframe_context):
        mock_openai_client.respond_with(json.dumps({
            "response": "What if this is clarity, not delay?",
            "nextPhase": "Provide Grounded Support",
            "discoveredMentalModel": "10,950 days left",
            "aiRoleTransition": {"newRole": "supporter", "reason": "user is exhausted"},
            "keyStatement": {
                "type": "reframed_belief",
                "statement": "I am choosing what matters",
                "significance": "first empowering belief",
            },
            "tangibleAsset": "",
        }))
        responder = OpenAIResponder(mock_openai_client)

        reply = await responder.respond(reframe_context)

        assert reply.discovered_mental_model == "10,950 days left"
        assert reply.ai_role_transition.new_role is AIRole.SUPPORTER
        assert reply.key_statement.type == "reframed_belief"
        assert reply.tangible_asset is None

    @pytest.mark.asyncio
    async def test_malformed_optional_fields_dropped(self, mock_openai_client, reframe_context):
        mock_openai_client.respond_with(json.dumps({
            "response": "ok",
            "nextPhase": "Complete",
            "keyStatement": {"type": "unknown_kind", "statement": "x"},
            "aiRoleTransition": "supporter",
        }))
        responder = OpenAIResponder(mock_openai_client)

        reply = await responder.respond(reframe_context)

        assert reply.key_statement is None
        assert reply.ai_role_transition is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   "])
    async def test_empty_output_raises_failure(self, mock_openai_client, reframe_context, content):
        mock_openai_client.respond_with(content)
        responder = OpenAIResponder(mock_openai_client)

        with pytest.raises(ResponderFailure, match="empty"):
            await responder.respond(reframe_context)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [
        "not json at all",
        json.dumps(["response", "list"]),
        json.dumps({"nextPhase": "Complete"}),
        json.dumps({"response": "   "}),
    ])
    async def test_unusable_output_raises_failure(self, mock_openai_client, reframe_context, content):
        mock_openai_client.respond_with(content)
        responder = OpenAIResponder(mock_openai_client)

        with pytest.raises(ResponderFailure):
            await responder.respond(reframe_context)


class TestLLMClient:
    """Test suite for the LLMClient wrapper"""

    @pytest.mark.asyncio
    async def test_call_returns_content(self, mock_openai_client):
        client = LLMClient(mock_openai_client)

        content = await client.call("system", "user", timeout=30.0)

        assert "response" in json.loads(content)
        kwargs = mock_openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["timeout"] == 30.0
        assert "response_format" not in kwargs

    @pytest.mark.asyncio
    async def test_no_choices_returns_empty_string(self):
        openai_client = MagicMock()
        openai_client.chat.completions.create = AsyncMock(return_value=MagicMock(choices=[]))

        assert await LLMClient(openai_client).call("system", "user") == ""

    @pytest.mark.asyncio
    async def test_sdk_timeout_becomes_responder_timeout(self):
        openai_client = MagicMock()
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        openai_client.chat.completions.create = AsyncMock(side_effect=APITimeoutError(request=request))

        with pytest.raises(ResponderTimeout):
            await LLMClient(openai_client).call("system", "user")

    @pytest.mark.asyncio
    async def test_other_errors_become_llm_call_failed(self):
        openai_client = MagicMock()
        openai_client.chat.completions.create = AsyncMock(side_effect=RuntimeError("connection reset"))

        with pytest.raises(LLMCallFailed, match="connection reset"):
            await LLMClient(openai_client).call("system", "user")
