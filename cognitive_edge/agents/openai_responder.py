# ABOUTME: Production TurnResponder that asks an OpenAI chat model for the protocol reply and next phase.
# ABOUTME: Parses the model's JSON object into a ResponderReply; empty or malformed output raises ResponderFailure.

import json

from loguru import logger
from openai import AsyncOpenAI
from pydantic import ValidationError

from cognitive_edge.agents.exceptions import ResponderFailure
from cognitive_edge.agents.llm_client import LLMClient
from cognitive_edge.config.prompts import TurnPromptTemplate, build_system_prompt
from cognitive_edge.models.protocol import (
    KeyStatement,
    ResponderReply,
    RoleTransition,
    TurnContext,
)


class OpenAIResponder:
    """
    TurnResponder backed by the OpenAI chat completions API.

    The proposed next phase is passed through unvalidated; PhaseController
    decides whether to accept it.
    """

    def __init__(
        self,
        openai_client: AsyncOpenAI,
        model: str = "gpt-4o",
        temperature: float = 0.7,
    ):
        """
        Initialize OpenAI responder.

        Args:
            openai_client: AsyncOpenAI client for LLM calls
            model: OpenAI model to use (default: gpt-4o)
            temperature: LLM temperature for response variation (default: 0.7)
        """
        self._llm_client = LLMClient(openai_client, model)
        self.temperature = temperature

    async def respond(self, context: TurnContext) -> ResponderReply:
        """
        Produce the reply for one protocol turn.

        Raises:
            ResponderFailure: When output is empty, not JSON, or lacks a response
            ResponderTimeout: When the SDK request times out
            LLMCallFailed: When the API call fails
        """
        user_prompt = TurnPromptTemplate(context=context).build_prompt()

        content = await self._llm_client.call(
            build_system_prompt(),
            user_prompt,
            temperature=self.temperature,
            response_format={"type": "json_object"},
        )

        if not content.strip():
            raise ResponderFailure("Model returned an empty response")

        return self.parse_reply(content)

    def parse_reply(self, content: str) -> ResponderReply:
        """Convert the model's JSON object into a ResponderReply"""
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ResponderFailure(f"Model returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ResponderFailure("Model returned JSON that is not an object")

        text = data.get("response")
        if not isinstance(text, str) or not text.strip():
            raise ResponderFailure("Model response is missing the 'response' field")

        return ResponderReply(
            text=text,
            proposed_next_phase=data.get("nextPhase"),
            discovered_mental_model=_optional_str(data.get("discoveredMentalModel")),
            cognitive_edge_insight=_optional_str(data.get("cognitiveEdgeInsight")),
            ai_role_transition=_optional_model(RoleTransition, data.get("aiRoleTransition")),
            key_statement=_optional_model(KeyStatement, data.get("keyStatement")),
            tangible_asset=_optional_str(data.get("tangibleAsset")),
        )


def _optional_str(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _optional_model(model_cls, value: object):
    # Optional extras are dropped rather than failing the whole turn
    if not isinstance(value, dict):
        return None
    try:
        return model_cls.model_validate(value)
    except ValidationError as e:
        logger.debug(f"Ignoring malformed {model_cls.__name__} from model: {e}")
        return None
