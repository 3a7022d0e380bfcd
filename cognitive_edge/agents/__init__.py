"""Turn responder boundary: protocol, OpenAI implementation and retry decorator"""

from cognitive_edge.agents.exceptions import (
    LLMCallFailed,
    ResponderError,
    ResponderFailure,
    ResponderTimeout,
)
from cognitive_edge.agents.llm_client import LLMClient
from cognitive_edge.agents.openai_responder import OpenAIResponder
from cognitive_edge.agents.responder import TurnResponder
from cognitive_edge.agents.responder_retry import RetryingResponder

__all__ = [
    "TurnResponder",
    "OpenAIResponder",
    "RetryingResponder",
    "LLMClient",
    "ResponderError",
    "ResponderTimeout",
    "ResponderFailure",
    "LLMCallFailed",
]
